"""
Conversation Messages
Immutable message and content types shared by the driver, the termination
policy and the participants.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class AuthorRole(str, Enum):
    """Role of the entity that authored a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class TextContent:
    """Plain text content."""

    text: str


@dataclass(frozen=True)
class ImageContent:
    """Binary image payload with its MIME type."""

    data: bytes = field(repr=False)
    mime_type: str = "image/jpeg"

    def __post_init__(self):
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError("ImageContent.data must be bytes")
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class MixedContent:
    """An ordered combination of text and image items."""

    items: Tuple[Union[TextContent, ImageContent], ...] = ()

    def __post_init__(self):
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, (TextContent, ImageContent)):
                raise TypeError(
                    f"MixedContent items must be TextContent or ImageContent, got {type(item).__name__}"
                )
        object.__setattr__(self, "items", items)


Content = Union[TextContent, ImageContent, MixedContent]


def content_items(content: Content) -> Tuple[Union[TextContent, ImageContent], ...]:
    """Flatten any content variant into its ordered text/image items."""
    if isinstance(content, MixedContent):
        return content.items
    return (content,)


def extract_text(content: Content) -> Optional[str]:
    """
    Return the text carried by a content value.

    Args:
        content: Any content variant

    Returns:
        The text parts joined by newlines, or None when there is no text at all
    """
    texts = [item.text for item in content_items(content) if isinstance(item, TextContent)]
    if not texts:
        return None
    return "\n".join(texts)


@dataclass(frozen=True)
class Message:
    """
    A single entry of a conversation transcript.

    Attributes:
        role: Who authored the message (user, assistant or system)
        content: Text, image, or a mix of both
        author_name: Name of the participant that produced it, if any
    """

    role: AuthorRole
    content: Content
    author_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "role", AuthorRole(self.role))
        if not isinstance(self.content, (TextContent, ImageContent, MixedContent)):
            raise TypeError(f"Unsupported message content: {type(self.content).__name__}")

    @property
    def text(self) -> Optional[str]:
        """Text of the message, or None for image-only content."""
        return extract_text(self.content)

    @property
    def images(self) -> Tuple[ImageContent, ...]:
        return tuple(item for item in content_items(self.content) if isinstance(item, ImageContent))

    @classmethod
    def user(cls, text: Optional[str] = None, image: Optional[ImageContent] = None) -> "Message":
        """
        Build the user message that opens a conversation.

        Args:
            text: Optional question or instruction
            image: Optional image to analyse

        Returns:
            Message with text, image, or both (text first)
        """
        items = []
        if text:
            items.append(TextContent(text))
        if image is not None:
            items.append(image)
        if not items:
            raise ValueError("A user message needs text, an image, or both")
        if len(items) == 1:
            return cls(AuthorRole.USER, items[0])
        return cls(AuthorRole.USER, MixedContent(tuple(items)))

    @classmethod
    def from_agent(cls, author_name: str, text: str) -> "Message":
        """Build an assistant message attributed to a participant."""
        return cls(AuthorRole.ASSISTANT, TextContent(text), author_name=author_name)
