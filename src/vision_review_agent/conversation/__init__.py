"""
Turn-taking conversation core.

- messages: immutable Message and content variants
- termination: ApprovalTerminationPolicy deciding when a run is over
- driver: ConversationDriver running participants turn by turn
"""

from .messages import AuthorRole, ImageContent, Message, MixedContent, TextContent
from .termination import ApprovalTerminationPolicy
from .driver import ConversationDriver, ConversationResult, SelectionMode, TerminationReason

__all__ = [
    "AuthorRole",
    "ImageContent",
    "Message",
    "MixedContent",
    "TextContent",
    "ApprovalTerminationPolicy",
    "ConversationDriver",
    "ConversationResult",
    "SelectionMode",
    "TerminationReason",
]
