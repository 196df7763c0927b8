"""
Participant interface for conversation drivers.
"""

from typing import Callable, Protocol, Sequence, runtime_checkable

from ..conversation.messages import Message
from ..exceptions import GenerationFailure

# Receives (speaker name, text chunk) while a reply is streaming
StreamHandler = Callable[[str, str], None]


@runtime_checkable
class Participant(Protocol):
    """Anything that can produce the next message of a conversation."""

    name: str

    async def generate_next(self, transcript: Sequence[Message], speaker: str) -> Message:
        """
        Produce the next message attributed to ``speaker``.

        Raises:
            GenerationFailure: If the message could not be produced
        """
        ...


__all__ = ["Participant", "StreamHandler", "GenerationFailure"]
