"""
Conversation Driver
Runs a turn-taking conversation between participants until the termination
policy approves or the turn budget is spent.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Callable, List, Optional, Sequence, Tuple

from ..exceptions import ConversationAlreadyRun, InvalidConfiguration
from .messages import Message
from .termination import TerminationPredicate

logger = logging.getLogger(__name__)


class TerminationReason(str, Enum):
    """Why a conversation run ended."""

    APPROVED = "approved"
    TURN_LIMIT_REACHED = "turn_limit_reached"


class SelectionMode(str, Enum):
    """How the next speaker is chosen."""

    ROUND_ROBIN = "round_robin"
    REPEAT = "repeat"


@dataclass(frozen=True)
class ConversationResult:
    """Outcome of a completed run."""

    reason: TerminationReason
    turns: int
    transcript: Tuple[Message, ...]

    @property
    def approved(self) -> bool:
        return self.reason is TerminationReason.APPROVED

    @property
    def last_message(self) -> Optional[Message]:
        return self.transcript[-1] if self.transcript else None


class ConversationDriver:
    """
    Drives one conversation run.

    A turn is one participant producing exactly one message, and
    ``maximum_iterations`` counts those turns. Messages seeded with
    ``add_message`` (the opening user message) are not turns. A driver is
    single-use: once ``invoke`` has started, start a new conversation with a
    new driver.
    """

    def __init__(
        self,
        participants: Sequence,
        termination: TerminationPredicate,
        maximum_iterations: Optional[int] = None,
        selection: Optional[SelectionMode] = None,
    ):
        """
        Initialize the driver.

        Args:
            participants: Participants in speaking order; each needs a unique
                ``name`` and an async ``generate_next(transcript, speaker)``
            termination: Callable deciding after each message whether to stop
            maximum_iterations: Turn budget; taken from the termination policy
                when omitted
            selection: Speaker selection; round-robin for several participants,
                repetition for one

        Raises:
            InvalidConfiguration: On an empty participant list, duplicate names,
                an unknown turn budget, or repetition with several participants
        """
        participants = list(participants)
        if not participants:
            raise InvalidConfiguration("A conversation needs at least one participant")

        names = [participant.name for participant in participants]
        if len(set(names)) != len(names):
            raise InvalidConfiguration(f"Participant names must be unique: {names}")

        if maximum_iterations is None:
            maximum_iterations = getattr(termination, "maximum_iterations", None)
        if maximum_iterations is None:
            raise InvalidConfiguration(
                "maximum_iterations must be given when the termination policy does not define one"
            )
        if isinstance(maximum_iterations, bool) or not isinstance(maximum_iterations, int) or maximum_iterations < 1:
            raise InvalidConfiguration(
                f"maximum_iterations must be a positive integer, got {maximum_iterations!r}"
            )

        if selection is None:
            selection = SelectionMode.ROUND_ROBIN if len(participants) > 1 else SelectionMode.REPEAT
        selection = SelectionMode(selection)
        if selection is SelectionMode.REPEAT and len(participants) > 1:
            raise InvalidConfiguration("Repeat selection takes exactly one participant")

        self._participants = participants
        self._termination = termination
        self._maximum_iterations = maximum_iterations
        self._selection = selection
        self._transcript: List[Message] = []
        self._turns = 0
        self._reason: Optional[TerminationReason] = None
        self._started = False

    @property
    def participants(self) -> Tuple:
        return tuple(self._participants)

    @property
    def maximum_iterations(self) -> int:
        return self._maximum_iterations

    @property
    def transcript(self) -> Tuple[Message, ...]:
        return tuple(self._transcript)

    @property
    def turns(self) -> int:
        return self._turns

    @property
    def reason(self) -> Optional[TerminationReason]:
        return self._reason

    @property
    def is_complete(self) -> bool:
        return self._reason is not None

    def add_message(self, message: Message):
        """
        Seed the transcript before the run starts.

        Args:
            message: Message to append, usually the opening user message

        Raises:
            ConversationAlreadyRun: If the run has already started
        """
        if self._started:
            raise ConversationAlreadyRun("Messages can only be added before the conversation starts")
        self._transcript.append(message)

    def select_next(self):
        """Return the participant whose turn comes next."""
        if self._selection is SelectionMode.REPEAT:
            return self._participants[0]
        return self._participants[self._turns % len(self._participants)]

    async def invoke(self) -> AsyncIterator[Message]:
        """
        Run the conversation, yielding each participant message as it is appended.

        Yields:
            Participant messages in transcript order

        Raises:
            ConversationAlreadyRun: If this driver was already invoked
            GenerationFailure: Propagated unchanged from a participant
        """
        if self._started:
            raise ConversationAlreadyRun("A conversation driver can only be run once")
        self._started = True

        logger.info(
            f"Starting conversation with {[p.name for p in self._participants]} "
            f"(max {self._maximum_iterations} turns, {self._selection.value})"
        )

        while True:
            speaker = self.select_next()
            logger.debug(f"Turn {self._turns + 1}/{self._maximum_iterations}: {speaker.name}")

            message = await speaker.generate_next(self.transcript, speaker.name)
            self._transcript.append(message)
            self._turns += 1

            # Approval wins over the turn cap when both fire on the same turn.
            if self._termination(self.transcript, speaker.name):
                self._reason = TerminationReason.APPROVED
            elif self._turns >= self._maximum_iterations:
                self._reason = TerminationReason.TURN_LIMIT_REACHED

            yield message

            if self._reason is not None:
                logger.info(f"Conversation ended after {self._turns} turns: {self._reason.value}")
                return

    async def run(self, on_message: Optional[Callable[[Message], None]] = None) -> ConversationResult:
        """
        Run the conversation to completion.

        Args:
            on_message: Called with each participant message as it arrives

        Returns:
            ConversationResult with the termination reason and full transcript
        """
        async for message in self.invoke():
            if on_message is not None:
                on_message(message)
        return ConversationResult(reason=self._reason, turns=self._turns, transcript=self.transcript)
