"""
Approval Termination Policy
Decides, after each appended message, whether a multi-agent conversation is over.
"""

from typing import Callable, FrozenSet, Iterable, Optional, Sequence

from ..exceptions import InvalidConfiguration
from .messages import Message

DEFAULT_TRIGGER_PHRASE = "APPROVED"
DEFAULT_MAXIMUM_ITERATIONS = 3

# Any callable with this shape can stand in for the policy in a ConversationDriver.
TerminationPredicate = Callable[[Sequence[Message], Optional[str]], bool]


class ApprovalTerminationPolicy:
    """
    Stops a conversation when an authorized participant approves.

    The conversation is over when the most recent message was written by one of
    ``authorized_participants`` and its text contains ``trigger_phrase``,
    ignoring case. ``maximum_iterations`` is carried here so a driver can read
    its turn budget from the policy, but the decision itself only looks at
    message content.
    """

    def __init__(
        self,
        authorized_participants: Iterable[str],
        maximum_iterations: int = DEFAULT_MAXIMUM_ITERATIONS,
        trigger_phrase: str = DEFAULT_TRIGGER_PHRASE,
    ):
        """
        Initialize the policy.

        Args:
            authorized_participants: Names of the participants allowed to approve
            maximum_iterations: Upper bound on participant turns in a run
            trigger_phrase: Case-insensitive substring that signals approval

        Raises:
            InvalidConfiguration: If no participant is authorized, the turn
                budget is not a positive integer, or the trigger phrase is blank
        """
        if isinstance(authorized_participants, str):
            authorized_participants = [authorized_participants]
        authorized = frozenset(authorized_participants)
        if not authorized:
            raise InvalidConfiguration(
                "ApprovalTerminationPolicy needs at least one authorized participant"
            )
        if isinstance(maximum_iterations, bool) or not isinstance(maximum_iterations, int):
            raise InvalidConfiguration(
                f"maximum_iterations must be an integer, got {maximum_iterations!r}"
            )
        if maximum_iterations < 1:
            raise InvalidConfiguration(
                f"maximum_iterations must be positive, got {maximum_iterations}"
            )
        if not trigger_phrase or not trigger_phrase.strip():
            raise InvalidConfiguration("trigger_phrase must not be empty")

        self._authorized = authorized
        self._maximum_iterations = maximum_iterations
        self._trigger_phrase = trigger_phrase
        self._needle = trigger_phrase.casefold()

    @property
    def authorized_participants(self) -> FrozenSet[str]:
        return self._authorized

    @property
    def maximum_iterations(self) -> int:
        return self._maximum_iterations

    @property
    def trigger_phrase(self) -> str:
        return self._trigger_phrase

    def should_terminate(
        self, transcript: Sequence[Message], candidate_author: Optional[str] = None
    ) -> bool:
        """
        Decide whether the conversation should stop after its latest message.

        Args:
            transcript: Full conversation so far, oldest first
            candidate_author: Participant whose turn just ended; defaults to
                the author of the most recent message

        Returns:
            True iff the latest message comes from an authorized participant
            and its text contains the trigger phrase
        """
        if not transcript:
            return False

        last = transcript[-1]
        author = candidate_author if candidate_author is not None else last.author_name
        if author not in self._authorized:
            return False

        text = last.text
        if text is None:
            return False
        return self._needle in text.casefold()

    __call__ = should_terminate

    def __repr__(self):
        return (
            f"{type(self).__name__}(authorized_participants={sorted(self._authorized)!r}, "
            f"maximum_iterations={self._maximum_iterations}, "
            f"trigger_phrase={self._trigger_phrase!r})"
        )
