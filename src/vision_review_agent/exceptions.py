"""Exception hierarchy for the vision review agent."""


class VisionReviewError(Exception):
    """Base class for all errors raised by this package."""


class InvalidConfiguration(VisionReviewError, ValueError):
    """A policy, driver or settings file was configured in a way that can never work."""


class ConversationAlreadyRun(VisionReviewError, RuntimeError):
    """A conversation driver was reused after its run had started."""


class ImageValidationError(VisionReviewError):
    """The input image was rejected before the conversation started."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class GenerationFailure(VisionReviewError):
    """
    A participant could not produce its next message.

    Raised for authentication, throttling, not-found and validation errors
    coming back from the model service. The original exception is kept as
    ``__cause__``.
    """

    def __init__(self, message: str, code: str = None, speaker: str = None):
        super().__init__(message)
        self.code = code
        self.speaker = speaker

    def __str__(self):
        base = super().__str__()
        if self.speaker and self.code:
            return f"{self.speaker}: {base} ({self.code})"
        if self.speaker:
            return f"{self.speaker}: {base}"
        if self.code:
            return f"{base} ({self.code})"
        return base
