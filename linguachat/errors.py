"""Error taxonomy for the conversation controller.

None of these reach the presentation layer: every controller entry point
handles them locally and only the resulting state is observable.
"""


class ConversationError(Exception):
    """Base class for controller errors."""

    pass


class EmptySubmission(ConversationError):
    """Raised when submit is called with no text and no attachment."""

    pass


class SubmissionInFlight(ConversationError):
    """Raised when submit is called while a reply is still pending."""

    pass


class SpeechUnavailable(ConversationError):
    """Raised when the speech-to-text capability is absent."""

    pass


class SpeechProviderError(ConversationError):
    """Raised when the speech provider fails mid-session.

    Attributes:
        kind: Provider error category (e.g. ``no-speech``, ``audio-capture``).
    """

    def __init__(self, kind: str, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(message or kind)


class ResponderFailure(ConversationError):
    """Raised when the responder errors out or exceeds its timeout."""

    pass


class AttachmentError(ConversationError):
    """Raised for released, unknown or unreadable attachment content."""

    pass
