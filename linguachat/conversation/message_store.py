"""Ordered conversation log."""

from linguachat.models.schemas import Attachment, Message, Sender


class MessageStore:
    """Owns the conversation log and assigns message ids.

    Ids come from an explicit counter rather than the log length, so two
    appends scheduled back to back can never collide.
    """

    def __init__(self, greeting: str) -> None:
        self._messages: list[Message] = []
        self._last_id = 0
        self.append_bot(greeting)

    def _next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def append_user(self, text: str, attachment: Attachment | None = None) -> Message:
        message = Message(
            id=self._next_id(),
            text=text,
            sender=Sender.USER,
            attachment=attachment,
        )
        self._messages.append(message)
        return message

    def append_bot(self, text: str) -> Message:
        message = Message(id=self._next_id(), text=text, sender=Sender.BOT)
        self._messages.append(message)
        return message

    def list(self) -> tuple[Message, ...]:
        """Read-only snapshot of the log in append order."""
        return tuple(self._messages)

    @property
    def last(self) -> Message:
        return self._messages[-1]

    def __len__(self) -> int:
        return len(self._messages)
