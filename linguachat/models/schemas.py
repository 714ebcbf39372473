import mimetypes
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_MIME_TYPE = "application/octet-stream"


class Sender(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    BOT = "bot"


class Attachment(BaseModel):
    """A named, typed reference to staged file content.

    Attributes:
        name: Original file name.
        mime_type: MIME type reported by the file source (or guessed).
        content_ref: Opaque key resolvable through the session's BlobStore.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str = DEFAULT_MIME_TYPE
    content_ref: str

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class Message(BaseModel):
    """A single turn in the conversation log.

    Attributes:
        id: Strictly increasing identifier assigned by the MessageStore.
        text: Display text of the turn.
        sender: Who produced the turn.
        attachment: Optional file sent with a user turn.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    text: str
    sender: Sender
    attachment: Attachment | None = None


class Language(BaseModel):
    """Catalog entry for a selectable input/speech language."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    locale_tag: str


class IncomingFile(BaseModel):
    """File-like value yielded by the file picker or a drag-and-drop payload.

    Attributes:
        name: File name as reported by the source.
        mime_type: MIME type; guessed from the name when the source leaves it empty.
        data: Raw file bytes.
    """

    name: str = Field(..., min_length=1)
    mime_type: str = Field(default="", validate_default=True)
    data: bytes = b""

    @field_validator("mime_type", mode="after")
    @classmethod
    def default_mime_type(cls, v: str, info: ValidationInfo) -> str:
        """Fill in a MIME type when the source did not provide one."""
        if v and v.strip():
            return v.strip()
        guessed, _ = mimetypes.guess_type(info.data.get("name", ""))
        return guessed or DEFAULT_MIME_TYPE


class ControllerState(BaseModel):
    """Immutable snapshot of everything the presentation layer renders.

    Attributes:
        messages: Conversation log in append order.
        staged_text: Text typed or dictated but not yet submitted.
        staged_attachment: The single staged file, if any.
        selected_language: Language used for the next speech session.
        busy: A submission is waiting for its reply.
        listening: A speech session is active.
        dragging: A drag is hovering over the conversation.
        header_language_open: Header language menu is visible.
        input_language_open: Input-bar language menu is visible.
        speech_available: The speech provider exists in this environment.
    """

    model_config = ConfigDict(frozen=True)

    messages: tuple[Message, ...]
    staged_text: str = ""
    staged_attachment: Attachment | None = None
    selected_language: Language
    busy: bool = False
    listening: bool = False
    dragging: bool = False
    header_language_open: bool = False
    input_language_open: bool = False
    speech_available: bool = False

    @property
    def can_submit(self) -> bool:
        """Whether the send affordance should be enabled."""
        has_content = bool(self.staged_text.strip()) or self.staged_attachment is not None
        return has_content and not self.busy
