"""Pydantic models shared by the controller, collaborators and UI.

Models:
    - Message: Immutable turn in the conversation log
    - Attachment: Reference to staged file content
    - Language: Selectable locale catalog entry
    - IncomingFile: File yielded by the picker or a drop
    - ControllerState: Snapshot observed by the presentation layer
"""

from linguachat.models.languages import DEFAULT_LANGUAGE, LANGUAGES, get_language
from linguachat.models.schemas import (
    Attachment,
    ControllerState,
    IncomingFile,
    Language,
    Message,
    Sender,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "LANGUAGES",
    "Attachment",
    "ControllerState",
    "IncomingFile",
    "Language",
    "Message",
    "Sender",
    "get_language",
]
