"""Not-yet-submitted input: text buffer, one attachment, language selection."""

import logging

from linguachat.conversation.blobs import BlobStore
from linguachat.models.schemas import Attachment, IncomingFile, Language

logger = logging.getLogger(__name__)


class InputStagingArea:
    """Holds the text buffer, at most one attachment and the selected language."""

    def __init__(self, blobs: BlobStore, language: Language) -> None:
        self._blobs = blobs
        self.text = ""
        self.attachment: Attachment | None = None
        self.language = language

    @property
    def has_content(self) -> bool:
        """Whitespace-only text counts as empty."""
        return bool(self.text.strip()) or self.attachment is not None

    def set_text(self, text: str) -> None:
        self.text = text

    def stage_attachment(self, file: IncomingFile) -> Attachment:
        """Stage a file, replacing (never adding to) any previous attachment.

        Args:
            file: File yielded by the picker or a drop.

        Returns:
            The newly staged Attachment.
        """
        attachment = Attachment(
            name=file.name,
            mime_type=file.mime_type,
            content_ref=self._blobs.stage(file),
        )
        if self.attachment is not None:
            logger.debug(f"Replacing staged attachment {self.attachment.name} with {file.name}")
            self._blobs.release(self.attachment.content_ref)
        self.attachment = attachment
        return attachment

    def clear_attachment(self) -> None:
        """Remove the staged file and release its never-submitted content."""
        if self.attachment is None:
            return
        self._blobs.release(self.attachment.content_ref)
        self.attachment = None

    def reset_all(self) -> None:
        """Clear text and attachment after a submit.

        The attachment's content now belongs to a message, so it is kept.
        """
        self.text = ""
        self.attachment = None

    def set_language(self, language: Language) -> None:
        self.language = language
