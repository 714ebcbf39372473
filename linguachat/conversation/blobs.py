"""In-memory blob store backing attachment content references."""

import logging
import uuid

from linguachat.errors import AttachmentError
from linguachat.models.schemas import IncomingFile

logger = logging.getLogger(__name__)

REF_PREFIX = "blob:"


class BlobStore:
    """Holds staged file bytes behind opaque ``blob:`` references.

    References live at most as long as the conversation session. Replaced or
    cleared staging releases its reference immediately; everything else is
    released by ``release_all`` when the session closes.
    """

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def stage(self, file: IncomingFile) -> str:
        """Store file bytes and return a new content reference."""
        ref = f"{REF_PREFIX}{uuid.uuid4()}"
        self._blobs[ref] = file.data
        logger.debug(f"Staged blob {ref} for {file.name} ({len(file.data)} bytes)")
        return ref

    def resolve(self, ref: str) -> bytes:
        """Return the bytes behind a reference.

        Raises:
            AttachmentError: If the reference is unknown or already released.
        """
        try:
            return self._blobs[ref]
        except KeyError:
            raise AttachmentError(f"Unknown or released content reference: {ref}") from None

    def release(self, ref: str) -> None:
        """Drop a reference; releasing twice is harmless."""
        if self._blobs.pop(ref, None) is not None:
            logger.debug(f"Released blob {ref}")

    def release_all(self) -> None:
        count = len(self._blobs)
        self._blobs.clear()
        if count:
            logger.info(f"Released {count} attachment blob(s)")

    def __contains__(self, ref: object) -> bool:
        return ref in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
