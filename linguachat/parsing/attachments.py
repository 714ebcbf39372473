"""Attachment text extraction for responder context.

PDFs are read with pypdf, ``text/*`` and common structured-text types are
decoded as UTF-8. Anything else (images, archives) has no extractable text.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from linguachat.errors import AttachmentError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPES = frozenset({"application/json", "application/xml", "application/x-yaml"})


class AttachmentText(BaseModel):
    """Text pulled out of an attachment.

    Attributes:
        name: Attachment file name.
        text: Extracted text (empty when nothing was extractable).
        pages: Page count for PDFs, 0 otherwise.
        truncated: Whether the text was cut to the requested limit.
    """

    name: str
    text: str
    pages: int = Field(default=0, ge=0)
    truncated: bool = False


def _validate_size(data: bytes) -> None:
    if len(data) > MAX_FILE_SIZE:
        size_mb = len(data) / (1024 * 1024)
        raise AttachmentError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")


def _is_text_type(mime_type: str) -> bool:
    return mime_type.startswith("text/") or mime_type in TEXT_MIME_TYPES


def _extract_pdf(data: bytes) -> tuple[str, int]:
    """Extract text from every page of a PDF.

    Raises:
        AttachmentError: If the file is not a readable PDF.
    """
    if not data.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise AttachmentError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(data))
    except PdfReadError as e:
        raise AttachmentError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise AttachmentError(f"Failed to read PDF: {e}") from e

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue

    return "\n\n".join(text_parts), len(reader.pages)


def extract_text(
    name: str,
    mime_type: str,
    data: bytes,
    max_chars: int | None = None,
) -> AttachmentText:
    """Extract readable text from attachment bytes.

    Args:
        name: Attachment file name.
        mime_type: Attachment MIME type.
        data: Raw attachment bytes.
        max_chars: Optional cap on the returned text length.

    Returns:
        AttachmentText; ``text`` is empty for types without extractable text.

    Raises:
        AttachmentError: If the file is too large or a PDF is corrupt.
    """
    _validate_size(data)

    pages = 0
    if mime_type == PDF_MIME_TYPE or name.lower().endswith(".pdf"):
        text, pages = _extract_pdf(data)
        if not text.strip():
            logger.warning(f"{name} contains no extractable text (may be scanned/image-based)")
    elif _is_text_type(mime_type):
        text = data.decode("utf-8", errors="replace")
    else:
        text = ""

    truncated = max_chars is not None and len(text) > max_chars
    if truncated:
        text = text[:max_chars]

    return AttachmentText(name=name, text=text, pages=pages, truncated=truncated)
