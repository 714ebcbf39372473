"""Unit tests for attachment text extraction and prompt composition."""

import io

import pytest
import pytest_check as check
from pypdf import PdfWriter

from linguachat.agent.prompt import compose_prompt
from linguachat.conversation import BlobStore
from linguachat.errors import AttachmentError
from linguachat.models import Attachment, Message, Sender
from linguachat.parsing import extract_text
from linguachat.parsing.attachments import MAX_FILE_SIZE
from tests.conftest import make_file


def blank_pdf(pages: int = 1) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestExtractText:
    """Tests for extract_text."""

    def test_plain_text(self) -> None:
        """text/* attachments are decoded as UTF-8."""
        result = extract_text("notes.txt", "text/plain", "नमस्ते".encode())

        check.equal(result.text, "नमस्ते")
        check.equal(result.pages, 0)
        check.is_false(result.truncated)

    def test_json_is_text(self) -> None:
        """Structured text types are decoded too."""
        result = extract_text("data.json", "application/json", b'{"a": 1}')

        assert result.text == '{"a": 1}'

    def test_truncates_to_max_chars(self) -> None:
        """Text longer than the cap is cut and flagged."""
        result = extract_text("notes.txt", "text/plain", b"abcdef", max_chars=3)

        check.equal(result.text, "abc")
        check.is_true(result.truncated)

    def test_image_has_no_text(self) -> None:
        """Binary types yield empty text."""
        result = extract_text("cat.png", "image/png", b"\x89PNG\r\n")

        assert result.text == ""

    def test_blank_pdf_pages(self) -> None:
        """PDF page count is reported even without extractable text."""
        result = extract_text("blank.pdf", "application/pdf", blank_pdf(pages=2))

        check.equal(result.pages, 2)
        check.equal(result.text.strip(), "")

    def test_pdf_detected_by_extension(self) -> None:
        """A .pdf name is parsed as PDF whatever the reported type."""
        result = extract_text("blank.PDF", "application/octet-stream", blank_pdf())

        assert result.pages == 1

    def test_invalid_pdf_header(self) -> None:
        """Files claiming to be PDFs must start with the PDF header."""
        with pytest.raises(AttachmentError, match="PDF header"):
            extract_text("fake.pdf", "application/pdf", b"not a pdf at all")

    def test_file_too_large(self) -> None:
        """Files over the size limit are rejected."""
        with pytest.raises(AttachmentError, match="exceeds maximum"):
            extract_text("big.txt", "text/plain", b"x" * (MAX_FILE_SIZE + 1))


class TestComposePrompt:
    """Tests for compose_prompt."""

    def test_text_only(self) -> None:
        """Without an attachment the prompt is the user's text."""
        message = Message(id=2, text="hello", sender=Sender.USER)

        assert compose_prompt(message, BlobStore(), 100) == "hello"

    def test_includes_attachment_text(self) -> None:
        """Readable attachment content follows a header line."""
        blobs = BlobStore()
        ref = blobs.stage(make_file("notes.txt", b"line one"))
        message = Message(
            id=2,
            text="summarize",
            sender=Sender.USER,
            attachment=Attachment(name="notes.txt", mime_type="text/plain", content_ref=ref),
        )

        prompt = compose_prompt(message, blobs, 100)

        check.is_true(prompt.startswith("summarize"))
        check.is_in("[Attached file: notes.txt (text/plain)]", prompt)
        check.is_true(prompt.endswith("line one"))

    def test_marks_truncated_attachment(self) -> None:
        """Cut attachment text is marked as such."""
        blobs = BlobStore()
        ref = blobs.stage(make_file("notes.txt", b"abcdefgh"))
        message = Message(
            id=2,
            text="read",
            sender=Sender.USER,
            attachment=Attachment(name="notes.txt", mime_type="text/plain", content_ref=ref),
        )

        prompt = compose_prompt(message, blobs, 4)

        check.is_in("abcd", prompt)
        check.is_not_in("abcde", prompt)
        check.is_in("[Attachment truncated]", prompt)

    def test_released_attachment_keeps_header(self) -> None:
        """Unresolvable content still names the file."""
        message = Message(
            id=2,
            text="what is this?",
            sender=Sender.USER,
            attachment=Attachment(name="gone.txt", mime_type="text/plain", content_ref="blob:missing"),
        )

        prompt = compose_prompt(message, BlobStore(), 100)

        assert prompt == "what is this?\n\n[Attached file: gone.txt (text/plain)]"
