"""Attachment parsing for responder context.

Responsibilities:
    - PDF text extraction with pypdf
    - UTF-8 decoding for text attachments
    - Size validation and length capping

Output is plain text ready to be appended to a prompt.
"""

from linguachat.parsing.attachments import AttachmentText, extract_text

__all__ = ["AttachmentText", "extract_text"]
