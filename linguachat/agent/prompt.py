"""Prompt composition for responders that talk to a language model."""

import logging

from linguachat.conversation.blobs import BlobStore
from linguachat.errors import AttachmentError
from linguachat.models.schemas import Message
from linguachat.parsing.attachments import extract_text

logger = logging.getLogger(__name__)


def compose_prompt(message: Message, blobs: BlobStore | None, max_chars: int) -> str:
    """Build the model input for a user turn.

    The user's text comes first. An attachment adds a header line and, when
    its content is still resolvable and has extractable text, that text.

    Args:
        message: The submitted user message.
        blobs: Store resolving attachment references, if available.
        max_chars: Cap on attachment text length.

    Returns:
        Prompt text.
    """
    attachment = message.attachment
    if attachment is None:
        return message.text

    parts = [message.text, f"[Attached file: {attachment.name} ({attachment.mime_type})]"]
    if blobs is None or max_chars == 0:
        return "\n\n".join(parts)

    try:
        data = blobs.resolve(attachment.content_ref)
        extracted = extract_text(attachment.name, attachment.mime_type, data, max_chars=max_chars)
    except AttachmentError as e:
        logger.warning(f"Could not read attachment {attachment.name}: {e}")
        return "\n\n".join(parts)

    if extracted.text.strip():
        parts.append(extracted.text)
        if extracted.truncated:
            parts.append("[Attachment truncated]")
    return "\n\n".join(parts)
