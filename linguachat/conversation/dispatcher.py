"""Submission pipeline: staged input -> user turn -> responder -> bot turn.

The ``busy`` flag is a single-slot gate. A submit made while a reply is
pending is dropped, never queued, so every bot turn lands directly after its
own user turn and before the next accepted one.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from linguachat.conversation.message_store import MessageStore
from linguachat.conversation.staging import InputStagingArea
from linguachat.errors import EmptySubmission, ResponderFailure, SubmissionInFlight
from linguachat.models.schemas import Message

logger = logging.getLogger(__name__)

DEFAULT_RESPONDER_TIMEOUT = 30.0


class Responder(Protocol):
    """Produces the reply text for a submitted user turn."""

    async def respond(self, message: Message) -> str: ...


def attachment_placeholder(name: str) -> str:
    """User-facing text for a submit that carries only a file."""
    return f"Sent file: {name}"


def failure_reply(error: ResponderFailure) -> str:
    return f"Sorry, I couldn't get a response: {error}"


class ResponseDispatcher:
    """Serializes submissions through the responder collaborator."""

    def __init__(
        self,
        store: MessageStore,
        staging: InputStagingArea,
        responder: Responder,
        *,
        timeout: float = DEFAULT_RESPONDER_TIMEOUT,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._store = store
        self._staging = staging
        self._responder = responder
        self._timeout = timeout
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None
        self.busy = False

    def _check_ready(self) -> None:
        """Raise if a submit right now must be rejected."""
        if self.busy:
            raise SubmissionInFlight("A reply is still pending")
        if not self._staging.has_content:
            raise EmptySubmission("Nothing to send")

    def submit(self) -> asyncio.Task[None] | None:
        """Turn staged input into a user message and request a reply.

        Returns:
            The task delivering the reply, or None if the submit was rejected
            (busy, nothing staged, or no running event loop). A rejected
            submit leaves the log and the staged input untouched.
        """
        try:
            self._check_ready()
        except (EmptySubmission, SubmissionInFlight) as e:
            logger.debug(f"Submit rejected: {type(e).__name__}: {e}")
            return None

        # Nothing may change unless the reply can actually be scheduled.
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("Submit rejected: no running event loop")
            return None

        attachment = self._staging.attachment
        text = self._staging.text
        if not text.strip() and attachment is not None:
            text = attachment_placeholder(attachment.name)

        message = self._store.append_user(text, attachment)
        self._staging.reset_all()
        self.busy = True
        logger.info(f"Submitted message {message.id}")

        self._task = loop.create_task(self._round_trip(message))
        return self._task

    async def _round_trip(self, message: Message) -> None:
        try:
            reply = await self._request_reply(message)
        except ResponderFailure as e:
            logger.error(f"Responder failed for message {message.id}: {e}")
            reply = failure_reply(e)
        except asyncio.CancelledError:
            logger.info(f"Reply to message {message.id} cancelled")
            self.busy = False
            raise

        self._store.append_bot(reply)
        self.busy = False
        self._notify()

    async def _request_reply(self, message: Message) -> str:
        """Call the responder, mapping every failure to ResponderFailure."""
        try:
            return await asyncio.wait_for(self._responder.respond(message), self._timeout)
        except ResponderFailure:
            raise
        except TimeoutError as e:
            raise ResponderFailure(f"no reply within {self._timeout:g}s") from e
        except Exception as e:
            raise ResponderFailure(str(e) or type(e).__name__) from e

    def cancel(self) -> None:
        """Abandon the in-flight reply, if any; used when the session ends."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self.busy = False

    async def wait_idle(self) -> None:
        """Wait until the in-flight reply (if any) has been appended."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.shield(task)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
