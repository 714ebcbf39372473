"""Conversation interaction controller.

Owns the whole session state and exposes one method per user gesture. Every
method runs to completion on the event loop; the presentation layer reads
``state`` (or subscribes to snapshots) and never sees exceptions from a
gesture.
"""

import asyncio
import functools
import logging
from collections.abc import Callable, Sequence
from typing import Any

from linguachat.conversation.blobs import BlobStore
from linguachat.conversation.config import ControllerConfig, get_controller_config
from linguachat.conversation.dispatcher import (
    DEFAULT_RESPONDER_TIMEOUT,
    Responder,
    ResponseDispatcher,
)
from linguachat.conversation.message_store import MessageStore
from linguachat.conversation.overlays import Overlay, OverlayRouter, PointerEventBus
from linguachat.conversation.speech_session import SpeechSession
from linguachat.conversation.staging import InputStagingArea
from linguachat.models.languages import get_language
from linguachat.models.schemas import ControllerState, IncomingFile, Language
from linguachat.speech.base import SpeechProvider, UnavailableSpeechProvider

logger = logging.getLogger(__name__)

StateObserver = Callable[[ControllerState], None]


def gesture(method: Callable[..., Any]) -> Callable[..., Any]:
    """Mark a user gesture; gestures on a closed session are ignored."""

    @functools.wraps(method)
    def wrapper(self: "ConversationController", *args: Any, **kwargs: Any) -> Any:
        if self.closed:
            logger.debug(f"Ignoring {method.__name__} on closed session")
            return None
        return method(self, *args, **kwargs)

    return wrapper


class ConversationController:
    """Reconciles typed, spoken and dropped input into one conversation.

    Args:
        responder: Collaborator producing reply text for each user turn.
        speech_provider: Speech-to-text backend; defaults to an unavailable one.
        config: Session configuration; loaded from environment if omitted.
        responder_timeout: Seconds before a pending reply counts as failed.
        blobs: Blob store shared with the responder; a private one if omitted.
    """

    def __init__(
        self,
        responder: Responder,
        speech_provider: SpeechProvider | None = None,
        config: ControllerConfig | None = None,
        *,
        responder_timeout: float = DEFAULT_RESPONDER_TIMEOUT,
        blobs: BlobStore | None = None,
    ) -> None:
        self._config = config or get_controller_config()
        self._observers: list[StateObserver] = []
        self._closed = False

        self.blobs = blobs if blobs is not None else BlobStore()
        self.store = MessageStore(self._config.greeting)
        self.staging = InputStagingArea(self.blobs, get_language(self._config.default_locale))
        self.speech = SpeechSession(
            speech_provider or UnavailableSpeechProvider(),
            self.staging,
            on_change=self._notify,
        )
        self.dispatcher = ResponseDispatcher(
            self.store,
            self.staging,
            responder,
            timeout=responder_timeout,
            on_change=self._notify,
        )
        self.pointer_events = PointerEventBus()
        self.overlays = OverlayRouter(self.staging, self.pointer_events)

    @property
    def state(self) -> ControllerState:
        return ControllerState(
            messages=self.store.list(),
            staged_text=self.staging.text,
            staged_attachment=self.staging.attachment,
            selected_language=self.staging.language,
            busy=self.dispatcher.busy,
            listening=self.speech.listening,
            dragging=self.overlays.dragging,
            header_language_open=self.overlays.is_open(Overlay.HEADER_LANGUAGE),
            input_language_open=self.overlays.is_open(Overlay.INPUT_LANGUAGE),
            speech_available=self.speech.is_available(),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register a state observer.

        Returns:
            A callable that unregisters the observer.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        if not self._observers:
            return
        snapshot = self.state
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("State observer failed")

    # === Input staging ===

    @gesture
    def set_text(self, text: str) -> None:
        self.staging.set_text(text)
        self._notify()

    @gesture
    def select_file(self, files: Sequence[IncomingFile]) -> None:
        """File picker result; only the first file is staged."""
        if not files:
            return
        self.staging.stage_attachment(files[0])
        self._notify()

    @gesture
    def remove_attachment(self) -> None:
        self.staging.clear_attachment()
        self._notify()

    @gesture
    def set_language(self, language: Language) -> None:
        self.staging.set_language(language)
        self._notify()

    # === Speech ===

    @gesture
    def start_listening(self) -> None:
        """Start dictation in the currently selected language."""
        self.speech.start(self.staging.language.locale_tag)
        self._notify()

    @gesture
    def stop_listening(self) -> None:
        self.speech.stop()
        self._notify()

    @gesture
    def toggle_listening(self) -> None:
        if self.speech.listening:
            self.stop_listening()
        else:
            self.start_listening()

    # === Submission ===

    @gesture
    def submit(self) -> asyncio.Task[None] | None:
        """Send staged input; returns the reply task, or None if rejected."""
        task = self.dispatcher.submit()
        if task is not None:
            self._notify()
        return task

    async def wait_idle(self) -> None:
        await self.dispatcher.wait_idle()

    # === Overlays and drag ===

    @gesture
    def toggle_overlay(self, overlay: Overlay) -> None:
        self.overlays.toggle(overlay)
        self._notify()

    @gesture
    def choose_language(self, overlay: Overlay, language: Language) -> None:
        self.overlays.choose_language(overlay, language)
        self._notify()

    @gesture
    def pointer_down(self, target_path: Sequence[str]) -> None:
        """Document-level pointer-down; closes overlays it lands outside of."""
        self.pointer_events.pointer_down(target_path)
        self._notify()

    @gesture
    def drag_over(self) -> None:
        if self.overlays.dragging:
            return
        self.overlays.drag_over()
        self._notify()

    @gesture
    def drag_leave(self) -> None:
        self.overlays.drag_leave()
        self._notify()

    @gesture
    def drop(self, files: Sequence[IncomingFile]) -> None:
        self.overlays.drop(files)
        self._notify()

    # === Lifecycle ===

    def close(self) -> None:
        """End the session and release everything it holds."""
        if self._closed:
            return
        self._closed = True
        self.speech.stop()
        self.dispatcher.cancel()
        self.overlays.close_all()
        self.blobs.release_all()
        self._notify()
        self._observers.clear()
        logger.info("Conversation session closed")
