"""Speech session state machine: Idle -> Listening -> Idle.

Provider callbacks never touch controller state directly. Each one is posted
onto the event loop that started the session and handled there, one at a
time. Every start gets a new generation number and handlers drop events from
an older generation or events that arrive after ``stop()``, so a late
transcript can never overwrite what the user kept.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from linguachat.conversation.staging import InputStagingArea
from linguachat.errors import SpeechProviderError
from linguachat.speech.base import SpeechProvider

logger = logging.getLogger(__name__)


class SpeechSession:
    """Binds a speech provider to the staged text buffer."""

    def __init__(
        self,
        provider: SpeechProvider,
        staging: InputStagingArea,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._provider = provider
        self._staging = staging
        self._on_change = on_change
        self._available = provider.is_available()
        self._listening = False
        self._locale: str | None = None
        self._generation = 0
        self._loop: asyncio.AbstractEventLoop | None = None
        if not self._available:
            logger.info("Speech-to-text unavailable; voice input disabled")

    @property
    def listening(self) -> bool:
        return self._listening

    @property
    def locale(self) -> str | None:
        """Locale bound to the active session, or None when idle."""
        return self._locale if self._listening else None

    def is_available(self) -> bool:
        """Capability check for the presentation layer's mic affordance."""
        return self._available

    def start(self, locale: str) -> None:
        """Open a continuous session bound to ``locale``.

        No-op while already listening or when the provider is unavailable.
        """
        if self._listening or not self._available:
            return

        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None

        self._generation += 1
        generation = self._generation
        self._provider.bind(
            on_transcript=lambda results: self._post(self._handle_transcript, generation, results),
            on_error=lambda kind: self._post(self._handle_error, generation, kind),
            on_end=lambda: self._post(self._handle_end, generation),
        )
        self._provider.configure(locale)
        try:
            self._provider.start()
        except Exception as e:
            logger.warning(f"Speech provider failed to start: {e}")
            return

        self._locale = locale
        self._listening = True
        logger.info(f"Speech session {generation} listening ({locale})")

    def stop(self) -> None:
        """Stop listening now, without waiting for the provider's end event.

        Whatever text is staged stays as it is.
        """
        if not self._listening:
            return
        self._listening = False
        logger.info(f"Speech session {self._generation} stopped")
        try:
            self._provider.stop()
        except Exception as e:
            logger.warning(f"Speech provider failed to stop cleanly: {e}")

    def _post(self, handler: Callable[..., None], *args: Any) -> None:
        if self._loop is None:
            handler(*args)
            return
        try:
            self._loop.call_soon_threadsafe(handler, *args)
        except RuntimeError:
            logger.debug("Dropping speech event: event loop is closed")

    def _is_current(self, generation: int) -> bool:
        return self._listening and generation == self._generation

    def _handle_transcript(self, generation: int, results: Sequence[str]) -> None:
        if not self._is_current(generation):
            return
        self._staging.set_text("".join(results))
        self._notify()

    def _handle_error(self, generation: int, kind: str) -> None:
        if not self._is_current(generation):
            return
        error = SpeechProviderError(kind)
        logger.warning(f"Speech recognition error: {error.kind}")
        self.stop()
        self._notify()

    def _handle_end(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        self._listening = False
        logger.info(f"Speech session {generation} ended by provider")
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
