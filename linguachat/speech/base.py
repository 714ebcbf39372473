"""Speech-to-text provider interface."""

from collections.abc import Callable, Sequence
from typing import Protocol

from linguachat.errors import SpeechUnavailable

TranscriptCallback = Callable[[Sequence[str]], None]
ErrorCallback = Callable[[str], None]
EndCallback = Callable[[], None]


class SpeechProvider(Protocol):
    """Streaming recognizer with continuous, interim-result sessions.

    ``on_transcript`` receives every result fragment of the current utterance
    so far; joining them gives the cumulative transcript. Providers may invoke
    callbacks from any thread.
    """

    def is_available(self) -> bool: ...

    def bind(
        self,
        on_transcript: TranscriptCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None: ...

    def configure(self, locale: str) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class UnavailableSpeechProvider:
    """Provider used when no speech backend exists in the host environment."""

    def is_available(self) -> bool:
        return False

    def bind(
        self,
        on_transcript: TranscriptCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None:
        pass

    def configure(self, locale: str) -> None:
        pass

    def start(self) -> None:
        raise SpeechUnavailable("No speech-to-text backend is installed")

    def stop(self) -> None:
        pass
