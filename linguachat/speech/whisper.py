"""Local dictation with sounddevice capture and faster-whisper decoding.

Both packages are optional (``pip install linguachat[speech]``). They are
detected with ``importlib.util.find_spec`` and imported lazily on the worker
thread, so a missing or heavy native backend never blocks startup.

The recognizer emulates a continuous, interim-results session: audio keeps
accumulating for the current utterance and every ``interval`` seconds the
whole utterance is decoded again, so later passes may correct earlier words.
A pause of ``utterance_pause`` seconds, or an utterance longer than
``max_utterance``, freezes its text and restarts decoding on fresh audio.
Each transcript event carries every segment recognized so far.
"""

from __future__ import annotations

import importlib.util
import logging
import threading
from dataclasses import dataclass
from typing import Any

from linguachat.errors import SpeechUnavailable
from linguachat.speech.base import EndCallback, ErrorCallback, TranscriptCallback

logger = logging.getLogger(__name__)

_REQUIRED_MODULES = ("numpy", "sounddevice", "faster_whisper")


def speech_backend_installed() -> bool:
    """Check for the optional speech packages without importing them."""
    return all(importlib.util.find_spec(name) is not None for name in _REQUIRED_MODULES)


@dataclass(slots=True)
class WhisperConfig:
    """Capture and decoding settings."""

    model_name: str = "base"
    device: str = "auto"
    compute_type: str = "int8"
    sample_rate: int = 16_000
    interval: float = 1.0
    silence_timeout: float = 8.0
    silence_level: float = 0.01
    utterance_pause: float = 1.5
    max_utterance: float = 30.0
    input_device: str | None = None


class TranscriptWindow:
    """Session transcript split into finished utterances and the current one.

    Only the current utterance's audio is re-decoded. Once it is finished
    (after a pause or when it grows past ``max_utterance``) its text is kept
    and decoding restarts on fresh audio.
    """

    def __init__(self) -> None:
        self.finished: list[str] = []
        self.current: list[str] = []

    def update(self, segments: list[str]) -> list[str]:
        """Replace the current utterance's segments; return all results."""
        self.current = list(segments)
        return self.results()

    def finish_utterance(self) -> bool:
        """Freeze the current utterance. Returns False if it was empty."""
        if not self.current:
            return False
        self.finished.extend(self.current)
        self.current = []
        return True

    def results(self) -> list[str]:
        results = self.finished + self.current
        if results:
            results[0] = results[0].lstrip()
        return results


class WhisperSpeechProvider:
    """Speech provider backed by the local microphone and faster-whisper."""

    def __init__(self, config: WhisperConfig | None = None) -> None:
        self.config = config or WhisperConfig()
        self._on_transcript: TranscriptCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_end: EndCallback | None = None
        self._language = "en"
        self._model: Any = None
        self._model_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._available: bool | None = None

    def is_available(self) -> bool:
        if self._available is None:
            self._available = speech_backend_installed()
            if not self._available:
                logger.warning(
                    "Speech packages not found. Install numpy, sounddevice and "
                    "faster-whisper to enable voice input."
                )
        return self._available

    def bind(
        self,
        on_transcript: TranscriptCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
    ) -> None:
        self._on_transcript = on_transcript
        self._on_error = on_error
        self._on_end = on_end

    def configure(self, locale: str) -> None:
        """Bind the next session to a locale; Whisper wants the bare language code."""
        self._language = locale.split("-", 1)[0].lower()

    def start(self) -> None:
        if not self.is_available():
            raise SpeechUnavailable("numpy, sounddevice and faster-whisper are required")
        # A previous worker may still be winding down; it owns its own stop
        # event and callbacks, so it cannot leak into this session.
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event, self._language, self._on_transcript, self._on_error, self._on_end),
            name="whisper-dictation",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Ask the worker to finish; does not wait for it."""
        self._stop_event.set()

    def _ensure_model(self) -> Any:
        with self._model_lock:
            if self._model is None:
                from faster_whisper import WhisperModel

                logger.info(f"Loading faster-whisper model {self.config.model_name}")
                self._model = WhisperModel(
                    self.config.model_name,
                    device=self.config.device,
                    compute_type=self.config.compute_type,
                )
            return self._model

    def _run(
        self,
        stop_event: threading.Event,
        language: str,
        on_transcript: TranscriptCallback | None,
        on_error: ErrorCallback | None,
        on_end: EndCallback | None,
    ) -> None:
        try:
            self._capture_and_decode(stop_event, language, on_transcript)
        except Exception as e:
            logger.warning(f"Dictation worker failed: {e}")
            if on_error is not None:
                on_error(_error_kind(e))
            return
        if on_end is not None:
            on_end()

    def _capture_and_decode(
        self,
        stop_event: threading.Event,
        language: str,
        on_transcript: TranscriptCallback | None,
    ) -> None:
        import numpy as np
        import sounddevice as sd

        model = self._ensure_model()
        chunks: list[Any] = []
        chunks_lock = threading.Lock()

        def on_audio(indata, frames, time, status) -> None:  # noqa: ANN001
            if status:
                logger.debug(f"Microphone status: {status}")
            with chunks_lock:
                chunks.append(indata[:, 0].copy())

        def drop_chunks(count: int) -> None:
            with chunks_lock:
                del chunks[:count]

        window = TranscriptWindow()
        max_samples = int(self.config.max_utterance * self.config.sample_rate)
        silent_for = 0.0
        decoded_samples = 0
        with sd.InputStream(
            samplerate=self.config.sample_rate,
            channels=1,
            dtype="float32",
            device=self.config.input_device,
            callback=on_audio,
        ):
            while not stop_event.wait(self.config.interval):
                with chunks_lock:
                    if not chunks:
                        continue
                    consumed = len(chunks)
                    audio = np.concatenate(chunks)

                fresh = audio[decoded_samples:]
                decoded_samples = len(audio)
                level = float(np.sqrt(np.mean(np.square(fresh)))) if len(fresh) else 0.0
                if level < self.config.silence_level:
                    silent_for += self.config.interval
                    if silent_for >= self.config.silence_timeout:
                        logger.info("Dictation ended after silence timeout")
                        return
                    if silent_for >= self.config.utterance_pause:
                        window.finish_utterance()
                        drop_chunks(consumed)
                        decoded_samples = 0
                    continue
                silent_for = 0.0

                segments, _ = model.transcribe(audio, language=language)
                results = window.update([segment.text for segment in segments])
                if results and not stop_event.is_set() and on_transcript is not None:
                    on_transcript(results)

                if len(audio) >= max_samples:
                    logger.debug("Utterance reached max_utterance; decoding fresh audio")
                    window.finish_utterance()
                    drop_chunks(consumed)
                    decoded_samples = 0


def _error_kind(error: Exception) -> str:
    """Map worker exceptions to recognizer-style error kinds."""
    if type(error).__name__ == "PortAudioError":
        return "audio-capture"
    return "recognizer"
