"""Pytest fixtures and shared test configuration.

Provides reusable fakes and fixtures for unit and integration tests.

Fixtures:
    - controller_config: Deterministic session configuration
    - blobs: Empty BlobStore
    - staging: InputStagingArea over the blobs fixture
    - speech_provider: Scripted speech provider
    - responder: Scripted responder with optional gating
    - controller: ConversationController wired to the fakes
"""

import asyncio
from collections.abc import Sequence

import pytest

from linguachat.conversation import ConversationController, InputStagingArea
from linguachat.conversation.blobs import BlobStore
from linguachat.conversation.config import ControllerConfig
from linguachat.models import DEFAULT_LANGUAGE, IncomingFile, Message
from linguachat.speech.base import EndCallback, ErrorCallback, TranscriptCallback


class FakeSpeechProvider:
    """Speech provider whose recognizer events are fired by the test."""

    def __init__(self, available: bool = True, fail_on_start: bool = False) -> None:
        self.available = available
        self.fail_on_start = fail_on_start
        self.configured: list[str] = []
        self.starts = 0
        self.stops = 0
        self._on_transcript: TranscriptCallback | None = None
        self._on_error: ErrorCallback | None = None
        self._on_end: EndCallback | None = None

    def is_available(self) -> bool:
        return self.available

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
        self.configured.append(locale)

    def start(self) -> None:
        if self.fail_on_start:
            raise OSError("microphone busy")
        self.starts += 1

    def stop(self) -> None:
        self.stops += 1

    def emit_transcript(self, *results: str) -> None:
        assert self._on_transcript is not None
        self._on_transcript(list(results))

    def emit_error(self, kind: str) -> None:
        assert self._on_error is not None
        self._on_error(kind)

    def emit_end(self) -> None:
        assert self._on_end is not None
        self._on_end()


class ScriptedResponder:
    """Responder returning queued replies, optionally held until released."""

    def __init__(self, replies: Sequence[str] = (), error: Exception | None = None) -> None:
        self.replies = list(replies)
        self.error = error
        self.received: list[Message] = []
        self.gate: asyncio.Event | None = None

    def hold(self) -> None:
        """Make subsequent replies wait for ``release()``."""
        self.gate = asyncio.Event()

    def release(self) -> None:
        assert self.gate is not None
        self.gate.set()

    async def respond(self, message: Message) -> str:
        self.received.append(message)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return f"reply to {message.id}"


async def drain() -> None:
    """Let callbacks posted with call_soon_threadsafe run."""
    for _ in range(3):
        await asyncio.sleep(0)


def make_file(name: str = "photo.png", data: bytes = b"\x89PNG", mime_type: str = "") -> IncomingFile:
    return IncomingFile(name=name, mime_type=mime_type, data=data)


@pytest.fixture
def controller_config() -> ControllerConfig:
    """Return configuration independent of the environment.

    Returns:
        ControllerConfig with English selected.
    """
    return ControllerConfig(default_locale="en-IN", whisper_model="base", silence_timeout=8.0)


@pytest.fixture
def blobs() -> BlobStore:
    return BlobStore()


@pytest.fixture
def staging(blobs: BlobStore) -> InputStagingArea:
    return InputStagingArea(blobs, DEFAULT_LANGUAGE)


@pytest.fixture
def speech_provider() -> FakeSpeechProvider:
    return FakeSpeechProvider()


@pytest.fixture
def responder() -> ScriptedResponder:
    return ScriptedResponder()


@pytest.fixture
def controller(
    responder: ScriptedResponder,
    speech_provider: FakeSpeechProvider,
    controller_config: ControllerConfig,
) -> ConversationController:
    """Create a controller wired to the scripted fakes.

    Returns:
        ConversationController with a 1 second responder timeout.
    """
    return ConversationController(
        responder,
        speech_provider=speech_provider,
        config=controller_config,
        responder_timeout=1.0,
    )
