"""Unit tests for SpeechSession.

Provider events are posted onto the running loop, so every emit is
followed by ``drain()`` before asserting.
"""

import logging

import pytest
import pytest_check as check

from linguachat.conversation import InputStagingArea, SpeechSession
from linguachat.models import get_language
from linguachat.speech import UnavailableSpeechProvider
from tests.conftest import FakeSpeechProvider, drain


@pytest.fixture
def session(speech_provider: FakeSpeechProvider, staging: InputStagingArea) -> SpeechSession:
    return SpeechSession(speech_provider, staging)


class TestSpeechSessionLifecycle:
    """Tests for start/stop transitions."""

    async def test_start_binds_locale(self, session: SpeechSession, speech_provider: FakeSpeechProvider) -> None:
        """Starting configures the provider with the given locale."""
        session.start("kn-IN")

        check.is_true(session.listening)
        check.equal(session.locale, "kn-IN")
        check.equal(speech_provider.configured, ["kn-IN"])
        check.equal(speech_provider.starts, 1)

    async def test_language_change_waits_for_next_session(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """The locale is bound at start; a new language only applies after a restart."""
        session.start(staging.language.locale_tag)
        staging.set_language(get_language("hi-IN"))

        check.equal(session.locale, "en-IN")

        session.stop()
        session.start(staging.language.locale_tag)

        check.equal(session.locale, "hi-IN")
        check.equal(speech_provider.configured, ["en-IN", "hi-IN"])

    async def test_start_while_listening_is_noop(
        self, session: SpeechSession, speech_provider: FakeSpeechProvider
    ) -> None:
        """A second start does not reconfigure or restart the provider."""
        session.start("en-IN")
        session.start("hi-IN")

        check.equal(speech_provider.starts, 1)
        check.equal(session.locale, "en-IN")

    async def test_stop_when_idle_is_noop(self, session: SpeechSession, speech_provider: FakeSpeechProvider) -> None:
        """Stopping an idle session does not touch the provider."""
        session.stop()

        check.is_false(session.listening)
        check.equal(speech_provider.stops, 0)

    async def test_stop_keeps_staged_text(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """Stopping leaves the dictated text in place."""
        session.start("en-IN")
        speech_provider.emit_transcript("hello there")
        await drain()

        session.stop()

        check.is_false(session.listening)
        check.is_none(session.locale)
        check.equal(staging.text, "hello there")
        check.equal(speech_provider.stops, 1)

    async def test_unavailable_provider(self, staging: InputStagingArea) -> None:
        """Start is a no-op when no speech backend exists."""
        session = SpeechSession(UnavailableSpeechProvider(), staging)

        session.start("en-IN")

        check.is_false(session.is_available())
        check.is_false(session.listening)

    async def test_provider_start_failure_stays_idle(
        self, staging: InputStagingArea, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A provider that cannot start leaves the session idle."""
        provider = FakeSpeechProvider(fail_on_start=True)
        session = SpeechSession(provider, staging)

        with caplog.at_level(logging.WARNING):
            session.start("en-IN")

        check.is_false(session.listening)
        check.is_in("failed to start", caplog.text)


class TestSpeechSessionEvents:
    """Tests for transcript, error and end handling."""

    async def test_transcript_overwrites_typed_text(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """Dictation replaces what was typed before the session started."""
        staging.set_text("typed")
        session.start("en-IN")

        speech_provider.emit_transcript("spoken")
        await drain()

        assert staging.text == "spoken"

    async def test_transcript_joins_all_results(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """The staged text is the concatenation of every result so far."""
        session.start("en-IN")

        speech_provider.emit_transcript("hello")
        await drain()
        speech_provider.emit_transcript("hello", " world")
        await drain()

        assert staging.text == "hello world"

    async def test_transcript_after_stop_is_dropped(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """A late transcript cannot overwrite text after stop."""
        session.start("en-IN")
        session.stop()
        staging.set_text("kept")

        speech_provider.emit_transcript("late")
        await drain()

        assert staging.text == "kept"

    async def test_event_queued_before_stop_is_dropped(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """An event posted but not yet handled when stop runs is ignored."""
        session.start("en-IN")
        speech_provider.emit_transcript("in flight")
        session.stop()

        await drain()

        assert staging.text == ""

    async def test_old_session_events_are_dropped(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """Callbacks bound by a previous session cannot reach a new one."""
        session.start("en-IN")
        stale = speech_provider._on_transcript
        session.stop()
        session.start("hi-IN")

        assert stale is not None
        stale(["from the old session"])
        await drain()

        assert staging.text == ""

    async def test_error_stops_session(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A recognizer error ends listening and is logged."""
        session.start("en-IN")

        with caplog.at_level(logging.WARNING):
            speech_provider.emit_error("no-speech")
            await drain()

        check.is_false(session.listening)
        check.equal(speech_provider.stops, 1)
        check.is_in("no-speech", caplog.text)

    async def test_end_event_returns_to_idle(
        self, session: SpeechSession, speech_provider: FakeSpeechProvider
    ) -> None:
        """The provider ending the session on its own clears listening."""
        session.start("en-IN")

        speech_provider.emit_end()
        await drain()

        check.is_false(session.listening)
        check.equal(speech_provider.stops, 0)

    async def test_restart_after_end(self, session: SpeechSession, speech_provider: FakeSpeechProvider) -> None:
        """A new session can start once the provider has ended the last one."""
        session.start("en-IN")
        speech_provider.emit_end()
        await drain()

        session.start("te-IN")

        check.is_true(session.listening)
        check.equal(speech_provider.configured, ["en-IN", "te-IN"])

    async def test_on_change_called_for_events(
        self, speech_provider: FakeSpeechProvider, staging: InputStagingArea
    ) -> None:
        """Each handled event notifies the owner."""
        changes: list[str] = []
        session = SpeechSession(speech_provider, staging, on_change=lambda: changes.append(staging.text))
        session.start("en-IN")

        speech_provider.emit_transcript("a")
        speech_provider.emit_end()
        await drain()

        assert changes == ["a", "a"]

    def test_events_without_loop_are_handled_inline(
        self,
        session: SpeechSession,
        speech_provider: FakeSpeechProvider,
        staging: InputStagingArea,
    ) -> None:
        """Outside an event loop, provider events are handled immediately."""
        session.start("en-IN")

        speech_provider.emit_transcript("direct")

        assert staging.text == "direct"
