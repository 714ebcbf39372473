"""Speech-to-text providers for dictation into the input box.

Providers:
    - UnavailableSpeechProvider: capability absent, voice input hidden
    - WhisperSpeechProvider: local microphone + faster-whisper (optional extra)
"""

from linguachat.speech.base import SpeechProvider, UnavailableSpeechProvider
from linguachat.speech.whisper import (
    TranscriptWindow,
    WhisperConfig,
    WhisperSpeechProvider,
    speech_backend_installed,
)

__all__ = [
    "SpeechProvider",
    "TranscriptWindow",
    "UnavailableSpeechProvider",
    "WhisperConfig",
    "WhisperSpeechProvider",
    "speech_backend_installed",
]
