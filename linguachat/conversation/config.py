"""Controller configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from linguachat.models.languages import LANGUAGES

load_dotenv()

DEFAULT_GREETING = "Hello! I'm your AI assistant. How can I help you today?"


class ControllerConfig(BaseModel):
    """Configuration for a conversation session.

    Attributes:
        greeting: Text of the seeded bot message (id 1).
        default_locale: Locale tag selected when the session starts.
        whisper_model: faster-whisper model name or path for local speech.
        silence_timeout: Seconds without speech before the provider ends a session.
    """

    greeting: str = Field(default=DEFAULT_GREETING, min_length=1)
    default_locale: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_LOCALE", LANGUAGES[0].locale_tag),
    )
    whisper_model: str = Field(
        default_factory=lambda: os.getenv("WHISPER_MODEL", "base"),
    )
    silence_timeout: float = Field(
        default_factory=lambda: float(os.getenv("SPEECH_SILENCE_TIMEOUT", "8")),
        gt=0.0,
    )

    @field_validator("default_locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Only catalog locales can be selected."""
        tags = [language.locale_tag for language in LANGUAGES]
        if v not in tags:
            raise ValueError(f"DEFAULT_LOCALE must be one of {', '.join(tags)}")
        return v


def get_controller_config() -> ControllerConfig:
    """Create controller configuration from environment."""
    return ControllerConfig()
