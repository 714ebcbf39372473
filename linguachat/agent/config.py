"""Responder configuration with environment variable loading.

Pydantic-based configuration for the reply side of the conversation.
Supports the built-in demo responder, an Agno agent over OpenAI or any
OpenAI-compatible API (via custom base URL), and a remote SSE chat endpoint.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

ResponderKind = Literal["demo", "agent", "http"]


class AgentConfig(BaseModel):
    """Configuration for the responder collaborator.

    Attributes:
        responder: Which responder to build (demo, agent or http).
        api_key: API key for model access (agent responder only).
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        reply_delay: Simulated latency of the demo responder, in seconds.
        timeout: Seconds before a pending reply counts as failed.
        api_base_url: Base URL of the remote chat service (http responder).
        max_attachment_chars: Cap on attachment text added to a prompt.
    """

    responder: ResponderKind = Field(
        default_factory=lambda: os.getenv("RESPONDER", "demo").lower(),
        validate_default=True,
        description="Responder implementation",
    )
    api_key: str | None = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY")) or None,
        validate_default=True,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    reply_delay: float = Field(
        default_factory=lambda: float(os.getenv("REPLY_DELAY", "1.0")),
        ge=0.0,
        description="Demo responder latency in seconds",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("RESPONDER_TIMEOUT", "30")),
        gt=0.0,
        description="Seconds to wait for a reply",
    )
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Remote chat service base URL",
    )
    max_attachment_chars: int = Field(
        default=20000,
        ge=0,
        description="Maximum attachment characters included in a prompt",
    )

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str | None) -> str | None:
        """Normalize blank keys to None."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @model_validator(mode="after")
    def require_key_for_agent(self) -> "AgentConfig":
        """The agent responder cannot run without an API key."""
        if self.responder == "agent" and self.api_key is None:
            raise ValueError(
                "API key required for RESPONDER=agent. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return self


def get_agent_config() -> AgentConfig:
    """Create responder configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If RESPONDER=agent and no API key is set.
    """
    return AgentConfig()
