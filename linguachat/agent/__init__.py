"""Responder collaborators that produce the bot's reply turns.

Responsibilities:
    - Demo replies with simulated latency
    - Agno agent orchestration over OpenAI-compatible models
    - Streaming replies from a remote chat service
    - Attachment context for model prompts

Responders only produce text; ordering, busy state and error turns are
the dispatcher's job.
"""

from linguachat.agent.chat_agent import AgentResponder
from linguachat.agent.config import AgentConfig, get_agent_config
from linguachat.agent.demo import DemoResponder
from linguachat.agent.remote import HttpResponder
from linguachat.conversation.blobs import BlobStore
from linguachat.conversation.dispatcher import Responder


def create_responder(config: AgentConfig | None = None, blobs: BlobStore | None = None) -> Responder:
    """Build the responder selected by configuration.

    Args:
        config: Responder configuration; loaded from environment if omitted.
        blobs: Session blob store, for attachment-aware responders.

    Returns:
        A Responder instance.
    """
    config = config or get_agent_config()
    if config.responder == "agent":
        return AgentResponder(config, blobs)
    if config.responder == "http":
        return HttpResponder(config, blobs)
    return DemoResponder(config.reply_delay)


__all__ = [
    "AgentConfig",
    "AgentResponder",
    "DemoResponder",
    "HttpResponder",
    "create_responder",
    "get_agent_config",
]
