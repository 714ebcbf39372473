"""Agno agent responder.

Wraps Agno's Agent behind the responder interface the dispatcher calls:

1. **In-memory storage** - Agno keeps no history without a db. An InMemoryDb
   gives multi-turn context for the lifetime of the session and nothing
   survives it.

2. **One session per responder** - a responder belongs to one conversation,
   so its session_id is fixed at construction.

3. **Errors propagate** - failures are raised, not turned into reply text.
   The dispatcher converts them into a visible error turn and clears busy.

4. **Attachment context** - PDF and text attachments are extracted and added
   to the prompt (see ``compose_prompt``).
"""

import logging
import uuid

from agno.agent import Agent
from agno.db.in_memory import InMemoryDb
from agno.models.openai import OpenAIChat

from linguachat.agent.config import AgentConfig, get_agent_config
from linguachat.agent.prompt import compose_prompt
from linguachat.conversation.blobs import BlobStore
from linguachat.errors import ResponderFailure
from linguachat.models.schemas import Message

logger = logging.getLogger(__name__)


class AgentResponder:
    """Responder backed by an Agno agent over an OpenAI-compatible model."""

    def __init__(self, config: AgentConfig | None = None, blobs: BlobStore | None = None) -> None:
        """Initialize the agent responder.

        Args:
            config: Optional responder configuration.
                    Loads from environment if not provided.
            blobs: Store used to read attachment content for the prompt.
        """
        self._config = config or get_agent_config()
        self._blobs = blobs
        self.session_id = str(uuid.uuid4())
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent with OpenAI model and in-memory history.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            db=InMemoryDb(),
            description="A helpful multilingual chat assistant.",
            instructions=[
                "Provide helpful and accurate responses.",
                "Reply in the language the user writes in.",
                "When a file is attached, use its content to answer.",
                "Be concise yet thorough.",
            ],
            # History config: include last 10 runs in context.
            add_history_to_context=True,
            num_history_runs=10,
            markdown=True,
        )

    async def respond(self, message: Message) -> str:
        """Get the complete reply for a user message.

        Args:
            message: The submitted user message.

        Returns:
            Reply text.

        Raises:
            ResponderFailure: If the model returns no content.
        """
        prompt = compose_prompt(message, self._blobs, self._config.max_attachment_chars)
        response = await self._agent.arun(prompt, session_id=self.session_id)
        content = response.content
        if not content:
            raise ResponderFailure("the model returned an empty reply")
        logger.debug(f"Agent replied to message {message.id}")
        return str(content)
