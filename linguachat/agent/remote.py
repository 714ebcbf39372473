"""Responder backed by a remote chat service streaming Server-Sent Events."""

import json
import logging
import uuid

import httpx

from linguachat.agent.config import AgentConfig, get_agent_config
from linguachat.agent.prompt import compose_prompt
from linguachat.conversation.blobs import BlobStore
from linguachat.errors import ResponderFailure
from linguachat.models.schemas import Message

logger = logging.getLogger(__name__)


class HttpResponder:
    """Posts each user turn to ``/chat/stream`` and joins the streamed content."""

    def __init__(
        self,
        config: AgentConfig | None = None,
        blobs: BlobStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_agent_config()
        self._blobs = blobs
        self._transport = transport
        self.session_id = str(uuid.uuid4())

    async def respond(self, message: Message) -> str:
        """Consume the SSE stream for one message.

        Raises:
            ResponderFailure: On HTTP errors, connection errors, a streamed
                error event or an empty reply.
        """
        prompt = compose_prompt(message, self._blobs, self._config.max_attachment_chars)
        chunks: list[str] = []
        async with httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.timeout,
            transport=self._transport,
        ) as client:
            try:
                async with client.stream(
                    "POST",
                    "/chat/stream",
                    json={"message": prompt, "session_id": self.session_id},
                    headers={"Accept": "text/event-stream"},
                ) as response:
                    response.raise_for_status()
                    async for line in response.aiter_lines():
                        if not line.startswith("data: "):
                            continue
                        data = json.loads(line[6:])
                        if data.get("error"):
                            raise ResponderFailure(data["error"])
                        if content := data.get("content"):
                            chunks.append(content)
                        if data.get("done"):
                            break
            except httpx.HTTPStatusError as e:
                raise ResponderFailure(f"HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ResponderFailure(f"Connection failed: {e}") from e
            except json.JSONDecodeError as e:
                raise ResponderFailure(f"Malformed stream event: {e}") from e

        reply = "".join(chunks)
        if not reply.strip():
            raise ResponderFailure("the chat service returned an empty reply")
        return reply
