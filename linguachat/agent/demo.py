"""Demo responder: canned replies after a fixed delay."""

import asyncio

from linguachat.models.schemas import Message

DEMO_REPLY = "I'm a demo AI assistant. This is a simulated response to demonstrate the UI."


def file_reply(name: str) -> str:
    return f"I've received your file: {name}. How would you like me to help you with it?"


class DemoResponder:
    """Simulated assistant used when no model backend is configured."""

    def __init__(self, reply_delay: float = 1.0) -> None:
        self.reply_delay = reply_delay

    async def respond(self, message: Message) -> str:
        await asyncio.sleep(self.reply_delay)
        if message.attachment is not None:
            return file_reply(message.attachment.name)
        return DEMO_REPLY
