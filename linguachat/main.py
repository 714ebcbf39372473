"""Main application entry point.

Runs the NiceGUI chat interface (port 8080 by default).
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point."""
    from nicegui import ui

    from linguachat.agent import get_agent_config
    from linguachat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_agent_config()
    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Starting LinguaChat with the {config.responder} responder")
    logger.info(f"Chat UI available at http://localhost:{port}/")

    ui.run(
        title="LinguaChat",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "linguachat-secret"),
    )


if __name__ == "__main__":
    main()
