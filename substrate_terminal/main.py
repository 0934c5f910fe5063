"""Main application entry point.

Runs FastAPI with the NiceGUI terminal mounted on the same server.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from substrate_terminal.agent import SignatureOracle
    from substrate_terminal.chat import ChatController

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def build_controller() -> tuple["ChatController | None", "SignatureOracle | None"]:
    """Initialize the process-wide chat session.

    Returns:
        (controller, oracle), or (None, None) when the session cannot be
        configured. The terminal then serves an offline notice.
    """
    from substrate_terminal.agent import SessionManager, SignatureOracle
    from substrate_terminal.chat import ChatController
    from substrate_terminal.errors import ConfigurationError

    session = SessionManager()
    try:
        session.initialize()
    except ConfigurationError as e:
        logger.error(f"Chat session unavailable: {e}")
        return None, None

    return ChatController(session), SignatureOracle(session.config)


def main() -> None:
    """Application entry point."""
    import uvicorn
    from nicegui import ui

    from substrate_terminal.api.app import create_app
    from substrate_terminal.ui import register_terminal_page

    controller, oracle = build_controller()
    app = create_app(controller)
    register_terminal_page(controller, oracle)

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="Substrate Terminal",
        favicon="🧠",
        dark=True,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "substrate-terminal-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Terminal available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
