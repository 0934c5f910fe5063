"""FastAPI application factory and configuration.

The chat controller is built before the app and handed in; the app only
reports on it and hosts the NiceGUI terminal.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from substrate_terminal.chat import ChatController
from substrate_terminal.models import HealthResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "substrate-terminal"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    if app.state.controller is None:
        logger.warning("Starting without a chat session; terminal is offline")
    else:
        logger.info("Starting substrate terminal...")
    yield
    # Only stops /health reporting the session; the terminal page keeps its own reference
    app.state.controller = None
    logger.info("Shutting down substrate terminal...")


def create_app(controller: ChatController | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        controller: Chat controller for the process, or None when the
            session could not be configured.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Substrate Terminal",
        description="Themed chat terminal streaming replies from a Gemini session.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.controller = controller

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Check service health and whether a chat session is available."""
        ready = request.app.state.controller is not None
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            session="ready" if ready else "unconfigured",
        )

    return application
