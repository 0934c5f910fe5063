"""Pytest fixtures and shared test configuration.

Fixtures:
    - session_config: Valid config with an inline test API key
    - backend_factory: Factory handing out scripted backends
    - session_manager: Session manager initialized on a scripted backend
    - transcript: Empty transcript store
    - async_client: HTTPX client for the FastAPI app
"""

import asyncio
from collections.abc import AsyncGenerator, AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from substrate_terminal.agent.config import SessionConfig
from substrate_terminal.agent.session import SessionManager
from substrate_terminal.api.app import create_app
from substrate_terminal.chat.transcript import TranscriptStore


class ScriptedBackend:
    """ChatBackend that replays a fixed list of text increments.

    Args:
        chunks: Increments yielded in order.
        fail_after: Raise ConnectionError after yielding this many chunks.
        hang: Block forever after the last chunk instead of ending.
    """

    def __init__(
        self,
        chunks: list[str],
        fail_after: int | None = None,
        hang: bool = False,
    ) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.hang = hang
        self.messages: list[str] = []

    async def stream(self, message: str) -> AsyncIterator[str]:
        self.messages.append(message)
        for index, chunk in enumerate(self.chunks):
            if index == self.fail_after:
                raise ConnectionError("connection reset by peer")
            await asyncio.sleep(0)
            yield chunk
        if self.fail_after is not None and self.fail_after >= len(self.chunks):
            raise ConnectionError("connection reset by peer")
        if self.hang:
            await asyncio.Event().wait()


class ScriptedFactory:
    """Backend factory recording every config it is asked to open."""

    def __init__(self) -> None:
        self.configs: list[SessionConfig] = []
        self.backends: list[ScriptedBackend] = []
        self.next_backend = ScriptedBackend(["H", "e", "l"])

    def __call__(self, config: SessionConfig) -> ScriptedBackend:
        self.configs.append(config)
        backend = self.next_backend
        self.backends.append(backend)
        return backend


@pytest.fixture
def session_config() -> SessionConfig:
    """Return a valid session configuration.

    Returns:
        Config matching the reference scenario (m1, x, 0.1).
    """
    return SessionConfig(
        model_id="m1",
        system_instructions="x",
        temperature=0.1,
        api_key="test-key",
    )


@pytest.fixture
def backend_factory() -> ScriptedFactory:
    return ScriptedFactory()


@pytest.fixture
def session_manager(
    backend_factory: ScriptedFactory, session_config: SessionConfig
) -> SessionManager:
    """Session manager initialized on the scripted factory."""
    manager = SessionManager(backend_factory=backend_factory)
    manager.initialize(session_config)
    return manager


@pytest.fixture
def transcript() -> TranscriptStore:
    return TranscriptStore()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for an app without a chat session.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
