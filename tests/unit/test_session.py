"""Unit tests for SessionManager initialization and streaming."""

import asyncio

import pytest
import pytest_check as check

from substrate_terminal.agent.config import SessionConfig
from substrate_terminal.agent.session import CancellationToken, SessionManager
from substrate_terminal.errors import (
    ConfigurationError,
    InvalidInputError,
    TransportError,
    TurnCancelledError,
)
from tests.conftest import ScriptedBackend, ScriptedFactory


class TestInitialize:
    """Tests for SessionManager.initialize."""

    def test_initialize_with_config(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        """A valid config opens exactly one external session."""
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)

        check.is_true(manager.is_initialized)
        check.equal(backend_factory.configs, [session_config])
        check.equal(manager.config, session_config)

    def test_initialize_with_mapping(self, backend_factory: ScriptedFactory) -> None:
        """A plain mapping is validated into a SessionConfig."""
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(
            {"model_id": "m1", "system_instructions": "x", "temperature": 0.1, "api_key": "k"}
        )

        config = backend_factory.configs[0]
        check.equal(config.model_id, "m1")
        check.equal(config.system_instructions, "x")
        check.equal(config.temperature, 0.1)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"model_id": ""},
            {"system_instructions": ""},
            {"temperature": 1.2},
            {"api_key": ""},
        ],
    )
    def test_invalid_config_raises_configuration_error(
        self, backend_factory: ScriptedFactory, overrides: dict
    ) -> None:
        """Bad parameters fail before any session is opened."""
        params = {"model_id": "m1", "system_instructions": "x", "temperature": 0.1, "api_key": "k"}
        params.update(overrides)
        manager = SessionManager(backend_factory=backend_factory)

        with pytest.raises(ConfigurationError):
            manager.initialize(params)

        assert backend_factory.configs == []
        assert not manager.is_initialized

    def test_missing_credential_in_environment(
        self, backend_factory: ScriptedFactory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Loading from the environment without a key is a configuration error."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        manager = SessionManager(backend_factory=backend_factory)

        with pytest.raises(ConfigurationError, match="API key"):
            manager.initialize()

    def test_initialize_twice_opens_two_sessions(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        """Initialization is not idempotent."""
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        manager.initialize(session_config)

        assert len(backend_factory.configs) == 2


class TestSendTurn:
    """Tests for SessionManager.send_turn streaming contract."""

    async def test_reference_scenario(
        self, backend_factory: ScriptedFactory, session_manager: SessionManager
    ) -> None:
        """Increments H, e, l arrive as cumulative H, He, Hel."""
        received: list[str] = []

        result = await session_manager.send_turn("hello", received.append)

        check.equal(received, ["H", "He", "Hel"])
        check.equal(result, "Hel")
        check.equal(backend_factory.backends[0].messages, ["hello"])

    async def test_chunks_grow_monotonically(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        """Every cumulative chunk extends the previous one."""
        backend_factory.next_backend = ScriptedBackend(["The ", "truth ", "is a ", "frequency."])
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        received: list[str] = []

        result = await manager.send_turn("query", received.append)

        for previous, current in zip(received, received[1:]):
            check.is_true(current.startswith(previous))
            check.greater(len(current), len(previous))
        check.equal(received[-1], result)
        check.equal(result, "The truth is a frequency.")

    async def test_empty_increments_are_skipped(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        """Empty increments do not trigger a callback."""
        backend_factory.next_backend = ScriptedBackend(["a", "", "b"])
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        received: list[str] = []

        await manager.send_turn("query", received.append)

        assert received == ["a", "ab"]

    async def test_empty_stream_returns_empty_text(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        backend_factory.next_backend = ScriptedBackend([])
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        received: list[str] = []

        assert await manager.send_turn("query", received.append) == ""
        assert received == []

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_rejected_before_network(
        self, backend_factory: ScriptedFactory, session_manager: SessionManager, text: str
    ) -> None:
        """Blank input fails with no callbacks and no backend call."""
        received: list[str] = []

        with pytest.raises(InvalidInputError):
            await session_manager.send_turn(text, received.append)

        assert received == []
        assert backend_factory.backends[0].messages == []

    async def test_send_before_initialize(self, backend_factory: ScriptedFactory) -> None:
        manager = SessionManager(backend_factory=backend_factory)

        with pytest.raises(ConfigurationError):
            await manager.send_turn("hello", lambda _: None)

    async def test_stream_failure_raises_transport_error(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        """A mid-stream failure stops callbacks and raises TransportError."""
        backend_factory.next_backend = ScriptedBackend(["a", "b", "c"], fail_after=2)
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        received: list[str] = []

        with pytest.raises(TransportError) as exc_info:
            await manager.send_turn("query", received.append)

        check.equal(received, ["a", "ab"])
        check.is_instance(exc_info.value.__cause__, ConnectionError)

    async def test_failure_before_first_chunk(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        backend_factory.next_backend = ScriptedBackend(["a"], fail_after=0)
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        received: list[str] = []

        with pytest.raises(TransportError):
            await manager.send_turn("query", received.append)

        assert received == []

    async def test_callback_errors_are_not_transport_errors(
        self, session_manager: SessionManager
    ) -> None:
        """Exceptions raised by on_chunk propagate unchanged."""

        def on_chunk(_: str) -> None:
            raise KeyError("subscriber bug")

        with pytest.raises(KeyError):
            await session_manager.send_turn("hello", on_chunk)


class TestCancellation:
    """Tests for the optional cancellation token."""

    async def test_cancel_stops_pending_turn(
        self, backend_factory: ScriptedFactory, session_config: SessionConfig
    ) -> None:
        """Signalling the token settles the call with TurnCancelledError."""
        backend_factory.next_backend = ScriptedBackend(["a", "b"], hang=True)
        manager = SessionManager(backend_factory=backend_factory)
        manager.initialize(session_config)
        token = CancellationToken()
        received: list[str] = []

        task = asyncio.create_task(manager.send_turn("query", received.append, cancel=token))
        while len(received) < 2:
            await asyncio.sleep(0)
        token.cancel()

        with pytest.raises(TurnCancelledError):
            await asyncio.wait_for(task, timeout=1.0)
        assert received == ["a", "ab"]

    async def test_already_cancelled_token(self, session_manager: SessionManager) -> None:
        """A token cancelled up front produces no callbacks."""
        token = CancellationToken()
        token.cancel()
        received: list[str] = []

        with pytest.raises(TurnCancelledError):
            await session_manager.send_turn("hello", received.append, cancel=token)

        assert received == []

    async def test_uncancelled_token_completes_normally(
        self, session_manager: SessionManager
    ) -> None:
        received: list[str] = []

        result = await session_manager.send_turn(
            "hello", received.append, cancel=CancellationToken()
        )

        assert result == "Hel"
        assert received == ["H", "He", "Hel"]
