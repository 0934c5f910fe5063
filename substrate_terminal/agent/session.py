"""Session manager: one long-lived chat session and its streaming contract.

The manager turns the backend's text increments into cumulative text. Every
on_chunk call receives the whole reply observed so far, so subscribers never
have to stitch deltas together; each value extends the previous one.

The manager does not serialize concurrent send_turn calls. Callers must wait
for one turn to settle before sending the next (see ChatController).
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping
from typing import Any

from substrate_terminal.agent.chat_agent import ChatBackend, create_chat_backend
from substrate_terminal.agent.config import SessionConfig
from substrate_terminal.errors import (
    ConfigurationError,
    InvalidInputError,
    TransportError,
    TurnCancelledError,
)

logger = logging.getLogger(__name__)

BackendFactory = Callable[[SessionConfig], ChatBackend]
ChunkCallback = Callable[[str], None]


class CancellationToken:
    """Signal used to abandon a pending send_turn call."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class SessionManager:
    """Owns the chat session bound to a fixed configuration.

    Construct it explicitly and hand it to whatever needs it; there is no
    module-level instance.
    """

    def __init__(self, backend_factory: BackendFactory = create_chat_backend) -> None:
        """Prepare an uninitialized manager.

        Args:
            backend_factory: Builds the external session from a config.
                Tests pass a factory returning a scripted fake.
        """
        self._backend_factory = backend_factory
        self._backend: ChatBackend | None = None
        self._config: SessionConfig | None = None

    @property
    def config(self) -> SessionConfig | None:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._backend is not None

    def initialize(self, config: SessionConfig | Mapping[str, Any] | None = None) -> None:
        """Establish the external session.

        Calling this twice creates two independent sessions; the second one
        replaces the first.

        Args:
            config: A SessionConfig, a mapping of its fields, or None to load
                everything from the environment.

        Raises:
            ConfigurationError: If a parameter or the credential is missing
                or invalid.
        """
        try:
            if config is None:
                config = SessionConfig()
            elif not isinstance(config, SessionConfig):
                config = SessionConfig(**config)
        except ValueError as e:
            raise ConfigurationError(f"Invalid session configuration: {e}") from e

        self._backend = self._backend_factory(config)
        self._config = config
        logger.info(
            f"Session initialized (model={config.model_id}, "
            f"temperature={config.temperature})"
        )

    async def send_turn(
        self,
        text: str,
        on_chunk: ChunkCallback,
        cancel: CancellationToken | None = None,
    ) -> str:
        """Send one user turn and stream the reply.

        Args:
            text: The user's message. Must be non-empty after trimming.
            on_chunk: Called once per received increment with the full
                cumulative reply text.
            cancel: Optional token; when signalled the call stops waiting
                for the stream and raises TurnCancelledError.

        Returns:
            The final cumulative reply text.

        Raises:
            InvalidInputError: If text is empty or whitespace.
            ConfigurationError: If initialize() has not been called.
            TransportError: If the stream fails at any point.
            TurnCancelledError: If the cancellation token fires first.
        """
        if not text or not text.strip():
            raise InvalidInputError("Message must not be empty")
        if self._backend is None:
            raise ConfigurationError("Session is not initialized")

        try:
            iterator = aiter(self._backend.stream(text))
        except Exception as e:
            raise TransportError(f"Could not open chat stream: {e}") from e

        accumulated = ""
        try:
            while True:
                try:
                    delta = await self._next_delta(iterator, cancel)
                except StopAsyncIteration:
                    break
                except (TurnCancelledError, asyncio.CancelledError):
                    raise
                except Exception as e:
                    logger.error(f"Chat stream failed after {len(accumulated)} chars: {e}")
                    raise TransportError(f"Chat stream failed: {e}") from e

                # An empty delta would repeat the previous cumulative text
                if not delta:
                    continue
                accumulated += delta
                on_chunk(accumulated)
        finally:
            await _close_stream(iterator)

        logger.debug(f"Turn complete ({len(accumulated)} chars)")
        return accumulated

    async def _next_delta(
        self,
        iterator: AsyncIterator[str],
        cancel: CancellationToken | None,
    ) -> str:
        if cancel is None:
            return await anext(iterator)
        if cancel.cancelled:
            raise TurnCancelledError("Turn cancelled")

        next_task = asyncio.create_task(_pull(iterator))
        cancel_task = asyncio.create_task(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {next_task, cancel_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            next_task.cancel()
            raise
        finally:
            cancel_task.cancel()

        if next_task in done:
            return next_task.result()

        next_task.cancel()
        try:
            await next_task
        except (asyncio.CancelledError, StopAsyncIteration):
            pass
        raise TurnCancelledError("Turn cancelled")


async def _pull(iterator: AsyncIterator[str]) -> str:
    return await anext(iterator)


async def _close_stream(iterator: AsyncIterator[str]) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except RuntimeError:
        # Generator is still running inside a cancelled task
        pass
