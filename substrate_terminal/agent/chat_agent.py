"""Agno chat backend driving a Gemini model.

The session manager only ever talks to a ChatBackend: something that takes
one user message and yields text increments until the reply ends. Keeping
the interface this narrow lets tests swap in a scripted fake.

Implementation notes:

1. **One agno session per backend** - The backend picks a session id once and
   reuses it for every message. The last `num_history_runs` exchanges
   (100 by default, SUBSTRATE_HISTORY_RUNS) are replayed to the model, so
   it sees the whole conversation up to that window. Creating a second
   backend starts an independent conversation.

2. **In-memory history** - Agno only carries history across runs when the
   agent has a db. InMemoryDb gives multi-turn context without writing
   anything to disk; history is gone when the process exits.

3. **Content events only** - Agno streams typed run events. Only
   RunContent events carry reply text; RunError events are turned into
   exceptions so the session manager sees a failed stream.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from typing import Protocol

from agno.agent import Agent
from agno.db.in_memory import InMemoryDb
from agno.models.google import Gemini
from agno.run.agent import RunEvent

from substrate_terminal.agent.config import SessionConfig

logger = logging.getLogger(__name__)


class ChatBackend(Protocol):
    """Capability interface to the external chat service."""

    def stream(self, message: str) -> AsyncIterator[str]:
        """Send one user message and yield reply text increments."""
        ...


class ChatStreamError(RuntimeError):
    """Raised when the model run reports an error event mid-stream."""

    pass


class AgnoChatBackend:
    """ChatBackend backed by an agno Agent and a Gemini model."""

    def __init__(self, config: SessionConfig) -> None:
        """Create the agent for a new conversation.

        Args:
            config: Validated session configuration.
        """
        self._config = config
        self.session_id: str = str(uuid.uuid4())
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Agent with a Gemini model and in-memory conversation history.
        """
        model = Gemini(
            id=self._config.model_id,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
        )

        return Agent(
            model=model,
            db=InMemoryDb(),
            instructions=self._config.system_instructions,
            add_history_to_context=True,
            num_history_runs=self._config.num_history_runs,
            # Replies are rendered verbatim in the terminal
            markdown=False,
        )

    async def stream(self, message: str) -> AsyncIterator[str]:
        """Stream reply increments for a message.

        Args:
            message: The user's message.

        Yields:
            Non-empty text increments in the order the model emits them.

        Raises:
            ChatStreamError: If the run reports an error event.
        """
        response_stream = self._agent.arun(
            message,
            session_id=self.session_id,
            stream=True,
        )

        async for chunk in response_stream:
            event = getattr(chunk, "event", None)
            if event == RunEvent.run_error:
                raise ChatStreamError(chunk.content or "Model run failed")
            if event == RunEvent.run_content and chunk.content:
                yield chunk.content


def create_chat_backend(config: SessionConfig) -> ChatBackend:
    """Default backend factory used by the session manager."""
    backend = AgnoChatBackend(config)
    logger.info(f"Opened Gemini chat session {backend.session_id} ({config.model_id})")
    return backend
