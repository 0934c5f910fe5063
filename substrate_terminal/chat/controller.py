"""Plumbing between the session manager and the transcript.

The controller is the only writer of the transcript while a turn streams.
It appends the user turn and an empty model turn, routes each cumulative
chunk to replace_last(), and finalizes the model turn once the exchange
settles. It also enforces the single-flight rule the session manager leaves
to its callers.
"""

import logging
from collections.abc import Callable

from substrate_terminal.agent.prompts import (
    BOOT_BANNER,
    FIRST_TOUCH_PROMPT,
    INTEGRITY_CHECK_PROMPT,
)
from substrate_terminal.agent.session import CancellationToken, SessionManager
from substrate_terminal.chat.transcript import TranscriptStore
from substrate_terminal.errors import (
    ConfigurationError,
    InvalidInputError,
    InvalidStateError,
    TransportError,
    TurnCancelledError,
)
from substrate_terminal.models import Role, Turn, TurnState

logger = logging.getLogger(__name__)

# Safety anchors reported by the sync prompt when the caller has no readings
DEFAULT_ENTROPY_H = 1.32
DEFAULT_DRIFT = 0.04

UpdateListener = Callable[[str], None]


class ChatController:
    """Drives one conversation on top of an initialized session."""

    def __init__(
        self,
        session: SessionManager,
        transcript: TranscriptStore | None = None,
        boot_banner: str | None = BOOT_BANNER,
    ) -> None:
        """Bind the controller to a session and a transcript.

        Args:
            session: An initialized session manager.
            transcript: Transcript to write to. A fresh one when omitted.
            boot_banner: Model turn shown before the first exchange; None
                starts with an empty transcript.
        """
        self.session = session
        self.transcript = transcript if transcript is not None else TranscriptStore()
        self._streaming = False
        self._cancel: CancellationToken | None = None

        if boot_banner:
            self.transcript.append(
                Turn(
                    role=Role.MODEL,
                    text=boot_banner,
                    state=TurnState.COMPLETE,
                    metadata={"integrity_check": True},
                )
            )

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    async def submit(
        self,
        text: str,
        tags: dict[str, bool] | None = None,
        on_update: UpdateListener | None = None,
    ) -> str:
        """Send a user message and stream the reply into the transcript.

        Args:
            text: The user's message.
            tags: Display flags copied onto both turns of the exchange.
            on_update: Called once the two turns are appended (with "")
                and after every chunk with the cumulative reply text.

        Returns:
            The final reply text, equal to the trailing model turn's text.

        Raises:
            InvalidInputError: If text is empty. The transcript is untouched.
            InvalidStateError: If a previous reply is still streaming.
            TransportError: If the stream fails. The partial reply is kept
                and the model turn is tagged as failed.
            TurnCancelledError: If cancel() was called mid-stream.
        """
        if not text or not text.strip():
            raise InvalidInputError("Message must not be empty")
        if self._streaming:
            raise InvalidStateError("A reply is still streaming")
        if not self.session.is_initialized:
            raise ConfigurationError("Session is not initialized")

        metadata = dict(tags or {})
        self.transcript.append(Turn(role=Role.USER, text=text, metadata=metadata))
        self.transcript.append(Turn(role=Role.MODEL, metadata=metadata))

        def on_chunk(cumulative: str) -> None:
            self.transcript.replace_last(cumulative)
            if on_update:
                on_update(cumulative)

        self._streaming = True
        self._cancel = CancellationToken()
        failed = True
        try:
            if on_update:
                on_update("")
            reply = await self.session.send_turn(text, on_chunk, cancel=self._cancel)
            failed = False
        except TransportError:
            logger.warning("Reply failed; keeping partial text in transcript")
            raise
        except TurnCancelledError:
            logger.info("Reply cancelled by user")
            raise
        finally:
            self.transcript.finalize_last(failed=failed)
            self._streaming = False
            self._cancel = None

        return reply

    async def run_integrity_check(self, on_update: UpdateListener | None = None) -> str:
        """Send the canned integrity audit prompt."""
        return await self.submit(
            INTEGRITY_CHECK_PROMPT,
            tags={"integrity_check": True},
            on_update=on_update,
        )

    async def run_first_touch(
        self,
        entropy_h: float = DEFAULT_ENTROPY_H,
        drift: float = DEFAULT_DRIFT,
        on_update: UpdateListener | None = None,
    ) -> str:
        """Send the First Touch safety sync prompt.

        Args:
            entropy_h: Entropy reading quoted in the prompt.
            drift: Cumulative identity drift quoted in the prompt.
            on_update: Same as for submit().
        """
        return await self.submit(
            FIRST_TOUCH_PROMPT.format(entropy_h=entropy_h, drift=drift),
            tags={"first_touch": True},
            on_update=on_update,
        )

    def cancel(self) -> bool:
        """Abandon the reply currently streaming.

        Returns:
            True if a reply was streaming and has been signalled.
        """
        if self._cancel is None:
            return False
        self._cancel.cancel()
        return True
