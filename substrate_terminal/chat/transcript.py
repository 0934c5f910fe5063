"""Ordered, append-only log of chat turns.

Only the trailing model turn may change, and only until it is finalized.
Readers get copies from snapshot() so rendering never races a stream.
"""

from collections.abc import Iterator

from substrate_terminal.errors import InvalidStateError
from substrate_terminal.models import Role, Turn, TurnState


class TranscriptStore:
    """In-memory transcript for a single conversation."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())

    @property
    def last(self) -> Turn | None:
        """Copy of the trailing turn, or None when empty."""
        if not self._turns:
            return None
        return self._turns[-1].model_copy(deep=True)

    def append(self, turn: Turn) -> None:
        """Add a turn to the end of the transcript."""
        self._turns.append(turn.model_copy(deep=True))

    def replace_last(self, text: str) -> None:
        """Replace the trailing model turn's text wholesale.

        Raises:
            InvalidStateError: If the transcript is empty, the last turn is
                not a model turn, or it is already complete.
        """
        turn = self._streamable_last()
        turn.text = text
        turn.state = TurnState.STREAMING

    def finalize_last(self, failed: bool = False) -> None:
        """Mark the trailing model turn complete.

        Args:
            failed: Tag the turn as failed so the UI can flag it. Its text is
                left as the last delivered chunk.

        Raises:
            InvalidStateError: Same conditions as replace_last().
        """
        turn = self._streamable_last()
        turn.state = TurnState.COMPLETE
        if failed:
            turn.metadata["failed"] = True

    def snapshot(self) -> tuple[Turn, ...]:
        """Return an immutable copy of the transcript for rendering."""
        return tuple(turn.model_copy(deep=True) for turn in self._turns)

    def _streamable_last(self) -> Turn:
        if not self._turns:
            raise InvalidStateError("Transcript is empty")
        turn = self._turns[-1]
        if turn.role != Role.MODEL:
            raise InvalidStateError(f"Last turn has role '{turn.role.value}', expected 'model'")
        if turn.state == TurnState.COMPLETE:
            raise InvalidStateError("Last model turn is already complete")
        return turn
