"""Pydantic models shared by the chat core and the web shell.

Models:
    - Role, TurnState, Turn: transcript entries and their lifecycle
    - SearchSource, SearchResult: grounded search output
    - HealthResponse: health endpoint payload
"""

from substrate_terminal.models.schemas import (
    HealthResponse,
    Role,
    SearchResult,
    SearchSource,
    Turn,
    TurnState,
)

__all__ = [
    "HealthResponse",
    "Role",
    "SearchResult",
    "SearchSource",
    "Turn",
    "TurnState",
]
