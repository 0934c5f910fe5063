from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Role(str, Enum):
    """Speaker of a transcript turn."""

    USER = "user"
    MODEL = "model"


class TurnState(str, Enum):
    """Lifecycle of a transcript turn.

    User turns are born COMPLETE. Model turns start PENDING, move to
    STREAMING on the first chunk and end COMPLETE when the exchange settles.
    """

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"


class Turn(BaseModel):
    """One entry of the chat transcript.

    Attributes:
        role: Who produced the turn.
        text: Cumulative text. Replaced wholesale while a model turn streams.
        state: Lifecycle state; defaults from the role when omitted.
        metadata: Free-form display flags (integrity_check, failed, ...).
    """

    role: Role
    text: str = ""
    state: TurnState | None = None
    metadata: dict[str, bool] = Field(default_factory=dict)

    @model_validator(mode="after")
    def default_state(self) -> "Turn":
        """User turns are always complete; model turns default to pending."""
        if self.role == Role.USER:
            self.state = TurnState.COMPLETE
        elif self.state is None:
            self.state = TurnState.PENDING
        return self

    @property
    def is_complete(self) -> bool:
        return self.state == TurnState.COMPLETE


class SearchSource(BaseModel):
    """A web source backing a grounded search answer."""

    title: str
    uri: str


class SearchResult(BaseModel):
    """Text and sources returned by the signature oracle.

    Attributes:
        text: The model's answer.
        sources: Web pages the answer was grounded on.
    """

    text: str
    sources: list[SearchSource] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Payload of the health endpoint."""

    status: str
    service: str
    session: str
