"""Session configuration with environment variable loading.

Pydantic-based configuration for the Gemini chat session. The model id,
system instructions and temperature are fixed for the lifetime of a
session; the API key comes from GEMINI_API_KEY or GOOGLE_API_KEY.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from substrate_terminal.agent.prompts import SYSTEM_INSTRUCTION

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_TEMPERATURE = 0.05
DEFAULT_HISTORY_RUNS = 100


def _api_key_from_env() -> str:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", "")


class SessionConfig(BaseModel):
    """Configuration for one chat session.

    Attributes:
        model_id: Gemini model identifier.
        system_instructions: Opaque system prompt supplied once at creation.
        temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative).
        num_history_runs: Past exchanges replayed to the model on every turn.
        api_key: Credential for the Gemini API.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_id: str = Field(
        default_factory=lambda: os.getenv("SUBSTRATE_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    system_instructions: str = Field(
        default=SYSTEM_INSTRUCTION,
        description="System instructions sent once at session creation",
    )
    temperature: float = Field(
        default_factory=lambda: float(
            os.getenv("SUBSTRATE_TEMPERATURE", str(DEFAULT_TEMPERATURE))
        ),
        ge=0.0,
        le=1.0,
        description="Sampling temperature for response generation",
    )
    num_history_runs: int = Field(
        default_factory=lambda: int(
            os.getenv("SUBSTRATE_HISTORY_RUNS", str(DEFAULT_HISTORY_RUNS))
        ),
        ge=1,
        description="Number of previous exchanges kept in the model context",
    )
    api_key: str = Field(
        default_factory=_api_key_from_env,
        validate_default=True,
        repr=False,
        description="API key for the Gemini API",
    )

    @field_validator("model_id", "system_instructions")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only session parameters."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set GEMINI_API_KEY or GOOGLE_API_KEY in .env"
            )
        return v.strip()


def get_session_config() -> SessionConfig:
    """Create session configuration from environment.

    Returns:
        Configured SessionConfig instance.

    Raises:
        ValidationError: If no API key is set or a value is invalid.
    """
    return SessionConfig()
