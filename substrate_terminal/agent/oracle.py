"""Grounded signature search through the Gemini API.

One-shot generate_content call with the Google Search tool enabled. Unlike
the chat session this keeps no history and does not stream.
"""

import logging

from google import genai
from google.genai import types

from substrate_terminal.agent.config import SessionConfig
from substrate_terminal.agent.prompts import SIGNATURE_SEARCH_PROMPT
from substrate_terminal.errors import InvalidInputError, TransportError
from substrate_terminal.models import SearchResult, SearchSource

logger = logging.getLogger(__name__)

NO_SIGNATURES_TEXT = "No signatures found."
DEFAULT_SOURCE_TITLE = "Etherscan Source"


class SignatureOracle:
    """Wrapper around the Google GenAI client for grounded searches."""

    def __init__(self, config: SessionConfig) -> None:
        """Initialize the client.

        Args:
            config: Validated session configuration; only the model id and
                API key are used.
        """
        self._model_id = config.model_id
        self._client = genai.Client(api_key=config.api_key)

    async def search_signatures(self, address: str) -> SearchResult:
        """Search the web for verified signatures from an address.

        Args:
            address: Account or contract address to look up.

        Returns:
            Answer text and the web sources it was grounded on.

        Raises:
            InvalidInputError: If address is empty.
            TransportError: If the Gemini call fails.
        """
        address = address.strip()
        if not address:
            raise InvalidInputError("Address must not be empty")

        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model_id,
                contents=SIGNATURE_SEARCH_PROMPT.format(address=address),
                config=config,
            )
        except Exception as e:
            logger.error(f"Oracle search failed for {address}: {e}")
            raise TransportError(f"Signature search failed: {e}") from e

        return SearchResult(
            text=response.text or NO_SIGNATURES_TEXT,
            sources=_extract_sources(response),
        )


def _extract_sources(response: types.GenerateContentResponse) -> list[SearchSource]:
    """Collect web sources from the first candidate's grounding metadata."""
    if not response.candidates:
        return []

    metadata = response.candidates[0].grounding_metadata
    chunks = (metadata.grounding_chunks if metadata else None) or []

    return [
        SearchSource(title=chunk.web.title or DEFAULT_SOURCE_TITLE, uri=chunk.web.uri)
        for chunk in chunks
        if chunk.web and chunk.web.uri
    ]
