"""Gemini embedding provider using the Generative Language REST API.

Calls the ``embedContent`` endpoint directly over httpx, one request per
text. The API key travels in the ``x-goog-api-key`` header so it never
appears in URLs, and therefore never in exception text or logs.
"""

import httpx
import structlog

from intentmatch.providers.base import (
    EmbeddingProvider,
    ProviderConfig,
    ProviderConnectionError,
    ProviderResponseError,
    resolve_api_key,
    validate_vector,
)

logger = structlog.get_logger(__name__)


DEFAULT_MODEL = "text-embedding-004"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Known output dimensions, informational only
MODEL_DIMENSIONS = {
    "text-embedding-004": 768,
    "embedding-001": 768,
}


class GeminiEmbeddingProvider(EmbeddingProvider):
    """Gemini embedding provider.

    Example:
        config = ProviderConfig(
            provider_type="gemini",
            model_name="text-embedding-004",
            api_key="GEMINI_API_KEY",
        )
        async with GeminiEmbeddingProvider(config) as provider:
            vector = await provider.embed_text("What are the fees?")
    """

    def __init__(self, config: ProviderConfig) -> None:
        """Initialize the provider and its HTTP client.

        Raises:
            ProviderError: If no API key can be resolved
        """
        super().__init__(config)

        api_key = resolve_api_key(config.api_key, provider="gemini")

        self.model_name = (config.model_name or DEFAULT_MODEL).removeprefix("models/")
        self.base_url = config.base_url or DEFAULT_BASE_URL

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
            },
            timeout=config.timeout_seconds,
        )

        logger.info(
            "gemini_embedding_provider_initialized",
            model_name=self.model_name,
            base_url=self.base_url,
            timeout_seconds=config.timeout_seconds,
        )

    async def embed_text(self, text: str) -> list[float]:
        """Generate embedding for a single text.

        Raises:
            ProviderConnectionError: If the request cannot be completed or times out
            ProviderResponseError: On non-2xx status or a body without ``embedding.values``
        """
        # extra_params carries optional request fields such as taskType or outputDimensionality
        payload = {
            **self.config.extra_params,
            "model": f"models/{self.model_name}",
            "content": {"parts": [{"text": text}]},
        }

        logger.debug(
            "calling_gemini_embed_content",
            text_length=len(text),
            model=self.model_name,
        )

        try:
            response = await self.client.post(
                f"/models/{self.model_name}:embedContent", json=payload
            )
        except httpx.TimeoutException as e:
            raise ProviderConnectionError(
                message=f"Timed out after {self.config.timeout_seconds}s calling Gemini: {type(e).__name__}",
                provider="gemini",
                original_error=e,
            )
        except httpx.TransportError as e:
            raise ProviderConnectionError(
                message=f"Network error connecting to Gemini: {type(e).__name__}: {e}",
                provider="gemini",
                original_error=e,
            )

        if not response.is_success:
            raise ProviderResponseError(
                message=f"Gemini API error: {response.status_code} - {response.text}",
                provider="gemini",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            values = data["embedding"]["values"]
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderResponseError(
                message=f"Unexpected Gemini response body: {type(e).__name__}: {e}",
                provider="gemini",
                status_code=response.status_code,
                original_error=e,
            )

        return validate_vector(values, provider="gemini")

    def get_dimension(self) -> int | None:
        """Return the known output dimension for the configured model, if any."""
        return MODEL_DIMENSIONS.get(self.model_name)

    async def close(self) -> None:
        """Close the HTTP client."""
        logger.info("closing_gemini_embedding_provider", model_name=self.model_name)
        await self.client.aclose()


__all__ = ["GeminiEmbeddingProvider"]
