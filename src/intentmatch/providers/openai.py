"""OpenAI embedding provider using official API.

This provider uses OpenAI's embedding API. It requires an API key and
internet connection. Any OpenAI-compatible endpoint can be targeted through
``base_url``.

Trade-offs:
- API costs per token
- Data sent to third-party service
- Rate limits apply
"""

import structlog
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from intentmatch.providers.base import (
    EmbeddingProvider,
    ProviderConfig,
    ProviderConnectionError,
    ProviderError,
    ProviderResponseError,
    resolve_api_key,
    validate_vector,
)

logger = structlog.get_logger(__name__)


# Model metadata for OpenAI embedding models
MODEL_METADATA = {
    "text-embedding-ada-002": {"dimension": 1536, "max_tokens": 8191},
    "text-embedding-3-small": {"dimension": 1536, "max_tokens": 8191},
    "text-embedding-3-large": {"dimension": 3072, "max_tokens": 8191},
}

# Default model if none specified
DEFAULT_MODEL = "text-embedding-3-small"


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI embedding provider using official API.

    Example:
        config = ProviderConfig(
            provider_type="openai",
            model_name="text-embedding-3-small",
            api_key="OPENAI_API_KEY",
        )
        provider = OpenAIEmbeddingProvider(config)
        embedding = await provider.embed_text("Hello world")
    """

    def __init__(self, config: ProviderConfig) -> None:
        """Initialize OpenAI embedding provider.

        Args:
            config: Provider configuration with api_key and model_name

        Raises:
            ProviderError: If API key is missing or client initialization fails
        """
        super().__init__(config)

        api_key = resolve_api_key(config.api_key, provider="openai")

        # Use default model if not specified
        self.model_name = config.model_name or DEFAULT_MODEL

        if self.model_name not in MODEL_METADATA:
            logger.warning(
                "unknown_openai_model",
                model_name=self.model_name,
                known_models=list(MODEL_METADATA.keys()),
            )

        client_kwargs = {
            "api_key": api_key,
            "timeout": config.timeout_seconds,
            # Retry policy belongs to the caller
            "max_retries": 0,
        }
        if config.base_url:
            client_kwargs["base_url"] = config.base_url
        if config.extra_params:
            client_kwargs.update(config.extra_params)

        try:
            self.client = AsyncOpenAI(**client_kwargs)
        except Exception as e:
            raise ProviderError(
                message=f"Failed to initialize OpenAI client: {type(e).__name__}",
                provider="openai",
                original_error=e,
            )

        logger.info(
            "openai_embedding_provider_initialized",
            model_name=self.model_name,
            timeout_seconds=config.timeout_seconds,
        )

    async def embed_text(self, text: str) -> list[float]:
        """Generate embedding for a single text.

        Args:
            text: Input text to embed

        Returns:
            Embedding vector as list of floats

        Raises:
            ProviderConnectionError: If the API cannot be reached or times out
            ProviderResponseError: If the API returns an error status or no vector
        """
        logger.debug(
            "calling_openai_embeddings_api",
            text_length=len(text),
            model=self.model_name,
        )

        try:
            response = await self.client.embeddings.create(
                input=text,
                model=self.model_name,
            )
        except APITimeoutError as e:
            raise ProviderConnectionError(
                message=f"Timed out after {self.config.timeout_seconds}s calling OpenAI",
                provider="openai",
                original_error=e,
            )
        except APIConnectionError as e:
            raise ProviderConnectionError(
                message=f"Network error connecting to OpenAI: {e.message}",
                provider="openai",
                original_error=e,
            )
        except APIStatusError as e:
            raise ProviderResponseError(
                message=f"OpenAI API error: {e.status_code} - {e.message}",
                provider="openai",
                status_code=e.status_code,
                original_error=e,
            )

        try:
            values = response.data[0].embedding
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderResponseError(
                message=f"Unexpected OpenAI response: {type(e).__name__}: {e}",
                provider="openai",
                original_error=e,
            )

        # Log token usage for cost tracking
        if getattr(response, "usage", None):
            logger.info(
                "openai_embedding_generated",
                tokens_used=response.usage.total_tokens,
                model=self.model_name,
            )

        return validate_vector(values, provider="openai")

    def get_dimension(self) -> int | None:
        """Return the embedding dimension for this model, if known."""
        metadata = MODEL_METADATA.get(self.model_name)
        return metadata["dimension"] if metadata else None

    async def close(self) -> None:
        """Close the OpenAI client connection."""
        logger.info(
            "closing_openai_embedding_provider",
            model_name=self.model_name,
        )
        await self.client.close()
