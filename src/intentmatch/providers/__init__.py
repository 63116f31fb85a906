"""Provider abstractions: embedding service clients."""

from intentmatch.providers.base import (
    EmbeddingProvider,
    ProviderConfig,
    ProviderConnectionError,
    ProviderError,
    ProviderResponseError,
)


def create_embedding_provider(config: ProviderConfig) -> EmbeddingProvider:
    """Factory function to create embedding providers based on configuration.

    Args:
        config: Provider configuration with provider_type

    Returns:
        Initialized embedding provider

    Raises:
        ValueError: If provider_type is unknown
        ProviderError: If provider initialization fails or dependencies are missing

    Example:
        config = ProviderConfig(
            provider_type="gemini",
            model_name="text-embedding-004",
            api_key="GEMINI_API_KEY",
        )
        provider = create_embedding_provider(config)
    """
    provider_type = config.provider_type.lower()

    if provider_type == "gemini":
        from intentmatch.providers.gemini import GeminiEmbeddingProvider

        return GeminiEmbeddingProvider(config)

    elif provider_type == "openai":
        try:
            from intentmatch.providers.openai import OpenAIEmbeddingProvider
        except ImportError as e:
            raise ProviderError(
                message=(
                    "OpenAI embedding provider requires openai package. "
                    "Install with: pip install 'intentmatch[openai]'"
                ),
                provider="openai",
                original_error=e,
            )

        return OpenAIEmbeddingProvider(config)

    else:
        raise ValueError(
            f"Unknown embedding provider type: '{provider_type}'. "
            f"Supported types: gemini, openai"
        )


__all__ = [
    "EmbeddingProvider",
    "ProviderConfig",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderResponseError",
    "create_embedding_provider",
]
