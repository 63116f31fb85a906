"""Abstract base class and error taxonomy for embedding providers.

Why this exists:
- Allows swapping between embedding services (Gemini, OpenAI, etc.)
- Enables testing the matcher with deterministic fake providers
- Gives callers one catchable error type for every provider failure

How to extend:
1. Subclass EmbeddingProvider
2. Implement embed_text
3. Register in create_embedding_provider
4. Add optional dependencies to pyproject.toml
"""

import math
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel


class ProviderConfig(BaseModel):
    """Base configuration for all providers."""

    provider_type: str
    model_name: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout_seconds: float = 30.0
    extra_params: dict[str, Any] = {}


class EmbeddingProvider(ABC):
    """Abstract interface for embedding providers.

    A provider turns one string into one fixed-length vector. Callers decide
    when to call it; providers do no caching and no retrying.
    """

    def __init__(self, config: ProviderConfig) -> None:
        """Initialize provider with configuration."""
        self.config = config

    @abstractmethod
    async def embed_text(self, text: str) -> list[float]:
        """Generate embedding for a single text.

        Args:
            text: Input text to embed, passed to the service as-is

        Returns:
            Embedding vector

        Raises:
            ProviderError: If embedding generation fails
        """
        pass

    async def close(self) -> None:
        """Release client resources."""
        pass

    async def __aenter__(self) -> "EmbeddingProvider":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit with automatic cleanup."""
        await self.close()


def resolve_api_key(api_key: Optional[str], provider: str) -> str:
    """Resolve an API key that may be given directly or as an env var name.

    Raises:
        ProviderError: If no key is configured or the named variable is empty
    """
    if not api_key:
        raise ProviderError(message="API key is required", provider=provider)

    env_value = os.getenv(api_key)
    if env_value:
        return env_value

    # Upper-case identifiers are treated as variable names that were not set
    if api_key.isidentifier() and api_key.upper() == api_key:
        raise ProviderError(
            message=f"Environment variable '{api_key}' not set or empty",
            provider=provider,
        )

    return api_key


def validate_vector(values: Any, provider: str) -> list[float]:
    """Check that a provider response field holds a usable vector.

    Raises:
        ProviderResponseError: If the value is not a non-empty list of finite numbers
    """
    if not isinstance(values, list) or not values:
        raise ProviderResponseError(
            message="Response did not contain a non-empty embedding vector",
            provider=provider,
        )

    vector = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProviderResponseError(
                message=f"Embedding vector contains a non-numeric value: {value!r}",
                provider=provider,
            )
        number = float(value)
        if not math.isfinite(number):
            raise ProviderResponseError(
                message="Embedding vector contains a non-finite value",
                provider=provider,
            )
        vector.append(number)

    return vector


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        super().__init__(self.message)


class ProviderConnectionError(ProviderError):
    """The outbound call could not be completed (DNS, reset, timeout)."""


class ProviderResponseError(ProviderError):
    """The service answered with a failure status or an unusable body."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider, original_error)
