"""Shared fixtures for intentmatch tests."""

import pytest

from intentmatch.providers.base import EmbeddingProvider, ProviderConfig, ProviderError


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic provider returning fixed vectors from a lookup table."""

    def __init__(self, vectors: dict[str, list[float]], failing: set[str] | None = None) -> None:
        super().__init__(ProviderConfig(provider_type="fake", model_name="fake"))
        self.vectors = vectors
        self.failing = failing or set()
        self.calls: list[str] = []
        self.closed = False

    async def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.failing:
            raise ProviderError(message=f"Simulated failure for '{text}'", provider="fake")
        return list(self.vectors[text])

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_provider():
    """Factory for fake providers."""

    def _make(vectors: dict[str, list[float]], failing: set[str] | None = None) -> FakeEmbeddingProvider:
        return FakeEmbeddingProvider(vectors, failing)

    return _make
