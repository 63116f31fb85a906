"""Matcher initialization service.

Provides helper functions that wire configuration, the embedding provider,
and the knowledge base into a ready-to-use IntentMatcher.
"""

from typing import Optional

from intentmatch.config.schema import AppConfig
from intentmatch.core.knowledge_base import KnowledgeBase, load_entries
from intentmatch.observability.logging import get_logger
from intentmatch.pipelines.matcher import IntentMatcher
from intentmatch.providers import create_embedding_provider
from intentmatch.providers.base import EmbeddingProvider, ProviderConfig

logger = get_logger(__name__)


def provider_config_from(config: AppConfig) -> ProviderConfig:
    """Translate the embedding section of the app config into a ProviderConfig."""
    return ProviderConfig(
        provider_type=config.embedding.provider.value,
        model_name=config.embedding.model_name,
        api_key=config.embedding.api_key,
        base_url=config.embedding.base_url,
        timeout_seconds=config.embedding.timeout_seconds,
        extra_params=config.embedding.extra_params,
    )


def build_knowledge_base(config: AppConfig) -> KnowledgeBase:
    """Populate a knowledge base from the configured file and inline entries.

    File entries come first, then inline entries, in declaration order.
    """
    kb = KnowledgeBase()

    if config.knowledge_base.path:
        for item in load_entries(config.knowledge_base.path):
            kb.add_entry(item["question"], item["answer"])

    for item in config.knowledge_base.entries:
        kb.add_entry(item.question, item.answer)

    logger.info("knowledge_base_built", entry_count=len(kb))
    return kb


async def build_matcher(
    config: AppConfig,
    embedding_provider: Optional[EmbeddingProvider] = None,
) -> IntentMatcher:
    """Create an IntentMatcher with every knowledge entry already embedded.

    Embedding happens eagerly here so the first query does not pay for it
    and a provider outage is reported at startup.

    Args:
        config: Application configuration
        embedding_provider: Provider to use instead of the configured one

    Returns:
        Ready matcher; close ``matcher.embedding_provider`` when done

    Raises:
        ProviderError: If the provider cannot be created or an entry cannot be embedded
    """
    knowledge_base = build_knowledge_base(config)

    provider = embedding_provider or create_embedding_provider(provider_config_from(config))

    try:
        await knowledge_base.ensure_embedded(provider)
    except Exception:
        if embedding_provider is None:
            await provider.close()
        raise

    return IntentMatcher(
        knowledge_base=knowledge_base,
        embedding_provider=provider,
        threshold=config.matcher.similarity_threshold,
        fallback_message=config.matcher.fallback_message,
    )
