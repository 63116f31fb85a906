"""Intent matcher: map a free-form question onto a knowledge base answer.

Why this exists:
- Orchestrates query embedding, scoring, and the threshold decision
- Keeps "provider failed" distinct from "nothing matched"

How to use:
    from intentmatch.pipelines.matcher import IntentMatcher

    matcher = IntentMatcher(knowledge_base, embedding_provider, threshold=0.6)
    result = await matcher.match("how much does the course cost?")
    reply = await matcher.respond("how much does the course cost?")
"""

from intentmatch.config.schema import DEFAULT_FALLBACK_MESSAGE, DEFAULT_SIMILARITY_THRESHOLD
from intentmatch.core.knowledge_base import KnowledgeBase
from intentmatch.core.similarity import cosine_similarity
from intentmatch.entities import NO_SCORE, KnowledgeEntry, MatchResult
from intentmatch.observability.logging import get_logger
from intentmatch.providers.base import EmbeddingProvider

logger = get_logger(__name__)


class IntentMatcher:
    """Selects the single best knowledge entry for a query."""

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        embedding_provider: EmbeddingProvider,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        fallback_message: str = DEFAULT_FALLBACK_MESSAGE,
    ):
        """Initialize the matcher.

        Args:
            knowledge_base: Entries to match against
            embedding_provider: Provider for query (and lazily, entry) embeddings
            threshold: Minimum similarity in [-1, 1] for a match
            fallback_message: Reply used by respond() when nothing matches

        Raises:
            ValueError: If threshold is outside [-1, 1]
        """
        if not -1.0 <= threshold <= 1.0:
            raise ValueError(f"Similarity threshold must be within [-1, 1], got {threshold}")

        self.knowledge_base = knowledge_base
        self.embedding_provider = embedding_provider
        self.threshold = threshold
        self.fallback_message = fallback_message

    async def match(self, query: str) -> MatchResult:
        """Match a query against the knowledge base.

        Ties on the top score go to the entry inserted first.

        Args:
            query: User question, passed to the provider unchanged

        Returns:
            MatchResult; ``matched`` is true when the best score reaches the threshold

        Raises:
            ProviderError: If the query (or a pending entry) cannot be embedded
        """
        if len(self.knowledge_base) == 0:
            logger.warning("match_skipped_empty_knowledge_base", query=query)
            return MatchResult(query=query, score=NO_SCORE, matched=False)

        if not self.knowledge_base.is_embedded:
            await self.knowledge_base.ensure_embedded(self.embedding_provider)

        logger.info("match_started", query=query, threshold=self.threshold)

        query_vector = await self.embedding_provider.embed_text(query)

        best_entry: KnowledgeEntry | None = None
        best_score = NO_SCORE
        for entry in self.knowledge_base.entries():
            score = cosine_similarity(query_vector, entry.embedding)
            if score > best_score:
                best_entry = entry
                best_score = score

        matched = best_entry is not None and best_score >= self.threshold

        logger.info(
            "match_completed",
            query=query,
            score=round(best_score, 4),
            matched=matched,
            best_question=best_entry.question if best_entry else None,
        )

        return MatchResult(
            query=query,
            best_entry=best_entry if matched else None,
            score=best_score,
            matched=matched,
        )

    async def respond(self, query: str) -> str:
        """Return the matched answer, or the fallback message when nothing matches.

        Raises:
            ProviderError: Provider failures are not turned into the fallback
        """
        result = await self.match(query)
        if result.matched:
            return result.answer
        return self.fallback_message
