"""Knowledge base of canonical question/answer pairs.

Why this exists:
- Holds the fixed set of entries the matcher compares queries against
- Decouples populating entries from paying for their embeddings
- Guarantees matching never sees an entry without a vector

How to use:
    from intentmatch.core.knowledge_base import KnowledgeBase

    kb = KnowledgeBase()
    kb.add_entry("What are the fees?", "Fees are listed on the admissions page.")
    await kb.ensure_embedded(provider)

    for entry in kb.entries():
        ...
"""

import asyncio
import json
import tomllib
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from intentmatch.core.similarity import InvalidInputError
from intentmatch.entities import KnowledgeEntry
from intentmatch.observability.logging import get_logger
from intentmatch.providers.base import EmbeddingProvider

logger = get_logger(__name__)


class KnowledgeBase:
    """Ordered collection of knowledge entries.

    Insertion order is kept and is the tie-break order used by the matcher.
    Embeddings are written once by ensure_embedded() and never invalidated.
    """

    def __init__(self) -> None:
        self._entries: list[KnowledgeEntry] = []
        self._dimension: int | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "KnowledgeBase":
        """Build a knowledge base from (question, answer) pairs."""
        kb = cls()
        for question, answer in pairs:
            kb.add_entry(question, answer)
        return kb

    def add_entry(self, question: str, answer: str) -> KnowledgeEntry:
        """Append an entry without embedding it.

        Raises:
            ValueError: If question or answer is blank
        """
        entry = KnowledgeEntry(question=question, answer=answer)
        self._entries.append(entry)
        logger.debug("knowledge_entry_added", entry_id=str(entry.id), question=question)
        return entry

    async def ensure_embedded(self, provider: EmbeddingProvider) -> int:
        """Embed every entry that does not have a vector yet.

        Entries are embedded one at a time in insertion order. On the first
        failure the whole call fails: entries embedded before it keep their
        vectors, the failing entry and those after it stay unembedded, so a
        later call picks up where this one stopped.

        Args:
            provider: Embedding provider used for the entry questions

        Returns:
            Number of entries newly embedded

        Raises:
            ProviderError: Propagated from the provider
            InvalidInputError: If a vector's dimension differs from the others
        """
        async with self._lock:
            pending = [i for i, entry in enumerate(self._entries) if not entry.is_embedded]
            if not pending:
                return 0

            logger.info("knowledge_base_embedding_started", pending=len(pending), total=len(self._entries))

            embedded = 0
            for index in pending:
                entry = self._entries[index]
                try:
                    vector = await provider.embed_text(entry.question)
                except Exception as e:
                    logger.error(
                        "knowledge_base_embedding_failed",
                        entry_id=str(entry.id),
                        question=entry.question,
                        embedded=embedded,
                        remaining=len(pending) - embedded,
                        error=str(e),
                    )
                    raise

                self._check_dimension(vector, entry)
                self._entries[index] = entry.with_embedding(vector)
                embedded += 1

            logger.info(
                "knowledge_base_embedding_completed",
                embedded=embedded,
                dimension=self._dimension,
            )
            return embedded

    def _check_dimension(self, vector: list[float], entry: KnowledgeEntry) -> None:
        if self._dimension is None:
            self._dimension = len(vector)
        elif len(vector) != self._dimension:
            raise InvalidInputError(
                f"Embedding for entry '{entry.question}' has dimension {len(vector)}, "
                f"expected {self._dimension}"
            )

    def entries(self) -> Iterator[KnowledgeEntry]:
        """Iterate over a snapshot of the entries in insertion order.

        Each call takes a fresh snapshot, so traversal is restartable and
        unaffected by entries added or embedded meanwhile.
        """
        snapshot = tuple(self._entries)
        return iter(snapshot)

    @property
    def is_embedded(self) -> bool:
        """True when every entry has a vector (vacuously true when empty)."""
        return all(entry.is_embedded for entry in self._entries)

    @property
    def dimension(self) -> int | None:
        """Vector dimension shared by all embedded entries, once known."""
        return self._dimension

    def __len__(self) -> int:
        return len(self._entries)


def load_entries(path: Path) -> list[dict[str, Any]]:
    """Read question/answer pairs from a TOML or JSON knowledge file.

    TOML files hold an ``[[entries]]`` array of tables; JSON files hold a
    list of objects (or an object with an ``entries`` list). Each item needs
    ``question`` and ``answer`` keys.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the format is unsupported or items are malformed
    """
    suffix = path.suffix.lower()

    if suffix == ".toml":
        with open(path, "rb") as f:
            data: Any = tomllib.load(f)
    elif suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported knowledge file format: '{path.suffix}' (use .toml or .json)")

    if isinstance(data, dict):
        data = data.get("entries", [])

    if not isinstance(data, list):
        raise ValueError(f"Knowledge file {path} must contain a list of entries")

    items = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or "question" not in item or "answer" not in item:
            raise ValueError(f"Entry {i} in {path} needs 'question' and 'answer' keys")
        items.append({"question": item["question"], "answer": item["answer"]})

    logger.info("knowledge_file_loaded", path=str(path), entry_count=len(items))
    return items
