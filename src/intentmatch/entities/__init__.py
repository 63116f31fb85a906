"""Entities - Domain models for the intent matcher.

- KnowledgeEntry: A canonical question/answer pair with its embedding
- MatchResult: The outcome of matching one query against the knowledge base
"""

from intentmatch.entities.knowledge_entry import KnowledgeEntry
from intentmatch.entities.match_result import NO_SCORE, MatchResult

__all__ = [
    "KnowledgeEntry",
    "MatchResult",
    "NO_SCORE",
]
