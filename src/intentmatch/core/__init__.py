"""Core algorithms: similarity scoring and the knowledge base."""

from intentmatch.core.knowledge_base import KnowledgeBase, load_entries
from intentmatch.core.similarity import InvalidInputError, cosine_similarity

__all__ = ["InvalidInputError", "KnowledgeBase", "cosine_similarity", "load_entries"]
