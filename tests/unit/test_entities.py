"""Tests for domain entities."""

from uuid import UUID

import pytest

from intentmatch.entities import NO_SCORE, KnowledgeEntry, MatchResult


def test_knowledge_entry_creation():
    """Test creating an unembedded entry."""
    entry = KnowledgeEntry(question="fees", answer="Fee info")

    assert isinstance(entry.id, UUID)
    assert entry.embedding is None
    assert not entry.is_embedded


def test_with_embedding_returns_copy():
    """Test that embedding produces a new entry and keeps the original."""
    entry = KnowledgeEntry(question="fees", answer="Fee info")
    embedded = entry.with_embedding([0.5, 0.5])

    assert embedded.embedding == (0.5, 0.5)
    assert embedded.id == entry.id
    assert entry.embedding is None


def test_match_result_requires_entry_when_matched():
    """Test the matched/best_entry consistency rule."""
    with pytest.raises(ValueError, match="best_entry"):
        MatchResult(query="q", score=0.9, matched=True)

    entry = KnowledgeEntry(question="fees", answer="Fee info")
    with pytest.raises(ValueError, match="best_entry"):
        MatchResult(query="q", best_entry=entry, score=0.2, matched=False)


def test_match_result_defaults():
    """Test the no-match defaults."""
    result = MatchResult(query="q")

    assert result.matched is False
    assert result.score == NO_SCORE
    assert result.answer is None


def test_match_result_rejects_score_above_one():
    """Test that scores above 1 are invalid."""
    with pytest.raises(ValueError):
        MatchResult(query="q", score=1.5)
