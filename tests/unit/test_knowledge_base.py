"""Unit tests for KnowledgeBase."""

import asyncio
import json

import pytest

from intentmatch.core.knowledge_base import KnowledgeBase, load_entries
from intentmatch.core.similarity import InvalidInputError
from intentmatch.providers.base import EmbeddingProvider, ProviderConfig, ProviderError


class TestKnowledgeBaseEntries:
    """Test populating and iterating entries."""

    def test_add_entry_leaves_embedding_absent(self):
        """Test that add_entry does not embed."""
        kb = KnowledgeBase()
        entry = kb.add_entry("fees", "Fee info")

        assert entry.question == "fees"
        assert entry.answer == "Fee info"
        assert entry.embedding is None
        assert len(kb) == 1
        assert not kb.is_embedded

    def test_add_blank_entry_fails(self):
        """Test that blank questions and answers are rejected."""
        kb = KnowledgeBase()
        with pytest.raises(ValueError, match="question cannot be empty"):
            kb.add_entry("   ", "answer")
        with pytest.raises(ValueError, match="answer cannot be empty"):
            kb.add_entry("question", "")
        assert len(kb) == 0

    def test_entries_preserve_insertion_order(self):
        """Test iteration follows insertion order."""
        kb = KnowledgeBase.from_pairs([("a", "1"), ("b", "2"), ("c", "3")])
        assert [e.question for e in kb.entries()] == ["a", "b", "c"]

    def test_entries_is_restartable(self):
        """Test that each call yields a fresh traversal."""
        kb = KnowledgeBase.from_pairs([("a", "1"), ("b", "2")])
        first = list(kb.entries())
        second = list(kb.entries())
        assert first == second
        assert len(first) == 2

    def test_entries_is_a_snapshot(self):
        """Test that entries added during traversal are not visited."""
        kb = KnowledgeBase.from_pairs([("a", "1")])
        iterator = kb.entries()
        kb.add_entry("b", "2")
        assert [e.question for e in iterator] == ["a"]

    def test_entries_are_read_only(self):
        """Test that callers cannot mutate entries."""
        kb = KnowledgeBase.from_pairs([("a", "1")])
        entry = next(kb.entries())
        with pytest.raises(ValueError):
            entry.answer = "changed"

    def test_empty_knowledge_base(self):
        """Test an empty base."""
        kb = KnowledgeBase()
        assert len(kb) == 0
        assert list(kb.entries()) == []
        assert kb.is_embedded
        assert kb.dimension is None


@pytest.mark.asyncio
class TestKnowledgeBaseEmbedding:
    """Test ensure_embedded."""

    async def test_ensure_embedded_embeds_questions(self, make_provider):
        """Test that each question is embedded once."""
        provider = make_provider({"fees": [1.0, 0.0], "courses": [0.0, 1.0]})
        kb = KnowledgeBase.from_pairs([("fees", "Fee info"), ("courses", "Course info")])

        count = await kb.ensure_embedded(provider)

        assert count == 2
        assert kb.is_embedded
        assert kb.dimension == 2
        assert provider.calls == ["fees", "courses"]
        assert [e.embedding for e in kb.entries()] == [(1.0, 0.0), (0.0, 1.0)]

    async def test_ensure_embedded_is_idempotent(self, make_provider):
        """Test that already embedded entries are skipped."""
        provider = make_provider({"fees": [1.0, 0.0], "courses": [0.0, 1.0]})
        kb = KnowledgeBase.from_pairs([("fees", "Fee info")])

        await kb.ensure_embedded(provider)
        kb.add_entry("courses", "Course info")
        count = await kb.ensure_embedded(provider)
        again = await kb.ensure_embedded(provider)

        assert count == 1
        assert again == 0
        assert provider.calls == ["fees", "courses"]

    async def test_failure_aborts_and_leaves_rest_absent(self, make_provider):
        """Test fail-the-batch policy: no entry is left half-initialized."""
        provider = make_provider(
            {"a": [1.0, 0.0], "b": [0.0, 1.0], "c": [1.0, 1.0]},
            failing={"b"},
        )
        kb = KnowledgeBase.from_pairs([("a", "1"), ("b", "2"), ("c", "3")])

        with pytest.raises(ProviderError):
            await kb.ensure_embedded(provider)

        embeddings = [e.embedding for e in kb.entries()]
        assert embeddings == [(1.0, 0.0), None, None]
        assert provider.calls == ["a", "b"]
        assert not kb.is_embedded

    async def test_retry_after_failure_embeds_only_missing(self, make_provider):
        """Test that a later call resumes where the failed one stopped."""
        provider = make_provider({"a": [1.0, 0.0], "b": [0.0, 1.0]}, failing={"b"})
        kb = KnowledgeBase.from_pairs([("a", "1"), ("b", "2")])

        with pytest.raises(ProviderError):
            await kb.ensure_embedded(provider)

        provider.failing.clear()
        count = await kb.ensure_embedded(provider)

        assert count == 1
        assert kb.is_embedded
        assert provider.calls == ["a", "b", "b"]

    async def test_dimension_mismatch_fails(self, make_provider):
        """Test that vectors of inconsistent dimension are rejected."""
        provider = make_provider({"a": [1.0, 0.0], "b": [0.0, 1.0, 0.0]})
        kb = KnowledgeBase.from_pairs([("a", "1"), ("b", "2")])

        with pytest.raises(InvalidInputError, match="dimension 3, expected 2"):
            await kb.ensure_embedded(provider)

        assert [e.embedding for e in kb.entries()] == [(1.0, 0.0), None]

    async def test_concurrent_calls_embed_once(self):
        """Test that concurrent ensure_embedded calls do not double-embed."""

        class SlowProvider(EmbeddingProvider):
            def __init__(self):
                super().__init__(ProviderConfig(provider_type="slow", model_name="slow"))
                self.calls = []

            async def embed_text(self, text):
                self.calls.append(text)
                await asyncio.sleep(0.01)
                return [1.0, float(len(text))]

        provider = SlowProvider()
        kb = KnowledgeBase.from_pairs([("a", "1"), ("bb", "2"), ("ccc", "3")])

        results = await asyncio.gather(
            kb.ensure_embedded(provider),
            kb.ensure_embedded(provider),
        )

        assert sorted(results) == [0, 3]
        assert provider.calls == ["a", "bb", "ccc"]
        assert kb.is_embedded


class TestLoadEntries:
    """Test reading knowledge files."""

    def test_load_toml(self, tmp_path):
        """Test reading [[entries]] tables."""
        path = tmp_path / "kb.toml"
        path.write_text(
            '[[entries]]\nquestion = "fees"\nanswer = "Fee info"\n\n'
            '[[entries]]\nquestion = "courses"\nanswer = "Course info"\n'
        )

        items = load_entries(path)

        assert items == [
            {"question": "fees", "answer": "Fee info"},
            {"question": "courses", "answer": "Course info"},
        ]

    def test_load_json_list(self, tmp_path):
        """Test reading a JSON list."""
        path = tmp_path / "kb.json"
        path.write_text(json.dumps([{"question": "fees", "answer": "Fee info", "tags": ["x"]}]))

        assert load_entries(path) == [{"question": "fees", "answer": "Fee info"}]

    def test_load_json_object(self, tmp_path):
        """Test reading a JSON object with an entries list."""
        path = tmp_path / "kb.json"
        path.write_text(json.dumps({"entries": [{"question": "q", "answer": "a"}]}))

        assert load_entries(path) == [{"question": "q", "answer": "a"}]

    def test_missing_keys_fail(self, tmp_path):
        """Test that entries without an answer are rejected."""
        path = tmp_path / "kb.json"
        path.write_text(json.dumps([{"question": "q"}]))

        with pytest.raises(ValueError, match="Entry 0"):
            load_entries(path)

    def test_unsupported_format_fails(self, tmp_path):
        """Test that unknown file types are rejected."""
        path = tmp_path / "kb.yaml"
        path.write_text("entries: []")

        with pytest.raises(ValueError, match="Unsupported knowledge file format"):
            load_entries(path)

    def test_missing_file_fails(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_entries(tmp_path / "missing.toml")
