"""KnowledgeEntry entity - a canonical question and its answer."""

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class KnowledgeEntry(BaseModel):
    """A canonical question/answer pair.

    Entries are immutable. The knowledge base swaps in an embedded copy once
    the question's vector is available, so a reader holding an entry never
    sees it change underneath them.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    question: str = Field(..., description="Canonical question text that gets embedded")
    answer: str = Field(..., description="Answer returned when the question matches")
    embedding: tuple[float, ...] | None = Field(
        default=None, description="Vector of the question, absent until embedded"
    )

    @field_validator("question", "answer")
    @classmethod
    def text_not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"Knowledge entry {info.field_name} cannot be empty")
        return v

    @property
    def is_embedded(self) -> bool:
        return self.embedding is not None

    def with_embedding(self, vector: list[float]) -> "KnowledgeEntry":
        """Return a copy of this entry carrying the given vector."""
        return self.model_copy(update={"embedding": tuple(vector)})
