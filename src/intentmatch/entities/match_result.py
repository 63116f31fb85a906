"""MatchResult entity - the outcome of one query."""

from pydantic import BaseModel, Field, model_validator

from intentmatch.entities.knowledge_entry import KnowledgeEntry

# Score reported when there was nothing to compare against
NO_SCORE = float("-inf")


class MatchResult(BaseModel):
    """Best knowledge entry for a query, its score, and the threshold decision.

    ``best_entry`` is only set when ``matched`` is true; callers substitute a
    fallback message otherwise.
    """

    query: str
    best_entry: KnowledgeEntry | None = None
    score: float = Field(default=NO_SCORE, le=1.0)
    matched: bool = False

    @model_validator(mode="after")
    def entry_only_when_matched(self) -> "MatchResult":
        if self.matched != (self.best_entry is not None):
            raise ValueError("best_entry must be set if and only if matched is true")
        return self

    @property
    def answer(self) -> str | None:
        return self.best_entry.answer if self.best_entry else None
