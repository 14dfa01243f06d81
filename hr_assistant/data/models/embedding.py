"""Results of embedding operations."""

from typing import Optional

from pydantic import BaseModel, Field

from .document import EmbeddingRecord


class EmbedOutcome(BaseModel):
    """Outcome of embedding a single document."""

    document_id: str
    # True when the stored record was current and nothing was written
    already_current: bool = False
    record: Optional[EmbeddingRecord] = None


class BackfillError(BaseModel):
    """A document the backfill could not embed, and why."""

    document_id: str
    reason: str


class BackfillReport(BaseModel):
    """Partial-success report of one backfill invocation."""

    updated_ids: list[str] = Field(default_factory=list)
    errors: list[BackfillError] = Field(default_factory=list)
    skipped_ids: list[str] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.updated_ids) + len(self.errors) + len(self.skipped_ids)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
