"""
Retrieval, answering and query-log models.

``RetrievalResult`` and ``ConversationContext`` are computed per call and
never stored; ``QueryLogEntry`` is the only persisted record here.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from hr_assistant.utils.constants import QueryKind

from .base import BaseDocument, EmbeddedModel, utc_now
from .document import Document


class SearchFilters(EmbeddedModel):
    """
    Structured constraints over document metadata.

    Every populated constraint must hold for a document to be eligible.
    List-valued membership filters (statuses, types, levels) are one-of;
    ``skills`` and ``keywords`` require all listed values.
    """

    skills: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    experience_levels: list[str] = Field(default_factory=list)
    document_types: list[str] = Field(default_factory=list)
    statuses: list[str] = Field(default_factory=list)
    mime_types: list[str] = Field(default_factory=list)
    uploaded_after: Optional[datetime] = None
    uploaded_before: Optional[datetime] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("uploaded_after", "uploaded_before")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Stored timestamps are naive UTC; aware bounds are converted to match."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def validate_date_range(self) -> "SearchFilters":
        if self.uploaded_after and self.uploaded_before and self.uploaded_after > self.uploaded_before:
            raise ValueError("uploaded_after must not be later than uploaded_before")
        return self

    @property
    def is_empty(self) -> bool:
        return not any(
            (
                self.skills,
                self.keywords,
                self.experience_levels,
                self.document_types,
                self.statuses,
                self.mime_types,
                self.uploaded_after,
                self.uploaded_before,
                self.metadata,
            )
        )


def _lower_set(values: list[str]) -> set[str]:
    return {v.strip().lower() for v in values if v and v.strip()}


def matches_filters(document: Document, filters: SearchFilters) -> bool:
    """True when the document satisfies every populated filter."""
    if filters.is_empty:
        return True

    analysis = document.analysis

    if filters.statuses and document.status not in _lower_set(filters.statuses):
        return False
    if filters.mime_types and document.mime_type.lower() not in _lower_set(filters.mime_types):
        return False
    if filters.uploaded_after and document.uploaded_at < filters.uploaded_after:
        return False
    if filters.uploaded_before and document.uploaded_at > filters.uploaded_before:
        return False

    for key, expected in filters.metadata.items():
        if document.metadata.get(key) != expected:
            return False

    needs_analysis = (
        filters.skills
        or filters.keywords
        or filters.experience_levels
        or filters.document_types
    )
    if needs_analysis and analysis is None:
        return False

    if filters.skills and not _lower_set(filters.skills) <= _lower_set(analysis.skills):
        return False
    if filters.keywords and not _lower_set(filters.keywords) <= _lower_set(analysis.keywords):
        return False
    if filters.experience_levels and analysis.experience_level not in _lower_set(filters.experience_levels):
        return False
    if filters.document_types and analysis.document_type not in _lower_set(filters.document_types):
        return False

    return True


class RetrievalQuery(EmbeddedModel):
    """Free-text query with optional filters and owner scope."""

    text: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    owner_id: Optional[str] = None
    top_k: Optional[int] = Field(default=None, ge=1)


class MatchSignals(EmbeddedModel):
    """Per-signal breakdown behind a hit's score."""

    lexical: float = 0.0
    semantic: Optional[float] = None
    matched_terms: list[str] = Field(default_factory=list)
    used_semantic: bool = False


class RetrievalHit(EmbeddedModel):
    """One ranked document in a retrieval result."""

    document_id: str
    title: str
    filename: str
    score: float
    signals: MatchSignals
    preview: str = ""
    highlights: list[str] = Field(default_factory=list)
    uploaded_at: datetime
    updated_at: datetime


class RetrievalResult(EmbeddedModel):
    """Ordered hits for one query, recomputed on every call."""

    query: str
    hits: list[RetrievalHit] = Field(default_factory=list)
    total_candidates: int = 0
    semantic_enabled: bool = False

    @property
    def document_ids(self) -> list[str]:
        return [hit.document_id for hit in self.hits]


class ContextSnippet(BaseModel):
    """Bounded excerpt from one supporting document."""

    document_id: str
    title: str
    text: str
    score: float


class ConversationContext(BaseModel):
    """Snippets assembled for one answer call."""

    query: str
    snippets: list[ContextSnippet] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.snippets


class GeneratedAnswer(EmbeddedModel):
    """Answer produced from a query and its assembled context."""

    query: str
    answer: str
    # False when no supporting context was found
    grounded: bool
    sources: list[str] = Field(default_factory=list)
    model: str
    generated_at: datetime = Field(default_factory=utc_now)


class QueryLogEntry(BaseDocument):
    """Persisted record of a search or answer request."""

    kind: QueryKind
    owner_id: Optional[str] = None
    query: str
    filters: dict[str, Any] = Field(default_factory=dict)
    result_count: int = 0
    document_ids: list[str] = Field(default_factory=list)
    response_text: Optional[str] = None
    duration_ms: Optional[int] = None

    class Settings:
        """MongoDB collection settings."""

        name = "query_logs"
        indexes = [
            "owner_id",
            "kind",
            "created_at",
        ]
