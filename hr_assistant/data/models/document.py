"""
Document data models.

Defines the stored document record, its analysis facet and its embedding
facet. Each facet is a single embedded model so that it is always written
(and read back) as one unit.
"""

import hashlib
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hr_assistant.utils.constants import (
    DocumentStatus,
    DocumentType,
    ExperienceLevel,
    SentimentLabel,
)

from .base import BaseDocument, EmbeddedModel, utc_now


def compute_content_hash(text: str) -> str:
    """SHA-256 of normalized content, used for staleness checks."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class AnalysisOptions(BaseModel):
    """
    Flags selecting which sub-extractions run.

    Accepts both snake_case names and the camelCase names used by web
    clients (``extractKeywords``, ``generateSummary``, ...).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    extract_keywords: bool = True
    generate_summary: bool = True
    analyze_sentiment: bool = False
    extract_skills: bool = True
    extract_contact_info: bool = True

    @classmethod
    def all_enabled(cls) -> "AnalysisOptions":
        return cls(
            extract_keywords=True,
            generate_summary=True,
            analyze_sentiment=True,
            extract_skills=True,
            extract_contact_info=True,
        )


class ContactInfo(EmbeddedModel):
    """Contact details found in a document."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    # Additional identifiers (secondary emails/phones, profile links)
    other_identifiers: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(
            (
                self.full_name,
                self.email,
                self.phone,
                self.location,
                self.linkedin_url,
                self.github_url,
                self.portfolio_url,
                self.other_identifiers,
            )
        )


class SentimentResult(EmbeddedModel):
    """Sentiment label and score in [-1, 1]."""

    label: SentimentLabel
    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    source: str = "lexicon"  # "lexicon" or "model"


class AnalysisResult(EmbeddedModel):
    """
    Structured knowledge extracted from one document.

    Disabled or failed sub-extractions are left as None/empty; ``failures``
    records why a requested one produced nothing.
    """

    summary: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    experience_level: ExperienceLevel = ExperienceLevel.UNKNOWN
    years_of_experience: Optional[float] = None
    sentiment: Optional[SentimentResult] = None
    contact_info: Optional[ContactInfo] = None
    document_type: DocumentType = DocumentType.OTHER

    failures: dict[str, str] = Field(default_factory=dict)
    options: AnalysisOptions = Field(default_factory=AnalysisOptions)
    analyzed_at: datetime = Field(default_factory=utc_now)

    @field_validator("keywords", "skills")
    @classmethod
    def dedupe_case_insensitive(cls, v: list[str]) -> list[str]:
        """Drop blanks and case-insensitive duplicates, keeping first spelling."""
        seen: set[str] = set()
        result = []
        for item in v:
            item = item.strip()
            key = item.lower()
            if item and key not in seen:
                seen.add(key)
                result.append(item)
        return result


class EmbeddingRecord(EmbeddedModel):
    """
    Vector embedding of a document's content with its provenance.

    Stored as a single sub-document: either the whole record exists or none
    of it does.
    """

    vector: list[float]
    model_id: str
    version: str
    dimension: int
    content_hash: str
    computed_at: datetime = Field(default_factory=utc_now)

    def is_stale(self, model_id: str, version: str, content_hash: str) -> bool:
        """True when model, version or content no longer match."""
        return (
            self.version != version
            or self.model_id != model_id
            or self.content_hash != content_hash
        )


class Document(BaseDocument):
    """
    Uploaded document with its derived facets.

    Created on upload, mutated by analysis and embedding, never deleted by
    the pipeline.
    """

    owner_id: str
    filename: str
    title: str = ""
    mime_type: str
    file_size_bytes: int = 0

    # Normalized extracted text
    content: str = ""
    content_hash: Optional[str] = None
    content_updated_at: Optional[datetime] = None

    status: DocumentStatus = DocumentStatus.PENDING
    error_reason: Optional[str] = None

    # Analysis facet
    analysis: Optional[AnalysisResult] = None

    # Embedding facet
    embedding: Optional[EmbeddingRecord] = None
    embedding_error: Optional[str] = None
    embedding_attempted_at: Optional[datetime] = None

    uploaded_at: datetime = Field(default_factory=utc_now)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def has_content(self) -> bool:
        return bool(self.content and self.content.strip())

    @property
    def is_embedded(self) -> bool:
        return self.embedding is not None

    def needs_embedding(self, model_id: str, version: str) -> bool:
        """True when the embedding is missing or stale for the given model/version."""
        if self.embedding is None:
            return True
        current_hash = self.content_hash or compute_content_hash(self.content)
        return self.embedding.is_stale(model_id, version, current_hash)

    def preview(self, length: int = 500) -> str:
        """Leading slice of the content for display."""
        return self.content[:length]

    class Settings:
        """MongoDB collection settings."""

        name = "hr_documents"
        indexes = [
            "owner_id",
            "status",
            "content_hash",
            "uploaded_at",
            "embedding.version",
            "embedding_attempted_at",
        ]
