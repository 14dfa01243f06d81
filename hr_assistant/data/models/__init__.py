"""
Pydantic data models for the HR assistant.

This module provides all data models used throughout the application,
including stored documents, embedded facets and per-call result types.
"""

# Base models
from .base import BaseDocument, EmbeddedModel, TimestampMixin, new_object_id, utc_now

# Document models
from .document import (
    AnalysisOptions,
    AnalysisResult,
    ContactInfo,
    Document,
    EmbeddingRecord,
    SentimentResult,
    compute_content_hash,
)

# Embedding results
from .embedding import BackfillError, BackfillReport, EmbedOutcome

# Retrieval and answering models
from .query import (
    ContextSnippet,
    ConversationContext,
    GeneratedAnswer,
    MatchSignals,
    QueryLogEntry,
    RetrievalHit,
    RetrievalQuery,
    RetrievalResult,
    SearchFilters,
    matches_filters,
)

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "TimestampMixin",
    "new_object_id",
    "utc_now",
    # Document
    "AnalysisOptions",
    "AnalysisResult",
    "ContactInfo",
    "Document",
    "EmbeddingRecord",
    "SentimentResult",
    "compute_content_hash",
    # Embedding
    "BackfillError",
    "BackfillReport",
    "EmbedOutcome",
    # Query
    "ContextSnippet",
    "ConversationContext",
    "GeneratedAnswer",
    "MatchSignals",
    "QueryLogEntry",
    "RetrievalHit",
    "RetrievalQuery",
    "RetrievalResult",
    "SearchFilters",
    "matches_filters",
]
