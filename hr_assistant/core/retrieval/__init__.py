"""
Document retrieval.

Hybrid lexical/semantic ranking over stored documents with structured
filters.
"""

from hr_assistant.data.models import matches_filters

from .retrieval_engine import RetrievalEngine, ScoredDocument

__all__ = [
    "RetrievalEngine",
    "ScoredDocument",
    "matches_filters",
]
