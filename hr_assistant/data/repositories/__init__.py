"""
Document stores and repositories.

``DocumentStore`` is the storage interface injected into pipeline
components; ``DocumentRepository`` implements it on MongoDB and
``InMemoryDocumentStore`` without a database.
"""

# Base repository
from .base import BaseRepository

# Stores
from .document_store import DocumentStore, InMemoryDocumentStore
from .document_repository import DocumentRepository
from .query_log_repository import QueryLogRepository

__all__ = [
    "BaseRepository",
    "DocumentStore",
    "InMemoryDocumentStore",
    "DocumentRepository",
    "QueryLogRepository",
]
