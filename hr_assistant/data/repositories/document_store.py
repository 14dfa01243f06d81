"""
Storage interface consumed by the pipeline.

``DocumentStore`` is the only shared mutable resource the pipeline touches.
Every write is keyed by document id and replaces exactly one facet
(content, analysis, embedding or status), so readers never observe a
half-written facet. Stores never delete documents.

``InMemoryDocumentStore`` implements the same contract without a database
and backs the test suite and the CLI's ``--memory`` mode.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from hr_assistant.core.errors import NotFound
from hr_assistant.data.models import (
    AnalysisResult,
    Document,
    EmbeddingRecord,
    QueryLogEntry,
    SearchFilters,
    matches_filters,
    utc_now,
)
from hr_assistant.utils.constants import DocumentStatus
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentStore(ABC):
    """Abstract async store for documents and query logs."""

    @abstractmethod
    async def create(self, document: Document) -> Document:
        """Persist a new document record."""

    @abstractmethod
    async def get(self, document_id: str) -> Optional[Document]:
        """Return the document or None when the id is unknown."""

    @abstractmethod
    async def list_documents(
        self,
        owner_id: Optional[str] = None,
        limit: int = 500,
    ) -> list[Document]:
        """Documents in the owner scope, newest upload first."""

    @abstractmethod
    async def find_search_candidates(
        self,
        filters: SearchFilters,
        owner_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 500,
    ) -> list[Document]:
        """
        One page of documents satisfying ``filters`` in the owner scope.

        Filtering happens before paging, newest upload first, so walking the
        pages visits every matching document exactly once.
        """

    @abstractmethod
    async def save_content(
        self,
        document_id: str,
        content: str,
        content_hash: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Replace the normalized content and its hash."""

    @abstractmethod
    async def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        error_reason: Optional[str] = None,
    ) -> None:
        """Move the document to a new lifecycle status."""

    @abstractmethod
    async def save_analysis(self, document_id: str, analysis: AnalysisResult) -> None:
        """Replace the analysis facet as one unit."""

    @abstractmethod
    async def save_embedding(self, document_id: str, record: EmbeddingRecord) -> bool:
        """
        Replace the embedding facet as one unit and clear any recorded failure.

        Returns False (and writes nothing) when the stored record has a later
        ``computed_at`` than the new one.
        """

    @abstractmethod
    async def record_embedding_failure(self, document_id: str, reason: str) -> None:
        """Record a failed embedding attempt without touching the stored record."""

    @abstractmethod
    async def find_embedding_candidates(
        self,
        model_id: str,
        version: str,
        owner_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[Document]:
        """
        Documents whose embedding is missing or stale.

        Never-attempted documents come first, then the least recently
        attempted, so repeated calls move past documents that keep failing.
        Documents in ``error`` status are excluded.
        """

    @abstractmethod
    async def log_query(self, entry: QueryLogEntry) -> None:
        """Persist a search/answer log entry."""


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store; hands out copies so callers cannot mutate stored state."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self.query_logs: list[QueryLogEntry] = []
        # Number of facet writes per document, useful for idempotence checks
        self.write_counts: dict[str, int] = {}

    def _require(self, document_id: str) -> Document:
        document = self._documents.get(document_id)
        if document is None:
            raise NotFound(document_id)
        return document

    def _apply(self, document_id: str, **fields: Any) -> None:
        document = self._require(document_id)
        fields["updated_at"] = utc_now()
        self._documents[document_id] = document.model_copy(update=fields)
        self.write_counts[document_id] = self.write_counts.get(document_id, 0) + 1

    async def create(self, document: Document) -> Document:
        self._documents[document.id] = document.model_copy(deep=True)
        return document

    async def get(self, document_id: str) -> Optional[Document]:
        document = self._documents.get(document_id)
        return document.model_copy(deep=True) if document else None

    async def list_documents(
        self,
        owner_id: Optional[str] = None,
        limit: int = 500,
    ) -> list[Document]:
        documents = [
            doc
            for doc in self._documents.values()
            if owner_id is None or doc.owner_id == owner_id
        ]
        documents.sort(key=lambda d: (d.uploaded_at, d.id), reverse=True)
        return [doc.model_copy(deep=True) for doc in documents[:limit]]

    async def find_search_candidates(
        self,
        filters: SearchFilters,
        owner_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 500,
    ) -> list[Document]:
        documents = [
            doc
            for doc in self._documents.values()
            if (owner_id is None or doc.owner_id == owner_id) and matches_filters(doc, filters)
        ]
        documents.sort(key=lambda d: (d.uploaded_at, d.id), reverse=True)
        return [doc.model_copy(deep=True) for doc in documents[skip : skip + limit]]

    async def save_content(
        self,
        document_id: str,
        content: str,
        content_hash: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        current = self._require(document_id)
        merged = {**current.metadata, **(metadata or {})}
        self._apply(
            document_id,
            content=content,
            content_hash=content_hash,
            content_updated_at=utc_now(),
            metadata=merged,
        )

    async def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        error_reason: Optional[str] = None,
    ) -> None:
        self._apply(document_id, status=DocumentStatus(status).value, error_reason=error_reason)

    async def save_analysis(self, document_id: str, analysis: AnalysisResult) -> None:
        self._apply(document_id, analysis=analysis.model_copy(deep=True))

    async def save_embedding(self, document_id: str, record: EmbeddingRecord) -> bool:
        current = self._require(document_id)
        if current.embedding and current.embedding.computed_at > record.computed_at:
            return False
        self._apply(
            document_id,
            embedding=record.model_copy(deep=True),
            embedding_error=None,
            embedding_attempted_at=record.computed_at,
        )
        return True

    async def record_embedding_failure(self, document_id: str, reason: str) -> None:
        self._apply(document_id, embedding_error=reason, embedding_attempted_at=utc_now())

    async def find_embedding_candidates(
        self,
        model_id: str,
        version: str,
        owner_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[Document]:
        candidates = [
            doc
            for doc in self._documents.values()
            if (owner_id is None or doc.owner_id == owner_id)
            and doc.status != DocumentStatus.ERROR
            and doc.needs_embedding(model_id, version)
        ]
        candidates.sort(
            key=lambda d: (
                d.embedding_attempted_at is not None,
                d.embedding_attempted_at or d.uploaded_at,
                d.uploaded_at,
                d.id,
            )
        )
        return [doc.model_copy(deep=True) for doc in candidates[:limit]]

    async def log_query(self, entry: QueryLogEntry) -> None:
        self.query_logs.append(entry)
