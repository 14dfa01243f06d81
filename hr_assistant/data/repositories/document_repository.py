"""
MongoDB-backed document store.

Each facet write is a single ``update_one`` with one ``$set``, which MongoDB
applies atomically per document.
"""

import re
from typing import Any, Optional

from hr_assistant.core.errors import NotFound
from hr_assistant.data.database import DatabaseManager
from hr_assistant.data.models import (
    AnalysisResult,
    Document,
    EmbeddingRecord,
    QueryLogEntry,
    SearchFilters,
    utc_now,
)
from hr_assistant.utils.config import get_settings
from hr_assistant.utils.constants import DocumentStatus
from hr_assistant.utils.logger import get_logger

from .base import BaseRepository
from .document_store import DocumentStore
from .query_log_repository import QueryLogRepository

logger = get_logger(__name__)


def _lowered(values: list[str]) -> list[str]:
    return [v.strip().lower() for v in values if v and v.strip()]


def _exact_ci(value: str) -> dict[str, Any]:
    """Case-insensitive whole-value match for array elements."""
    return {"$regex": f"^{re.escape(value.strip())}$", "$options": "i"}


def build_filter_query(filters: SearchFilters, owner_id: Optional[str] = None) -> dict[str, Any]:
    """Translate ``SearchFilters`` into a MongoDB query with the same semantics."""
    query: dict[str, Any] = {}
    clauses: list[dict[str, Any]] = []

    if owner_id:
        query["owner_id"] = owner_id
    if filters.statuses:
        query["status"] = {"$in": _lowered(filters.statuses)}
    if filters.mime_types:
        query["mime_type"] = {"$in": _lowered(filters.mime_types)}

    uploaded: dict[str, Any] = {}
    if filters.uploaded_after:
        uploaded["$gte"] = filters.uploaded_after
    if filters.uploaded_before:
        uploaded["$lte"] = filters.uploaded_before
    if uploaded:
        query["uploaded_at"] = uploaded

    for key, expected in filters.metadata.items():
        query[f"metadata.{key}"] = expected

    if filters.experience_levels:
        query["analysis.experience_level"] = {"$in": _lowered(filters.experience_levels)}
    if filters.document_types:
        query["analysis.document_type"] = {"$in": _lowered(filters.document_types)}

    # Every listed skill/keyword must be present
    for skill in filters.skills:
        if skill and skill.strip():
            clauses.append({"analysis.skills": _exact_ci(skill)})
    for keyword in filters.keywords:
        if keyword and keyword.strip():
            clauses.append({"analysis.keywords": _exact_ci(keyword)})
    if clauses:
        query["$and"] = clauses

    return query


class DocumentRepository(BaseRepository[Document], DocumentStore):
    """Document store on the ``hr_documents`` collection."""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        query_logs: Optional[QueryLogRepository] = None,
    ) -> None:
        super().__init__(db_manager)
        self._collection_name = get_settings().database.documents_collection
        self._query_logs = query_logs or QueryLogRepository(self._db_manager)

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def model_class(self) -> type[Document]:
        return Document

    async def _set_or_raise(self, document_id: str, fields: dict[str, Any]) -> None:
        result = await self.set_fields(document_id, fields)
        if result.matched_count == 0:
            raise NotFound(document_id)

    # -------------------------------------------------------------------------
    # DocumentStore
    # -------------------------------------------------------------------------

    async def create(self, document: Document) -> Document:
        return await self.insert(document)

    async def get(self, document_id: str) -> Optional[Document]:
        return await self.get_by_id(document_id)

    async def list_documents(
        self,
        owner_id: Optional[str] = None,
        limit: int = 500,
    ) -> list[Document]:
        query: dict[str, Any] = {}
        if owner_id:
            query["owner_id"] = owner_id
        return await self.find(query, limit=limit, sort=[("uploaded_at", -1), ("_id", -1)])

    async def find_search_candidates(
        self,
        filters: SearchFilters,
        owner_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 500,
    ) -> list[Document]:
        return await self.find(
            build_filter_query(filters, owner_id),
            skip=skip,
            limit=limit,
            sort=[("uploaded_at", -1), ("_id", -1)],
        )

    async def save_content(
        self,
        document_id: str,
        content: str,
        content_hash: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        fields: dict[str, Any] = {
            "content": content,
            "content_hash": content_hash,
            "content_updated_at": utc_now(),
        }
        for key, value in (metadata or {}).items():
            fields[f"metadata.{key}"] = value
        await self._set_or_raise(document_id, fields)

    async def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        error_reason: Optional[str] = None,
    ) -> None:
        await self._set_or_raise(
            document_id,
            {"status": DocumentStatus(status).value, "error_reason": error_reason},
        )

    async def save_analysis(self, document_id: str, analysis: AnalysisResult) -> None:
        await self._set_or_raise(document_id, {"analysis": analysis.model_dump()})

    async def save_embedding(self, document_id: str, record: EmbeddingRecord) -> bool:
        # Only replace a record that is not newer than this one
        monotonic_guard = {
            "$or": [
                {"embedding": None},
                {"embedding.computed_at": {"$lte": record.computed_at}},
            ]
        }
        result = await self.set_fields(
            document_id,
            {
                "embedding": record.model_dump(),
                "embedding_error": None,
                "embedding_attempted_at": record.computed_at,
            },
            extra_filter=monotonic_guard,
        )
        if result.matched_count == 0:
            if not await self.exists(document_id):
                raise NotFound(document_id)
            logger.warning(f"Skipped embedding write for {document_id}: stored record is newer")
            return False
        return True

    async def record_embedding_failure(self, document_id: str, reason: str) -> None:
        await self._set_or_raise(
            document_id,
            {"embedding_error": reason, "embedding_attempted_at": utc_now()},
        )

    async def find_embedding_candidates(
        self,
        model_id: str,
        version: str,
        owner_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[Document]:
        query: dict[str, Any] = {
            "status": {"$ne": DocumentStatus.ERROR.value},
            "$or": [
                {"embedding": None},
                {"embedding.version": {"$ne": version}},
                {"embedding.model_id": {"$ne": model_id}},
                {"$expr": {"$ne": ["$embedding.content_hash", "$content_hash"]}},
            ],
        }
        if owner_id:
            query["owner_id"] = owner_id

        # Nulls sort first, so never-attempted documents lead
        return await self.find(
            query,
            limit=limit,
            sort=[("embedding_attempted_at", 1), ("uploaded_at", 1), ("_id", 1)],
        )

    async def log_query(self, entry: QueryLogEntry) -> None:
        await self._query_logs.insert(entry)
