"""
Repository for search and answer query logs.
"""

from typing import Optional

from hr_assistant.data.models import QueryLogEntry
from hr_assistant.utils.config import get_settings
from hr_assistant.utils.constants import QueryKind

from .base import BaseRepository


class QueryLogRepository(BaseRepository[QueryLogEntry]):
    """Append-only log of queries on the ``query_logs`` collection."""

    @property
    def collection_name(self) -> str:
        return get_settings().database.query_log_collection

    @property
    def model_class(self) -> type[QueryLogEntry]:
        return QueryLogEntry

    async def recent(
        self,
        owner_id: Optional[str] = None,
        kind: Optional[QueryKind] = None,
        limit: int = 20,
    ) -> list[QueryLogEntry]:
        """Most recent log entries, optionally scoped."""
        query = {}
        if owner_id:
            query["owner_id"] = owner_id
        if kind:
            query["kind"] = QueryKind(kind).value
        return await self.find(query, limit=limit)
