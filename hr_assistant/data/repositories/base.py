"""
Base repository class providing common async CRUD operations on MongoDB.

Collection-specific repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.results import InsertOneResult, UpdateResult

from hr_assistant.data.database import DatabaseManager, get_database_manager
from hr_assistant.data.models.base import BaseDocument, utc_now
from hr_assistant.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses must define the collection name and model class.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        """Initialize repository with database connection."""
        self._db_manager = db_manager or get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_collection(self) -> AsyncIOMotorCollection:
        """Get asynchronous collection instance."""
        return self._db_manager.get_async_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        """Convert list of MongoDB documents to Pydantic models."""
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        return model.model_dump_mongo()

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    async def insert(self, model: T) -> T:
        """Insert a new document."""
        collection = self._get_collection()
        now = utc_now()
        model.created_at = now
        model.updated_at = now

        result: InsertOneResult = await collection.insert_one(self._to_document(model))
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    async def get_by_id(self, id_value: str) -> Optional[T]:
        """Get a document by its ID."""
        collection = self._get_collection()
        document = await collection.find_one({"_id": id_value})
        return self._to_model(document)

    async def find(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort: Optional[list[tuple[str, int]]] = None,
    ) -> list[T]:
        """Find documents matching a query."""
        collection = self._get_collection()
        cursor = collection.find(query).sort(sort or [("created_at", -1)]).skip(skip).limit(limit)
        documents = await cursor.to_list(length=limit)
        return self._to_models(documents)

    async def set_fields(
        self,
        id_value: str,
        update_data: dict[str, Any],
        extra_filter: Optional[dict[str, Any]] = None,
    ) -> UpdateResult:
        """Apply a single ``$set`` to one document and stamp ``updated_at``."""
        collection = self._get_collection()
        update_data["updated_at"] = utc_now()
        query: dict[str, Any] = {"_id": id_value}
        if extra_filter:
            query.update(extra_filter)

        result: UpdateResult = await collection.update_one(query, {"$set": update_data})
        if result.modified_count > 0:
            logger.debug(f"Updated {self.collection_name} document: {id_value}")
        return result

    async def exists(self, id_value: str) -> bool:
        """Check whether a document with this ID exists."""
        collection = self._get_collection()
        return await collection.count_documents({"_id": id_value}, limit=1) > 0

    async def count(self, query: Optional[dict[str, Any]] = None) -> int:
        """Count documents matching a query."""
        collection = self._get_collection()
        return await collection.count_documents(query or {})
