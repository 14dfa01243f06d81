"""
Data layer for the HR assistant.

Provides database connections, data models, and the document stores used
by the pipeline.

Submodules:
- database: MongoDB connection management
- models: Pydantic data models/schemas
- repositories: Document stores and query logs
"""

from .database import (
    DatabaseManager,
    get_async_db,
    get_database_manager,
)

__all__ = [
    "DatabaseManager",
    "get_async_db",
    "get_database_manager",
]
