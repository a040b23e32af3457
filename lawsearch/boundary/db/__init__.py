"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), create_tables()
  - DocumentModel, ChunkModel, SearchWeightModel: Domain entities
  - document_crud, chunk_crud, search_weight_crud: CRUD operation singletons

Dependencies: sqlalchemy, lawsearch.configs
System role: Database adapter for documents, chunks and ranking metadata
"""

from lawsearch.boundary.db.base import Base, TimestampMixin, UUIDMixin
from lawsearch.boundary.db.connection import (
    create_tables,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from lawsearch.boundary.db.models import ChunkModel, DocumentModel, SearchWeightModel
from lawsearch.boundary.db.CRUD import (
    BaseCRUD,
    ChunkCRUD,
    DocumentCRUD,
    SearchWeightCRUD,
    chunk_crud,
    document_crud,
    search_weight_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "ChunkModel",
    "DocumentModel",
    "SearchWeightModel",
    # CRUD classes
    "BaseCRUD",
    "ChunkCRUD",
    "DocumentCRUD",
    "SearchWeightCRUD",
    # CRUD singletons
    "chunk_crud",
    "document_crud",
    "search_weight_crud",
]
