"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from lawsearch.boundary.db.CRUD import document_crud, chunk_crud

    document = await document_crud.get_by_id(db, document_id)
"""

from lawsearch.boundary.db.CRUD.base_crud import BaseCRUD
from lawsearch.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from lawsearch.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from lawsearch.boundary.db.CRUD.search_weight_crud import SearchWeightCRUD, search_weight_crud

__all__ = [
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
    "DocumentCRUD",
    "document_crud",
    "SearchWeightCRUD",
    "search_weight_crud",
]
