"""
Database models package.

Exports:
  - DocumentModel: Versioned document ORM model
  - ChunkModel: Chunk ORM model
  - SearchWeightModel: Per-document ranking metadata

Dependencies: sqlalchemy, lawsearch.boundary.db.base
System role: Database model definitions for domain entities
"""

from lawsearch.boundary.db.models.chunk_model import ChunkModel
from lawsearch.boundary.db.models.document_model import DocumentModel
from lawsearch.boundary.db.models.search_weight_model import SearchWeightModel

__all__ = [
    "ChunkModel",
    "DocumentModel",
    "SearchWeightModel",
]
