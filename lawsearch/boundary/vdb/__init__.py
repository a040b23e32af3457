"""
Vector index boundary.

Exports:
  - QdrantVectorIndex: Qdrant-backed VectorIndex
  - get_vector_index(): Factory reading VectorStoreSettings
"""

from lawsearch.boundary.vdb.qdrant_store import QdrantVectorIndex
from lawsearch.boundary.vdb.vector_store_factory import get_vector_index

__all__ = ["QdrantVectorIndex", "get_vector_index"]
