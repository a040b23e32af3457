"""
Domain models.

Exports:
  - Chunk, chunk_id_for: Retrieval unit and its deterministic ID
  - PipelineResult, ReindexResult: Indexing service results
  - SearchQuery, SearchFilters, RankedHit: Hybrid search contracts
  - VectorRecord, VectorHit, KeywordRecord, KeywordHit: Index adapter payloads
"""

from lawsearch.models.chunk import Chunk, chunk_id_for
from lawsearch.models.pipeline import PipelineResult, ReindexResult
from lawsearch.models.search import (
    KeywordHit,
    KeywordRecord,
    RankedHit,
    SearchFilters,
    SearchQuery,
    VectorHit,
    VectorRecord,
)

__all__ = [
    "Chunk",
    "chunk_id_for",
    "PipelineResult",
    "ReindexResult",
    "KeywordHit",
    "KeywordRecord",
    "RankedHit",
    "SearchFilters",
    "SearchQuery",
    "VectorHit",
    "VectorRecord",
]
