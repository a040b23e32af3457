"""
Search schemas.

Pydantic models for index records, backend hits, hybrid queries and ranked
results. Used for type-safe vector and keyword store interactions.

Dependencies: pydantic
System role: Type definitions for retrieval operations
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SearchFilters(BaseModel):
    """
    Metadata filters shared by vector and keyword retrieval.

    Index metadata stores created_at as an ISO-8601 string, so the date range
    is evaluated against the parsed string value.
    """

    jurisdictions: list[str] | None = Field(default=None, description="Allowed jurisdictions")
    start_date: datetime | None = Field(default=None, description="Inclusive lower bound on created_at")
    end_date: datetime | None = Field(default=None, description="Inclusive upper bound on created_at")

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def accepts(self, metadata: dict[str, str]) -> bool:
        """
        Check whether an index record's metadata satisfies the filters.

        Args:
            metadata: Flat string-keyed record metadata

        Returns:
            bool: True when every active filter matches
        """
        if self.jurisdictions and metadata.get("jurisdiction") not in self.jurisdictions:
            return False

        if self.has_date_range:
            raw = metadata.get("created_at")
            if not raw:
                return False
            try:
                created_at = _as_utc(datetime.fromisoformat(raw))
            except ValueError:
                return False
            if self.start_date is not None and created_at < _as_utc(self.start_date):
                return False
            if self.end_date is not None and created_at > _as_utc(self.end_date):
                return False

        return True


class VectorRecord(BaseModel):
    """Embedding plus denormalized metadata pushed to the vector index."""

    chunk_id: uuid.UUID = Field(description="Chunk identifier (used as point ID)")
    vector: list[float] = Field(description="Chunk embedding")
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="document_id, jurisdiction, page, created_at",
    )


class KeywordRecord(BaseModel):
    """Chunk text plus metadata pushed to the keyword index."""

    chunk_id: uuid.UUID = Field(description="Chunk identifier")
    text: str = Field(description="Chunk body text")
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="document_id, document_title, jurisdiction, page, created_at",
    )


class VectorHit(BaseModel):
    """Single result from vector similarity search."""

    chunk_id: str = Field(description="Point identifier as stored by the backend")
    score: float = Field(description="Backend similarity score, higher is better")
    metadata: dict[str, str] = Field(default_factory=dict)


class KeywordHit(BaseModel):
    """Single result from keyword search."""

    chunk_id: str = Field(description="Record identifier as stored by the backend")
    score: float = Field(description="Backend relevance score, higher is better")
    snippet: str = Field(description="Highlighted fragment, or the original text")
    metadata: dict[str, str] = Field(default_factory=dict)


class SearchQuery(BaseModel):
    """Hybrid search request."""

    query: str = Field(description="Free-text query")
    use_semantic_search: bool = Field(default=True)
    use_keyword_search: bool = Field(default=True)
    semantic_weight: float = Field(default=0.7, ge=0.0)
    keyword_weight: float = Field(default=0.3, ge=0.0)
    top_k: int | None = Field(default=None, ge=1, le=1000, description="Results to return")
    jurisdiction_filters: list[str] | None = Field(default=None)
    start_date: datetime | None = Field(default=None)
    end_date: datetime | None = Field(default=None)

    @property
    def filters(self) -> SearchFilters:
        return SearchFilters(
            jurisdictions=self.jurisdiction_filters,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class RankedHit(BaseModel):
    """Fused, boosted search result for display."""

    chunk_id: uuid.UUID
    document_id: uuid.UUID
    document_title: str
    jurisdiction: str
    content_url: str
    page: int
    text: str
    snippet: str | None = Field(default=None, description="Keyword highlight when available")
    score: float
