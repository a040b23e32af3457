"""
Collaborator contracts consumed by the core.

The indexing service and the hybrid ranker depend only on these protocols;
one concrete adapter per backend lives under lawsearch.boundary.

Dependencies: lawsearch.models
System role: Ports between core logic and external backends
"""

from typing import Protocol, runtime_checkable
import uuid

from lawsearch.models.search import (
    KeywordHit,
    KeywordRecord,
    SearchFilters,
    VectorHit,
    VectorRecord,
)


@runtime_checkable
class TextExtractor(Protocol):
    """Turns raw document bytes into per-page text."""

    async def extract_pages(self, content: bytes) -> list[str]:
        """
        Extract text page by page.

        Returns one entry per physical page in page order; pages without text
        yield empty strings rather than being omitted.
        """
        ...


@runtime_checkable
class EmbeddingService(Protocol):
    """Produces fixed-dimension vectors with positional correspondence."""

    @property
    def model_name(self) -> str: ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]: ...

    async def embed_one(self, text: str) -> list[float]: ...

    async def set_model(self, model_name: str) -> None: ...


@runtime_checkable
class VectorIndex(Protocol):
    """Nearest-neighbour backend keyed by chunk ID."""

    async def ensure_collection(self) -> None: ...

    async def upsert(self, records: list[VectorRecord]) -> None: ...

    async def query(
        self,
        vector: list[float],
        filters: SearchFilters | None,
        top_k: int,
    ) -> list[VectorHit]: ...

    async def query_excluding_document(
        self,
        vector: list[float],
        document_id: uuid.UUID,
        limit: int,
    ) -> list[VectorHit]: ...

    async def delete_by_document(self, document_id: uuid.UUID) -> None: ...

    async def health_check(self) -> bool: ...


@runtime_checkable
class KeywordIndex(Protocol):
    """Lexical backend keyed by chunk ID, with highlighting."""

    async def ensure_index(self) -> None: ...

    async def index_batch(self, records: list[KeywordRecord]) -> None: ...

    async def search(
        self,
        query: str,
        filters: SearchFilters | None,
        top_k: int,
    ) -> list[KeywordHit]: ...

    async def delete_by_document(self, document_id: uuid.UUID) -> None: ...

    async def health_check(self) -> bool: ...


@runtime_checkable
class BlobStore(Protocol):
    """Raw document byte storage."""

    async def put(self, key: str, content: bytes, content_type: str) -> str:
        """Store bytes and return the content URL recorded on the document."""
        ...

    async def get(self, content_url: str) -> bytes: ...

    async def delete(self, content_url: str) -> None: ...

    async def exists(self, content_url: str) -> bool: ...

    async def health_check(self) -> bool: ...
