"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database, in-process collaborator fakes, document factories
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from lawsearch.models.search import (
    KeywordHit,
    KeywordRecord,
    SearchFilters,
    VectorHit,
    VectorRecord,
)


class FakeBlobStore:
    """BlobStore keeping objects in a dict."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    async def put(self, key: str, content: bytes, content_type: str = "application/pdf") -> str:
        url = f"s3://test-bucket/{key}"
        self.objects[url] = content
        return url

    async def get(self, content_url: str) -> bytes:
        return self.objects[content_url]

    async def delete(self, content_url: str) -> None:
        self.objects.pop(content_url, None)

    async def exists(self, content_url: str) -> bool:
        return content_url in self.objects

    async def health_check(self) -> bool:
        return True


class FakeTextExtractor:
    """TextExtractor decoding bytes as UTF-8 pages separated by form feeds."""

    async def extract_pages(self, content: bytes) -> list[str]:
        return content.decode("utf-8").split("\f")


class FakeEmbeddingService:
    """EmbeddingService returning small deterministic vectors."""

    def __init__(self, model_name: str = "fake-model") -> None:
        self._model_name = model_name
        self.batches: list[list[str]] = []

    @property
    def model_name(self) -> str:
        return self._model_name

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        return [self._vector(text) for text in texts]

    async def embed_one(self, text: str) -> list[float]:
        return self._vector(text)

    async def set_model(self, model_name: str) -> None:
        self._model_name = model_name

    @staticmethod
    def _vector(text: str) -> list[float]:
        return [float(len(text)), float(sum(map(ord, text)) % 97), 1.0]


class FakeVectorIndex:
    """VectorIndex storing records in a dict; query returns them in insertion order."""

    def __init__(self) -> None:
        self.records: dict[str, VectorRecord] = {}
        self.scores: dict[str, float] = {}

    async def ensure_collection(self) -> None:
        return None

    async def upsert(self, records: list[VectorRecord]) -> None:
        for record in records:
            self.records[str(record.chunk_id)] = record

    async def query(self, vector: list[float], filters: SearchFilters | None, top_k: int) -> list[VectorHit]:
        hits = [
            VectorHit(chunk_id=key, score=self.scores.get(key, 0.5), metadata=record.metadata)
            for key, record in self.records.items()
            if filters is None or filters.accepts(record.metadata)
        ]
        return hits[:top_k]

    async def query_excluding_document(
        self, vector: list[float], document_id: uuid.UUID, limit: int
    ) -> list[VectorHit]:
        hits = await self.query(vector, None, limit * 2)
        return [hit for hit in hits if hit.metadata.get("document_id") != str(document_id)][:limit]

    async def delete_by_document(self, document_id: uuid.UUID) -> None:
        target = str(document_id)
        for key in [k for k, r in self.records.items() if r.metadata.get("document_id") == target]:
            del self.records[key]

    async def health_check(self) -> bool:
        return True


class FakeKeywordIndex:
    """KeywordIndex storing records in a dict; search matches by substring."""

    def __init__(self) -> None:
        self.records: dict[str, KeywordRecord] = {}

    async def ensure_index(self) -> None:
        return None

    async def index_batch(self, records: list[KeywordRecord]) -> None:
        for record in records:
            self.records[str(record.chunk_id)] = record

    async def search(self, query: str, filters: SearchFilters | None, top_k: int) -> list[KeywordHit]:
        hits = [
            KeywordHit(chunk_id=key, score=1.0, snippet=record.text, metadata=record.metadata)
            for key, record in self.records.items()
            if query.lower() in record.text.lower() and (filters is None or filters.accepts(record.metadata))
        ]
        return hits[:top_k]

    async def delete_by_document(self, document_id: uuid.UUID) -> None:
        target = str(document_id)
        for key in [k for k, r in self.records.items() if r.metadata.get("document_id") == target]:
            del self.records[key]

    async def health_check(self) -> bool:
        return True


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of the test (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from lawsearch.boundary.db.base import Base
    from lawsearch.boundary.db import models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Session factory bound to the in-memory engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_async_db(test_session_factory):
    """
    Create in-memory SQLite async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def create_document(test_async_db):
    """
    Factory inserting committed documents.

    Returns:
        Callable: async (title=..., jurisdiction=..., **fields) -> DocumentModel
    """
    from lawsearch.boundary.db.CRUD.document_crud import document_crud

    async def _create(
        title: str = "Lien Priority Act",
        jurisdiction: str = "CA",
        content_url: str = "s3://test-bucket/doc.pdf",
        version: str = "1.0",
        created_by: str = "tester",
        **fields,
    ):
        document = await document_crud.create(
            test_async_db,
            title=title,
            jurisdiction=jurisdiction,
            content_url=content_url,
            version=version,
            created_by=created_by,
            **fields,
        )
        await test_async_db.commit()
        return document

    return _create


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def text_extractor() -> FakeTextExtractor:
    return FakeTextExtractor()


@pytest.fixture
def embedding_service() -> FakeEmbeddingService:
    return FakeEmbeddingService()


@pytest.fixture
def vector_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture
def keyword_index() -> FakeKeywordIndex:
    return FakeKeywordIndex()


@pytest.fixture
def mock_queue() -> MagicMock:
    """Mock ProcessingQueue; enqueue is synchronous."""
    from lawsearch.application.processing_queue import ProcessingQueue

    return MagicMock(spec=ProcessingQueue)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, tzinfo=timezone.utc)
