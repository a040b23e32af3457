"""
Document indexing orchestrator.

Coordinates blob download, text extraction, segmentation, embedding,
chunk persistence and the vector and keyword index writes. Also drives
reprocessing, full reindexing and embedding model migration.

Dependencies: lawsearch.core, lawsearch.boundary.db, asyncio
System role: Ingestion pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lawsearch.boundary.db.CRUD.chunk_crud import chunk_crud
from lawsearch.boundary.db.CRUD.document_crud import document_crud
from lawsearch.boundary.db.models.chunk_model import ChunkModel
from lawsearch.boundary.db.models.document_model import DocumentModel
from lawsearch.configs.indexing import IndexingSettings
from lawsearch.core.embedding_batcher import EmbeddingBatcher
from lawsearch.core.exceptions import NotFoundError
from lawsearch.core.interfaces import BlobStore, EmbeddingService, KeywordIndex, TextExtractor, VectorIndex
from lawsearch.core.segmenter import Segmenter
from lawsearch.models.chunk import Chunk
from lawsearch.models.pipeline import PipelineResult, ReindexResult
from lawsearch.models.search import KeywordRecord, VectorRecord
from lawsearch.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)


def _iso_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _base_metadata(document: DocumentModel) -> dict[str, str]:
    return {
        "document_id": str(document.id),
        "jurisdiction": document.jurisdiction,
        "created_at": _iso_utc(document.created_at),
    }


def build_keyword_records(
    document: DocumentModel,
    chunks: Sequence[Chunk | ChunkModel],
) -> list[KeywordRecord]:
    """Build keyword records carrying the document title for title scoring."""
    base_metadata = _base_metadata(document)
    return [
        KeywordRecord(
            chunk_id=chunk.id,
            text=chunk.text,
            metadata={**base_metadata, "page": str(chunk.page), "document_title": document.title},
        )
        for chunk in chunks
    ]


def build_index_records(
    document: DocumentModel,
    chunks: list[Chunk],
) -> tuple[list[VectorRecord], list[KeywordRecord]]:
    """
    Build vector and keyword records for a document's chunks.

    Metadata values are strings so both backends can filter on them.
    """
    base_metadata = _base_metadata(document)
    vector_records = [
        VectorRecord(chunk_id=chunk.id, vector=chunk.embedding, metadata={**base_metadata, "page": str(chunk.page)})
        for chunk in chunks
    ]
    return vector_records, build_keyword_records(document, chunks)


class IndexingService:
    """Orchestrate document ingestion: download -> extract -> segment -> embed -> index."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        blob_store: BlobStore,
        text_extractor: TextExtractor,
        embedding_service: EmbeddingService,
        vector_index: VectorIndex,
        keyword_index: KeywordIndex,
        settings: IndexingSettings | None = None,
    ) -> None:
        """
        Initialize service with its collaborators.

        Args:
            session_factory: Opens one database session per operation
            blob_store: Source of raw document bytes
            text_extractor: Per-page text extraction
            embedding_service: Embedding collaborator
            vector_index: Semantic index
            keyword_index: Keyword index
            settings: Chunking and batching settings (defaults if None)
        """
        self._settings = settings or IndexingSettings()
        self._session_factory = session_factory
        self._blob_store = blob_store
        self._text_extractor = text_extractor
        self._embedding_service = embedding_service
        self._vector_index = vector_index
        self._keyword_index = keyword_index

        self._segmenter = Segmenter.from_settings(self._settings)
        self._batcher = EmbeddingBatcher(
            embedding_service,
            batch_size=self._settings.embedding_batch_size,
            max_concurrent_batches=self._settings.max_concurrent_batches,
        )
        self._locks: dict[uuid.UUID, asyncio.Lock] = {}
        self._lock_users: dict[uuid.UUID, int] = {}

    async def process_document(self, document_id: uuid.UUID) -> PipelineResult:
        """
        Ingest one document end to end.

        Existing chunks of the document are replaced. Any failure propagates;
        the chunk transaction is only committed after both index writes
        succeed.

        Args:
            document_id: Document to ingest

        Returns:
            PipelineResult: Page and chunk counts with timing

        Raises:
            NotFoundError: Document does not exist
            ExternalServiceError: A collaborator failed
            DocumentProcessingError: The content could not be parsed
        """
        async with self._document_lock(document_id):
            return await self._process(document_id)

    async def reprocess_document(self, document_id: uuid.UUID) -> PipelineResult:
        """
        Clear a document's chunks and index entries, then ingest it again.

        Cleanup failures are logged and do not stop reprocessing.
        """
        async with self._document_lock(document_id):
            await self._clear_document(document_id)
            return await self._process(document_id)

    async def reindex_all(self) -> ReindexResult:
        """
        Reprocess every known document.

        A failing document is counted and the loop continues.

        Returns:
            ReindexResult: Success and failure tally
        """
        async with self._session_factory() as session:
            document_ids = await document_crud.get_all_ids(session)

        result = ReindexResult()
        for document_id in document_ids:
            try:
                await self.reprocess_document(document_id)
                result.success += 1
            except Exception as e:
                result.failed += 1
                log_exception_with_context(
                    logger,
                    f"{__name__}:reindex_all - Reprocessing failed",
                    e,
                    document_id=document_id,
                )

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:reindex_all - Reindexed {result.success}/{result.total} documents",
            success=result.success,
            failed=result.failed,
        )
        return result

    async def update_embedding_model(self, model_name: str | None = None) -> ReindexResult:
        """
        Optionally switch the embedding model, then reindex everything.

        Args:
            model_name: New model, or None to re-embed with the current one
        """
        if model_name:
            await self._embedding_service.set_model(model_name)
            logger.info(f"{__name__}:update_embedding_model - Active model is now {model_name}")
        return await self.reindex_all()

    async def restore_keyword_index(self) -> int:
        """
        Re-add every persisted chunk to the keyword index.

        The in-process keyword corpus starts empty, so it is rebuilt from the
        chunk rows and document titles in the database. Records are keyed by
        chunk ID; running this against a populated index only overwrites.

        Returns:
            int: Number of chunks indexed
        """
        restored = 0
        async with self._session_factory() as session:
            document_ids = await document_crud.get_all_ids(session)
            for document_id in document_ids:
                document = await document_crud.get_by_id(session, document_id)
                if document is None:
                    continue
                rows = await chunk_crud.get_by_document_id(session, document_id)
                if not rows:
                    continue
                await self._keyword_index.index_batch(build_keyword_records(document, rows))
                restored += len(rows)

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:restore_keyword_index - Restored {restored} chunks",
            document_count=len(document_ids),
            chunk_count=restored,
        )
        return restored

    @asynccontextmanager
    async def _document_lock(self, document_id: uuid.UUID) -> AsyncIterator[None]:
        """Hold the document's lock; the entry is dropped once nobody holds or waits on it."""
        lock = self._locks.setdefault(document_id, asyncio.Lock())
        self._lock_users[document_id] = self._lock_users.get(document_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[document_id] -= 1
            if self._lock_users[document_id] == 0:
                del self._lock_users[document_id]
                del self._locks[document_id]

    async def _process(self, document_id: uuid.UUID) -> PipelineResult:
        start_time = time.perf_counter()

        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
            if document is None:
                raise NotFoundError("document", document_id)

            content = await self._blob_store.get(document.content_url)
            pages = await self._text_extractor.extract_pages(content)

            chunks = self._segmenter.segment_pages(pages, document_id)
            await self._batcher.embed_chunks(chunks)

            await chunk_crud.delete_by_document_id(session, document_id)
            await chunk_crud.add_many(session, chunks)

            vector_records, keyword_records = build_index_records(document, chunks)
            await asyncio.gather(
                self._vector_index.upsert(vector_records),
                self._keyword_index.index_batch(keyword_records),
            )

            await session.commit()

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:_process - Indexed document {document_id}",
            document_id=document_id,
            page_count=len(pages),
            chunk_count=len(chunks),
            processing_time_ms=round(elapsed_ms, 1),
        )
        return PipelineResult(
            document_id=document_id,
            page_count=len(pages),
            chunk_count=len(chunks),
            processing_time_ms=elapsed_ms,
        )

    async def _clear_document(self, document_id: uuid.UUID) -> None:
        """Best-effort removal of chunks and index entries."""
        try:
            async with self._session_factory() as session:
                await chunk_crud.delete_by_document_id(session, document_id)
                await session.commit()
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_clear_document - Chunk cleanup failed",
                e,
                level=logging.WARNING,
                document_id=document_id,
            )

        try:
            await self._vector_index.delete_by_document(document_id)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_clear_document - Vector cleanup failed",
                e,
                level=logging.WARNING,
                document_id=document_id,
            )

        try:
            await self._keyword_index.delete_by_document(document_id)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_clear_document - Keyword cleanup failed",
                e,
                level=logging.WARNING,
                document_id=document_id,
            )
