"""
Dependency injection container.

Builds the long-lived collaborators once and hands out per-session
services.

Dependencies: lawsearch.configs, lawsearch.application, lawsearch.boundary
System role: DI container for service wiring
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from lawsearch.application.document_service import DocumentService
from lawsearch.application.health_service import HealthService
from lawsearch.application.indexing_service import IndexingService
from lawsearch.application.processing_queue import ProcessingQueue
from lawsearch.application.search_service import SearchService
from lawsearch.boundary.blob.s3_blob_store import S3BlobStore
from lawsearch.boundary.db.connection import create_tables, get_async_engine, get_async_session_factory
from lawsearch.boundary.embeddings.gemini_embeddings import GeminiEmbeddingService
from lawsearch.boundary.keyword.bm25_index import BM25KeywordIndex
from lawsearch.boundary.ocr.pdf_extractor import PdfTextExtractor
from lawsearch.boundary.vdb.vector_store_factory import get_vector_index
from lawsearch.configs import Settings, get_settings
from lawsearch.core.boost_engine import BoostEngine
from lawsearch.core.hybrid_ranker import HybridRanker
from lawsearch.core.interfaces import BlobStore, EmbeddingService, KeywordIndex, TextExtractor, VectorIndex

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Shared collaborators for one process."""

    settings: Settings
    engine: AsyncEngine | None
    session_factory: async_sessionmaker[AsyncSession]
    blob_store: BlobStore
    text_extractor: TextExtractor
    embedding_service: EmbeddingService
    vector_index: VectorIndex
    keyword_index: KeywordIndex
    indexing_service: IndexingService
    processing_queue: ProcessingQueue
    ranker: HybridRanker

    def document_service(self, db: AsyncSession) -> DocumentService:
        return DocumentService(
            db,
            blob_store=self.blob_store,
            vector_index=self.vector_index,
            keyword_index=self.keyword_index,
            queue=self.processing_queue,
        )

    def search_service(self, db: AsyncSession) -> SearchService:
        return SearchService(
            db,
            ranker=self.ranker,
            embedding_service=self.embedding_service,
            vector_index=self.vector_index,
        )

    def health_service(self) -> HealthService:
        return HealthService(
            self.session_factory,
            blob_store=self.blob_store,
            vector_index=self.vector_index,
            keyword_index=self.keyword_index,
        )

    async def start(self, create_schema: bool = False, restore_keyword_index: bool = True) -> None:
        """
        Prepare indexes and start the processing queue consumer.

        Args:
            create_schema: Create missing database tables first
            restore_keyword_index: Reload persisted chunks into the keyword index
        """
        if create_schema and self.engine is not None:
            await create_tables(self.engine)
        await self.vector_index.ensure_collection()
        await self.keyword_index.ensure_index()
        if restore_keyword_index:
            await self.indexing_service.restore_keyword_index()
        self.processing_queue.start()
        logger.info(f"{__name__}:start - Container started")

    async def stop(self) -> None:
        """Stop the queue consumer and dispose the engine."""
        await self.processing_queue.stop()
        if self.engine is not None:
            await self.engine.dispose()
        logger.info(f"{__name__}:stop - Container stopped")


def build_container(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    blob_store: BlobStore | None = None,
    text_extractor: TextExtractor | None = None,
    embedding_service: EmbeddingService | None = None,
    vector_index: VectorIndex | None = None,
    keyword_index: KeywordIndex | None = None,
) -> Container:
    """
    Wire every collaborator, building defaults from settings.

    Any collaborator passed in replaces the default adapter.

    Returns:
        Container: Ready-to-start container
    """
    settings = settings or get_settings()

    engine = None
    if session_factory is None:
        engine = get_async_engine()
        session_factory = get_async_session_factory(engine)

    blob_store = blob_store or S3BlobStore.from_settings(settings.blob_store)
    text_extractor = text_extractor or PdfTextExtractor()
    embedding_service = embedding_service or GeminiEmbeddingService.from_settings(settings.embeddings)
    vector_index = vector_index or get_vector_index(settings.vector_store)
    keyword_index = keyword_index or BM25KeywordIndex.from_settings(settings.keyword_index)

    indexing_service = IndexingService(
        session_factory,
        blob_store=blob_store,
        text_extractor=text_extractor,
        embedding_service=embedding_service,
        vector_index=vector_index,
        keyword_index=keyword_index,
        settings=settings.indexing,
    )
    ranker = HybridRanker(
        embedding_service,
        vector_index,
        keyword_index,
        boost_engine=BoostEngine(),
        default_top_k=settings.search.default_top_k,
        timeout_seconds=settings.search.backend_timeout_seconds,
    )

    return Container(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        blob_store=blob_store,
        text_extractor=text_extractor,
        embedding_service=embedding_service,
        vector_index=vector_index,
        keyword_index=keyword_index,
        indexing_service=indexing_service,
        processing_queue=ProcessingQueue(indexing_service.process_document),
        ranker=ranker,
    )


@lru_cache
def get_container() -> Container:
    """Get the process-wide container built from application settings."""
    return build_container()
