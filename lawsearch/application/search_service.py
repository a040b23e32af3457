"""
Search service.

Entry point for hybrid search and "similar documents" recommendations.

Dependencies: lawsearch.core, lawsearch.boundary.db
System role: Query-time orchestration
"""

import logging
import random
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.boundary.db.CRUD.chunk_crud import chunk_crud
from lawsearch.boundary.db.CRUD.document_crud import document_crud
from lawsearch.core.hybrid_ranker import HybridRanker
from lawsearch.core.interfaces import EmbeddingService, VectorIndex
from lawsearch.models.search import RankedHit, SearchQuery, VectorHit

logger = logging.getLogger(__name__)

RECOMMENDATION_SAMPLE_SIZE = 3


class SearchService:
    """Hybrid search and document recommendations."""

    def __init__(
        self,
        db: AsyncSession,
        ranker: HybridRanker,
        embedding_service: EmbeddingService,
        vector_index: VectorIndex,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize search service.

        Args:
            db: AsyncSession used to resolve hits
            ranker: Hybrid ranking engine
            embedding_service: Embeds sampled chunks for recommendations
            vector_index: Similarity backend for recommendations
            rng: Random source for chunk sampling
        """
        self.db = db
        self._ranker = ranker
        self._embedding_service = embedding_service
        self._vector_index = vector_index
        self._rng = rng or random.Random()

    async def search(self, query: SearchQuery, timeout: float | None = None) -> list[RankedHit]:
        """
        Run a hybrid search.

        Raises:
            ValidationError: Blank query or both weights zero
        """
        return await self._ranker.search(self.db, query, timeout=timeout)

    async def recommend(self, document_id: uuid.UUID, count: int = 5) -> list[RankedHit]:
        """
        Find documents similar to a given document.

        Samples up to three of its chunks, queries the vector index for each
        while excluding the document itself, and keeps the first hit seen per
        other document.

        Args:
            document_id: Reference document
            count: Number of documents to return

        Returns:
            list[RankedHit]: One hit per similar document, best first;
            empty when the document is unknown or has no chunks
        """
        if count <= 0:
            return []
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            return []

        chunks = list(await chunk_crud.get_by_document_id(self.db, document_id))
        if not chunks:
            return []

        sample = self._rng.sample(chunks, min(RECOMMENDATION_SAMPLE_SIZE, len(chunks)))
        hits: list[VectorHit] = []
        for chunk in sample:
            vector = await self._embedding_service.embed_one(chunk.text)
            hits.extend(await self._vector_index.query_excluding_document(vector, document_id, count * 2))

        results = await self._first_hit_per_document(hits, document_id)
        results.sort(key=lambda hit: hit.score, reverse=True)
        logger.info(f"{__name__}:recommend - {len(results)} similar documents for {document_id}")
        return results[:count]

    async def _first_hit_per_document(
        self,
        hits: list[VectorHit],
        excluded_document_id: uuid.UUID,
    ) -> list[RankedHit]:
        chunk_ids: list[uuid.UUID] = []
        for hit in hits:
            try:
                chunk_ids.append(uuid.UUID(hit.chunk_id))
            except ValueError:
                continue

        chunks = await chunk_crud.get_by_ids(self.db, chunk_ids)
        documents = await document_crud.get_by_ids(self.db, (chunk.document_id for chunk in chunks.values()))

        results: dict[uuid.UUID, RankedHit] = {}
        for hit in hits:
            try:
                chunk = chunks.get(uuid.UUID(hit.chunk_id))
            except ValueError:
                continue
            if chunk is None or chunk.document_id == excluded_document_id or chunk.document_id in results:
                continue
            document = documents.get(chunk.document_id)
            if document is None:
                continue
            results[document.id] = RankedHit(
                chunk_id=chunk.id,
                document_id=document.id,
                document_title=document.title,
                jurisdiction=document.jurisdiction,
                content_url=document.content_url,
                page=chunk.page,
                text=chunk.text,
                score=hit.score,
            )
        return list(results.values())
