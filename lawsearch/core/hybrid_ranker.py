"""
Hybrid search ranking.

Runs vector and keyword retrieval concurrently, fuses their scores with
normalized weights, resolves hits against stored chunks and documents, then
hands the fused list to the boost engine.

Dependencies: asyncio, sqlalchemy, lawsearch.core.interfaces, lawsearch.boundary.db
System role: Query-time ranking engine
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.boundary.db.CRUD.chunk_crud import chunk_crud
from lawsearch.boundary.db.CRUD.document_crud import document_crud
from lawsearch.core.boost_engine import BoostEngine
from lawsearch.core.exceptions import ValidationError
from lawsearch.core.interfaces import EmbeddingService, KeywordIndex, VectorIndex
from lawsearch.models.search import KeywordHit, RankedHit, SearchFilters, SearchQuery, VectorHit
from lawsearch.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANDIDATE_MULTIPLIER = 2


@dataclass
class FusedCandidate:
    """Weighted score accumulated for one chunk across channels."""

    chunk_id: str
    score: float
    snippet: str | None = None


def normalize_weights(semantic_weight: float, keyword_weight: float) -> tuple[float, float]:
    """
    Scale weights so they sum to 1.

    Raises:
        ValidationError: When both weights are zero
    """
    total = semantic_weight + keyword_weight
    if total <= 0:
        raise ValidationError(
            "semantic_weight and keyword_weight cannot both be zero",
            field="semantic_weight",
        )
    if total == 1:
        return semantic_weight, keyword_weight
    return semantic_weight / total, keyword_weight / total


def fuse(
    vector_hits: list[VectorHit],
    keyword_hits: list[KeywordHit],
    semantic_weight: float,
    keyword_weight: float,
) -> list[FusedCandidate]:
    """
    Merge channel results by chunk ID.

    Each backend score is multiplied by its channel weight; a chunk found by
    both channels gets the sum. Order is first appearance, semantic first.

    Args:
        vector_hits: Semantic channel hits
        keyword_hits: Keyword channel hits
        semantic_weight: Normalized semantic weight
        keyword_weight: Normalized keyword weight

    Returns:
        list[FusedCandidate]: One candidate per distinct chunk ID
    """
    merged: dict[str, FusedCandidate] = {}

    for hit in vector_hits:
        candidate = merged.get(hit.chunk_id)
        if candidate is None:
            merged[hit.chunk_id] = FusedCandidate(hit.chunk_id, hit.score * semantic_weight)
        else:
            candidate.score += hit.score * semantic_weight

    for hit in keyword_hits:
        candidate = merged.get(hit.chunk_id)
        if candidate is None:
            merged[hit.chunk_id] = FusedCandidate(hit.chunk_id, hit.score * keyword_weight, hit.snippet)
        else:
            candidate.score += hit.score * keyword_weight
            if candidate.snippet is None:
                candidate.snippet = hit.snippet

    return list(merged.values())


def _parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None


class HybridRanker:
    """Fuse semantic and keyword retrieval into one boosted ranking."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_index: VectorIndex,
        keyword_index: KeywordIndex,
        boost_engine: BoostEngine | None = None,
        default_top_k: int = 10,
        timeout_seconds: float | None = 10.0,
    ) -> None:
        """
        Initialize ranker with its retrieval collaborators.

        Args:
            embedding_service: Embeds the query for the semantic channel
            vector_index: Semantic channel backend
            keyword_index: Keyword channel backend
            boost_engine: Post-fusion boosting stage
            default_top_k: Results returned when the query omits top_k
            timeout_seconds: Per-channel timeout, None to wait indefinitely
        """
        self._embedding_service = embedding_service
        self._vector_index = vector_index
        self._keyword_index = keyword_index
        self._boost_engine = boost_engine or BoostEngine()
        self.default_top_k = default_top_k
        self.timeout_seconds = timeout_seconds

    async def search(
        self,
        session: AsyncSession,
        query: SearchQuery,
        timeout: float | None = None,
    ) -> list[RankedHit]:
        """
        Run a hybrid query.

        Args:
            session: Async database session used to resolve hits
            query: Search request
            timeout: Per-channel timeout overriding the configured default

        Returns:
            list[RankedHit]: Boosted hits, best first, at most top_k

        Raises:
            ValidationError: When the query is blank or both weights are zero
        """
        if not query.query or not query.query.strip():
            raise ValidationError("Search query cannot be empty", field="query")

        semantic_weight, keyword_weight = normalize_weights(query.semantic_weight, query.keyword_weight)
        top_k = query.top_k or self.default_top_k
        candidate_count = top_k * CANDIDATE_MULTIPLIER
        filters = query.filters
        timeout = timeout if timeout is not None else self.timeout_seconds

        vector_hits, keyword_hits = await asyncio.gather(
            self._run_channel(
                "semantic",
                lambda: self._semantic_channel(query.query, filters, candidate_count),
                timeout,
                enabled=query.use_semantic_search,
            ),
            self._run_channel(
                "keyword",
                lambda: self._keyword_index.search(query.query, filters, candidate_count),
                timeout,
                enabled=query.use_keyword_search,
            ),
        )

        candidates = fuse(vector_hits, keyword_hits, semantic_weight, keyword_weight)
        hits, documents = await self._resolve(session, candidates)
        ranked = self._boost_engine.apply(hits, documents, top_k)

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:search - Ranked {len(ranked)} hits",
            vector_hits=len(vector_hits),
            keyword_hits=len(keyword_hits),
            fused=len(candidates),
            resolved=len(hits),
            top_k=top_k,
        )
        return ranked

    async def _semantic_channel(
        self,
        text: str,
        filters: SearchFilters,
        top_k: int,
    ) -> list[VectorHit]:
        vector = await self._embedding_service.embed_one(text)
        return await self._vector_index.query(vector, filters, top_k)

    async def _run_channel(
        self,
        channel: str,
        operation: Callable[[], Awaitable[list[T]]],
        timeout: float | None,
        enabled: bool = True,
    ) -> list[T]:
        """Await one retrieval channel, degrading to no hits on failure."""
        if not enabled:
            return []

        try:
            return await asyncio.wait_for(operation(), timeout)
        except asyncio.TimeoutError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_run_channel - {channel} retrieval timed out",
                e,
                level=logging.WARNING,
                channel=channel,
                timeout=timeout,
            )
            return []
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_run_channel - {channel} retrieval failed",
                e,
                channel=channel,
            )
            return []

    async def _resolve(
        self,
        session: AsyncSession,
        candidates: list[FusedCandidate],
    ) -> tuple[list[RankedHit], dict]:
        """Attach chunk and document data, dropping stale candidates."""
        chunk_ids: dict[str, uuid.UUID] = {}
        for candidate in candidates:
            parsed = _parse_uuid(candidate.chunk_id)
            if parsed is not None:
                chunk_ids[candidate.chunk_id] = parsed

        chunks = await chunk_crud.get_by_ids(session, chunk_ids.values())
        documents = await document_crud.get_by_ids(session, (chunk.document_id for chunk in chunks.values()))

        hits: list[RankedHit] = []
        for candidate in candidates:
            chunk = chunks.get(chunk_ids.get(candidate.chunk_id))
            if chunk is None:
                continue
            document = documents.get(chunk.document_id)
            if document is None:
                continue
            hits.append(
                RankedHit(
                    chunk_id=chunk.id,
                    document_id=document.id,
                    document_title=document.title,
                    jurisdiction=document.jurisdiction,
                    content_url=document.content_url,
                    page=chunk.page,
                    text=chunk.text,
                    snippet=candidate.snippet,
                    score=candidate.score,
                )
            )

        dropped = len(candidates) - len(hits)
        if dropped:
            logger.info(f"{__name__}:_resolve - Dropped {dropped} stale or malformed candidates")
        return hits, documents
