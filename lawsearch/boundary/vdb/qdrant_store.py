"""
Qdrant vector index adapter.

Stores one point per chunk (point ID = chunk UUID) with flat string
metadata in the payload. Jurisdiction filtering runs inside Qdrant; the
created_at date range is applied to the returned top-k in memory, so a
date-filtered query can return fewer than top_k hits.

Dependencies: qdrant_client, lawsearch.models
System role: Semantic retrieval backend
"""

import logging
import uuid

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models as qmodels

from lawsearch.core.exceptions import ExternalServiceError
from lawsearch.models.search import SearchFilters, VectorHit, VectorRecord

logger = logging.getLogger(__name__)


class QdrantVectorIndex:
    """VectorIndex backed by a Qdrant collection."""

    def __init__(
        self,
        client: AsyncQdrantClient,
        collection_name: str = "legal-documents",
        vector_dimension: int = 1536,
        upsert_batch_size: int = 50,
    ) -> None:
        """
        Initialize adapter.

        Args:
            client: Async Qdrant client (server URL or ":memory:")
            collection_name: Collection holding chunk points
            vector_dimension: Size of every stored vector
            upsert_batch_size: Points per upsert request
        """
        self._client = client
        self.collection_name = collection_name
        self.vector_dimension = vector_dimension
        self.upsert_batch_size = upsert_batch_size
        self._collection_ready = False

    async def ensure_collection(self) -> None:
        """Create the collection and its payload indexes when missing."""
        if self._collection_ready:
            return

        try:
            if not await self._client.collection_exists(collection_name=self.collection_name):
                await self._client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=qmodels.VectorParams(
                        size=self.vector_dimension,
                        distance=qmodels.Distance.COSINE,
                    ),
                )
                for field in ("document_id", "jurisdiction"):
                    await self._client.create_payload_index(
                        collection_name=self.collection_name,
                        field_name=field,
                        field_schema=qmodels.PayloadSchemaType.KEYWORD,
                    )
                logger.info(
                    f"{__name__}:ensure_collection - Created collection {self.collection_name} "
                    f"(dimension={self.vector_dimension})"
                )
        except Exception as e:
            raise ExternalServiceError(
                f"Failed to ensure collection {self.collection_name}: {e}",
                service="vector_store",
                operation="ensure_collection",
            ) from e

        self._collection_ready = True

    async def upsert(self, records: list[VectorRecord]) -> None:
        """
        Upsert chunk vectors in batches.

        Raises:
            ExternalServiceError: When Qdrant rejects a batch
        """
        if not records:
            return
        await self.ensure_collection()

        for start in range(0, len(records), self.upsert_batch_size):
            batch = records[start : start + self.upsert_batch_size]
            points = [
                qmodels.PointStruct(
                    id=str(record.chunk_id),
                    vector=record.vector,
                    payload=dict(record.metadata),
                )
                for record in batch
            ]
            try:
                await self._client.upsert(collection_name=self.collection_name, points=points, wait=True)
            except Exception as e:
                raise ExternalServiceError(
                    f"Failed to upsert {len(points)} vectors: {e}",
                    service="vector_store",
                    operation="upsert",
                    details={"batch_start": start},
                ) from e

        logger.info(f"{__name__}:upsert - Upserted {len(records)} vectors")

    async def query(
        self,
        vector: list[float],
        filters: SearchFilters | None,
        top_k: int,
    ) -> list[VectorHit]:
        """
        Nearest-neighbour query with metadata filters.

        Args:
            vector: Query embedding
            filters: Jurisdiction and date filters
            top_k: Points requested from Qdrant

        Returns:
            list[VectorHit]: Hits, highest score first
        """
        await self.ensure_collection()

        query_filter = None
        if filters is not None and filters.jurisdictions:
            query_filter = qmodels.Filter(
                must=[
                    qmodels.FieldCondition(
                        key="jurisdiction",
                        match=qmodels.MatchAny(any=list(filters.jurisdictions)),
                    )
                ]
            )

        hits = await self._query_points(vector, query_filter, top_k)
        if filters is not None and filters.has_date_range:
            hits = [hit for hit in hits if filters.accepts(hit.metadata)]
        return hits

    async def query_excluding_document(
        self,
        vector: list[float],
        document_id: uuid.UUID,
        limit: int,
    ) -> list[VectorHit]:
        """
        Query similar chunks belonging to other documents.

        Over-fetches 2 x limit and drops the document's own chunks.
        """
        await self.ensure_collection()
        hits = await self._query_points(vector, None, limit * 2)
        excluded = str(document_id)
        return [hit for hit in hits if hit.metadata.get("document_id") != excluded][:limit]

    async def delete_by_document(self, document_id: uuid.UUID) -> None:
        """
        Delete every point of a document.

        Raises:
            ExternalServiceError: When Qdrant rejects the delete
        """
        await self.ensure_collection()
        try:
            await self._client.delete(
                collection_name=self.collection_name,
                points_selector=qmodels.FilterSelector(
                    filter=qmodels.Filter(
                        must=[
                            qmodels.FieldCondition(
                                key="document_id",
                                match=qmodels.MatchValue(value=str(document_id)),
                            )
                        ]
                    )
                ),
                wait=True,
            )
        except Exception as e:
            raise ExternalServiceError(
                f"Failed to delete vectors for document {document_id}: {e}",
                service="vector_store",
                operation="delete",
            ) from e

        logger.info(f"{__name__}:delete_by_document - Deleted vectors for document {document_id}")

    async def health_check(self) -> bool:
        try:
            await self._client.get_collections()
        except Exception as e:
            logger.warning(f"{__name__}:health_check - Qdrant unreachable: {e}")
            return False
        return True

    async def _query_points(
        self,
        vector: list[float],
        query_filter: qmodels.Filter | None,
        limit: int,
    ) -> list[VectorHit]:
        try:
            response = await self._client.query_points(
                collection_name=self.collection_name,
                query=vector,
                query_filter=query_filter,
                limit=limit,
                with_payload=True,
            )
        except Exception as e:
            raise ExternalServiceError(
                f"Vector query failed: {e}",
                service="vector_store",
                operation="query",
            ) from e

        return [
            VectorHit(
                chunk_id=str(point.id),
                score=float(point.score),
                metadata={key: str(value) for key, value in (point.payload or {}).items()},
            )
            for point in response.points
        ]
