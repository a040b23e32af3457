"""
Batched embedding assignment for document chunks.

Slices chunks into fixed-size batches, embeds each batch through the
embedding service and writes vectors back by position.

Dependencies: asyncio, lawsearch.core.interfaces
System role: Second stage of document ingestion pipeline
"""

import asyncio
import logging

from lawsearch.core.exceptions import ExternalServiceError
from lawsearch.core.interfaces import EmbeddingService
from lawsearch.models.chunk import Chunk

logger = logging.getLogger(__name__)


class EmbeddingBatcher:
    """Assign embeddings to chunks in bounded concurrent batches."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        batch_size: int = 10,
        max_concurrent_batches: int = 4,
    ) -> None:
        """
        Initialize batcher.

        Args:
            embedding_service: Collaborator producing vectors
            batch_size: Texts per embedding call
            max_concurrent_batches: Upper bound on in-flight embedding calls

        Raises:
            ValueError: When batch_size or max_concurrent_batches is not positive
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if max_concurrent_batches <= 0:
            raise ValueError("max_concurrent_batches must be positive")

        self._embedding_service = embedding_service
        self.batch_size = batch_size
        self.max_concurrent_batches = max_concurrent_batches

    def batches(self, chunks: list[Chunk]) -> list[list[Chunk]]:
        """Slice chunks into consecutive batches of batch_size."""
        return [chunks[i : i + self.batch_size] for i in range(0, len(chunks), self.batch_size)]

    async def embed_chunks(self, chunks: list[Chunk]) -> list[Chunk]:
        """
        Embed all chunks in place.

        Args:
            chunks: Ordered chunks of one document

        Returns:
            list[Chunk]: The same chunks, embeddings populated

        Raises:
            ExternalServiceError: When a batch fails or returns too few vectors
        """
        if not chunks:
            return chunks

        semaphore = asyncio.Semaphore(self.max_concurrent_batches)
        batches = self.batches(chunks)

        async def run(index: int, batch: list[Chunk]) -> None:
            async with semaphore:
                await self._embed_batch(index, batch)

        await asyncio.gather(*(run(i, batch) for i, batch in enumerate(batches)))

        logger.info(
            f"{__name__}:embed_chunks - Embedded {len(chunks)} chunks in {len(batches)} batches",
            extra={"chunk_count": len(chunks), "batch_count": len(batches)},
        )
        return chunks

    async def _embed_batch(self, index: int, batch: list[Chunk]) -> None:
        texts = [chunk.text for chunk in batch]

        try:
            vectors = await self._embedding_service.embed_batch(texts)
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(
                f"Embedding batch {index} failed: {e}",
                service="embedding",
                operation="embed_batch",
                details={"batch_index": index, "batch_size": len(texts)},
            ) from e

        if len(vectors) < len(texts):
            raise ExternalServiceError(
                f"Embedding batch {index} returned {len(vectors)} vectors for {len(texts)} texts",
                service="embedding",
                operation="embed_batch",
                details={"batch_index": index, "expected": len(texts), "received": len(vectors)},
            )
        if len(vectors) > len(texts):
            logger.warning(
                f"{__name__}:_embed_batch - Batch {index} returned {len(vectors)} vectors "
                f"for {len(texts)} texts, extra vectors ignored"
            )

        for chunk, vector in zip(batch, vectors):
            chunk.embedding = vector
