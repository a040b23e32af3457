"""
Test suite for EmbeddingBatcher.

Tests batch slicing, positional vector assignment, concurrency bound
and error wrapping.

System role: Verification of the embedding ingestion stage
"""

import asyncio
import uuid
from unittest.mock import AsyncMock

import pytest

from lawsearch.core.embedding_batcher import EmbeddingBatcher
from lawsearch.core.exceptions import ExternalServiceError
from lawsearch.models.chunk import Chunk, chunk_id_for


def make_chunks(count: int) -> list[Chunk]:
    document_id = uuid.uuid4()
    chunks = []
    for i in range(count):
        chunks.append(
            Chunk(
                id=chunk_id_for(document_id, 1, i * 10, i * 10 + 5),
                document_id=document_id,
                page=1,
                text=f"chunk {i}",
                start_offset=i * 10,
                end_offset=i * 10 + 5,
            )
        )
    return chunks


@pytest.fixture
def mock_embedding_service() -> AsyncMock:
    """Provide embedding service echoing the text index as the vector."""
    service = AsyncMock()
    service.embed_batch.side_effect = lambda texts: [[float(t.split()[-1])] for t in texts]
    return service


class TestEmbeddingBatcherInit:
    def test_init_should_reject_non_positive_batch_size(self, mock_embedding_service):
        with pytest.raises(ValueError):
            EmbeddingBatcher(mock_embedding_service, batch_size=0)

    def test_init_should_reject_non_positive_concurrency(self, mock_embedding_service):
        with pytest.raises(ValueError):
            EmbeddingBatcher(mock_embedding_service, max_concurrent_batches=0)


class TestBatches:
    def test_batches_should_slice_with_short_last_batch(self, mock_embedding_service):
        batcher = EmbeddingBatcher(mock_embedding_service, batch_size=10)

        sizes = [len(batch) for batch in batcher.batches(make_chunks(25))]

        assert sizes == [10, 10, 5]


class TestEmbedChunks:
    """Test embedding assignment."""

    @pytest.mark.asyncio
    async def test_embed_chunks_should_assign_vectors_by_position(self, mock_embedding_service):
        """Test that every chunk gets the vector produced for its own text."""
        # Arrange
        batcher = EmbeddingBatcher(mock_embedding_service, batch_size=10)
        chunks = make_chunks(25)

        # Act
        result = await batcher.embed_chunks(chunks)

        # Assert
        assert result is chunks
        assert [c.embedding for c in chunks] == [[float(i)] for i in range(25)]
        assert mock_embedding_service.embed_batch.await_count == 3

    @pytest.mark.asyncio
    async def test_embed_chunks_should_skip_service_for_empty_input(self, mock_embedding_service):
        batcher = EmbeddingBatcher(mock_embedding_service)

        assert await batcher.embed_chunks([]) == []
        mock_embedding_service.embed_batch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_embed_chunks_should_bound_concurrent_batches(self):
        """Test that no more than max_concurrent_batches calls are in flight."""
        # Arrange
        in_flight = 0
        peak = 0

        async def embed_batch(texts):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return [[0.0] for _ in texts]

        service = AsyncMock()
        service.embed_batch.side_effect = embed_batch
        batcher = EmbeddingBatcher(service, batch_size=1, max_concurrent_batches=2)

        # Act
        await batcher.embed_chunks(make_chunks(6))

        # Assert
        assert peak == 2

    @pytest.mark.asyncio
    async def test_embed_chunks_should_wrap_collaborator_errors(self):
        service = AsyncMock()
        service.embed_batch.side_effect = RuntimeError("quota exceeded")
        batcher = EmbeddingBatcher(service, batch_size=5)

        with pytest.raises(ExternalServiceError) as exc_info:
            await batcher.embed_chunks(make_chunks(3))

        assert exc_info.value.service == "embedding"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_embed_chunks_should_fail_when_too_few_vectors_returned(self):
        service = AsyncMock()
        service.embed_batch.return_value = [[1.0]]
        batcher = EmbeddingBatcher(service, batch_size=5)

        with pytest.raises(ExternalServiceError) as exc_info:
            await batcher.embed_chunks(make_chunks(3))

        assert exc_info.value.details["received"] == 1

    @pytest.mark.asyncio
    async def test_embed_chunks_should_ignore_extra_vectors(self):
        service = AsyncMock()
        service.embed_batch.return_value = [[1.0], [2.0], [3.0]]
        batcher = EmbeddingBatcher(service, batch_size=5)
        chunks = make_chunks(2)

        await batcher.embed_chunks(chunks)

        assert [c.embedding for c in chunks] == [[1.0], [2.0]]
