"""
Test suite for IndexingService.

Runs the ingestion pipeline against the in-memory database with
in-process fakes for blob, extraction, embedding and index collaborators.

System role: Verification of ingestion orchestration
"""

import asyncio
import uuid
from unittest.mock import AsyncMock

import pytest

from lawsearch.application.indexing_service import IndexingService, build_index_records
from lawsearch.boundary.db.CRUD.chunk_crud import chunk_crud
from lawsearch.boundary.keyword.bm25_index import BM25KeywordIndex
from lawsearch.configs.indexing import IndexingSettings
from lawsearch.core.exceptions import ExternalServiceError, NotFoundError

PAGES = "Section 1. Liens.\n\nA lien attaches on filing.\fNotice must be given in writing."


@pytest.fixture
def indexing_settings() -> IndexingSettings:
    return IndexingSettings(chunk_size=64, chunk_overlap=16, max_chunk_length=128, embedding_batch_size=2)


@pytest.fixture
def indexing_service(
    test_session_factory,
    blob_store,
    text_extractor,
    embedding_service,
    vector_index,
    keyword_index,
    indexing_settings,
) -> IndexingService:
    return IndexingService(
        session_factory=test_session_factory,
        blob_store=blob_store,
        text_extractor=text_extractor,
        embedding_service=embedding_service,
        vector_index=vector_index,
        keyword_index=keyword_index,
        settings=indexing_settings,
    )


@pytest.fixture
def stored_document(create_document, blob_store):
    """Factory creating a document whose bytes are in the fake blob store."""

    async def _create(text: str = PAGES, **fields):
        content_url = await blob_store.put(f"{uuid.uuid4()}.pdf", text.encode("utf-8"))
        return await create_document(content_url=content_url, **fields)

    return _create


class TestBuildIndexRecords:
    @pytest.mark.asyncio
    async def test_build_should_attach_string_metadata(self, create_document):
        from lawsearch.core.segmenter import Segmenter

        document = await create_document(title="Lien Act", jurisdiction="TX")
        chunks = Segmenter().segment("Some text.", 2, document.id)

        vector_records, keyword_records = build_index_records(document, chunks)

        assert vector_records[0].metadata["document_id"] == str(document.id)
        assert vector_records[0].metadata["jurisdiction"] == "TX"
        assert vector_records[0].metadata["page"] == "2"
        assert vector_records[0].metadata["created_at"].endswith("+00:00")
        assert keyword_records[0].metadata["document_title"] == "Lien Act"
        assert "document_title" not in vector_records[0].metadata


class TestProcessDocument:
    """Test single-document ingestion."""

    @pytest.mark.asyncio
    async def test_process_should_persist_and_index_chunks(
        self,
        indexing_service,
        stored_document,
        test_session_factory,
        vector_index,
        keyword_index,
    ):
        """Test that every chunk lands in the database and both indexes."""
        # Arrange
        document = await stored_document()

        # Act
        result = await indexing_service.process_document(document.id)

        # Assert
        async with test_session_factory() as session:
            chunks = await chunk_crud.get_by_document_id(session, document.id)
        assert result.document_id == document.id
        assert result.page_count == 2
        assert result.chunk_count == len(chunks) == 3
        assert {str(c.id) for c in chunks} == set(vector_index.records) == set(keyword_index.records)
        assert all(c.embedding for c in chunks)
        assert [c.page for c in chunks] == [1, 1, 2]

    @pytest.mark.asyncio
    async def test_process_should_be_idempotent(
        self, indexing_service, stored_document, test_session_factory, vector_index
    ):
        """Test that processing twice leaves the same chunk set."""
        document = await stored_document()

        await indexing_service.process_document(document.id)
        first_ids = set(vector_index.records)
        await indexing_service.process_document(document.id)

        async with test_session_factory() as session:
            assert await chunk_crud.count_by_document_id(session, document.id) == 3
        assert set(vector_index.records) == first_ids

    @pytest.mark.asyncio
    async def test_process_should_raise_for_unknown_document(self, indexing_service):
        with pytest.raises(NotFoundError):
            await indexing_service.process_document(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_process_should_handle_document_without_text(
        self, indexing_service, stored_document, vector_index
    ):
        document = await stored_document(text="   \f  ")

        result = await indexing_service.process_document(document.id)

        assert result.page_count == 2
        assert result.chunk_count == 0
        assert vector_index.records == {}

    @pytest.mark.asyncio
    async def test_process_should_not_commit_chunks_when_index_write_fails(
        self,
        test_session_factory,
        blob_store,
        text_extractor,
        embedding_service,
        keyword_index,
        indexing_settings,
        stored_document,
    ):
        """Test that a vector index failure propagates and leaves no chunk rows."""
        # Arrange
        failing_index = AsyncMock()
        failing_index.upsert.side_effect = ExternalServiceError("down", service="vector_store")
        service = IndexingService(
            test_session_factory,
            blob_store,
            text_extractor,
            embedding_service,
            failing_index,
            keyword_index,
            settings=indexing_settings,
        )
        document = await stored_document()

        # Act & Assert
        with pytest.raises(ExternalServiceError):
            await service.process_document(document.id)

        async with test_session_factory() as session:
            assert await chunk_crud.count_by_document_id(session, document.id) == 0


class TestReprocessAndReindex:
    """Test bulk and repeat processing."""

    @pytest.mark.asyncio
    async def test_reprocess_should_replace_stale_chunks(
        self, indexing_service, stored_document, blob_store, test_session_factory, keyword_index
    ):
        # Arrange
        document = await stored_document()
        await indexing_service.process_document(document.id)
        blob_store.objects[document.content_url] = b"Completely new single page."

        # Act
        result = await indexing_service.reprocess_document(document.id)

        # Assert
        async with test_session_factory() as session:
            chunks = await chunk_crud.get_by_document_id(session, document.id)
        assert result.chunk_count == 1
        assert [c.text for c in chunks] == ["Completely new single page."]
        assert [r.text for r in keyword_index.records.values()] == ["Completely new single page."]

    @pytest.mark.asyncio
    async def test_reprocess_should_continue_when_cleanup_fails(
        self, indexing_service, stored_document, vector_index
    ):
        document = await stored_document()
        vector_index.delete_by_document = AsyncMock(side_effect=ConnectionError("refused"))

        result = await indexing_service.reprocess_document(document.id)

        assert result.chunk_count == 3

    @pytest.mark.asyncio
    async def test_reindex_all_should_count_successes_and_failures(
        self, indexing_service, stored_document, create_document
    ):
        """Test that one broken document does not stop the run."""
        # Arrange
        await stored_document(title="Good one")
        await stored_document(title="Good two")
        await create_document(title="Missing blob", content_url="s3://test-bucket/missing.pdf")

        # Act
        result = await indexing_service.reindex_all()

        # Assert
        assert result.success == 2
        assert result.failed == 1
        assert result.total == 3

    @pytest.mark.asyncio
    async def test_update_embedding_model_should_switch_model_then_reindex(
        self, indexing_service, stored_document, embedding_service
    ):
        await stored_document()

        result = await indexing_service.update_embedding_model("new-model")

        assert embedding_service.model_name == "new-model"
        assert result.success == 1

    @pytest.mark.asyncio
    async def test_update_embedding_model_should_keep_model_when_none_given(
        self, indexing_service, embedding_service
    ):
        result = await indexing_service.update_embedding_model()

        assert embedding_service.model_name == "fake-model"
        assert result.total == 0


class TestDocumentLocks:
    """Test per-document mutual exclusion."""

    @pytest.mark.asyncio
    async def test_concurrent_runs_for_same_document_should_not_overlap(
        self, indexing_service, stored_document, blob_store
    ):
        # Arrange
        document = await stored_document()
        original_get = blob_store.get
        active = 0
        peak = 0

        async def slow_get(content_url: str) -> bytes:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return await original_get(content_url)

        blob_store.get = slow_get

        # Act
        await asyncio.gather(
            indexing_service.process_document(document.id),
            indexing_service.reprocess_document(document.id),
        )

        # Assert
        assert peak == 1

    @pytest.mark.asyncio
    async def test_lock_entries_should_be_released_after_processing(self, indexing_service, stored_document):
        document = await stored_document()

        await indexing_service.process_document(document.id)
        with pytest.raises(NotFoundError):
            await indexing_service.process_document(uuid.uuid4())

        assert indexing_service._locks == {}
        assert indexing_service._lock_users == {}


class TestRestoreKeywordIndex:
    """Test rebuilding the keyword corpus from persisted chunks."""

    @pytest.mark.asyncio
    async def test_restore_should_make_persisted_chunks_searchable_in_fresh_index(
        self,
        indexing_service,
        stored_document,
        test_session_factory,
        blob_store,
        text_extractor,
        embedding_service,
        vector_index,
        indexing_settings,
    ):
        """Test that a new in-memory index serves chunks ingested before it existed."""
        # Arrange
        document = await stored_document(title="Lien Priority Act", jurisdiction="TX")
        await indexing_service.process_document(document.id)
        fresh_index = BM25KeywordIndex()
        restarted = IndexingService(
            test_session_factory,
            blob_store,
            text_extractor,
            embedding_service,
            vector_index,
            fresh_index,
            settings=indexing_settings,
        )

        # Act
        restored = await restarted.restore_keyword_index()
        hits = await fresh_index.search("lien attaches", None, top_k=5)

        # Assert
        assert restored == 3 == len(fresh_index)
        assert hits[0].metadata["document_id"] == str(document.id)
        assert hits[0].metadata["jurisdiction"] == "TX"
        assert hits[0].metadata["document_title"] == "Lien Priority Act"
        assert "<mark>lien</mark>" in hits[0].snippet.lower()

    @pytest.mark.asyncio
    async def test_restore_should_index_nothing_for_empty_database(self, indexing_service, keyword_index):
        assert await indexing_service.restore_keyword_index() == 0
        assert keyword_index.records == {}
