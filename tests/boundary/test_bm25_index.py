"""
Test suite for BM25KeywordIndex.

Tests indexing, field weighting, fuzzy expansion, filtering, deletion
and snippet highlighting on the real rank_bm25 scorer.

System role: Verification of keyword retrieval backend
"""

import uuid

import pytest

from lawsearch.boundary.keyword.bm25_index import BM25KeywordIndex, tokenize
from lawsearch.models.search import KeywordRecord, SearchFilters


def make_record(text: str, document_id: uuid.UUID, title: str = "", **metadata) -> KeywordRecord:
    return KeywordRecord(
        chunk_id=uuid.uuid4(),
        text=text,
        metadata={
            "document_id": str(document_id),
            "document_title": title,
            "jurisdiction": metadata.get("jurisdiction", "CA"),
            "created_at": metadata.get("created_at", "2024-01-01T00:00:00+00:00"),
            "page": "1",
        },
    )


@pytest.fixture
def index() -> BM25KeywordIndex:
    return BM25KeywordIndex()


@pytest.fixture
def document_id() -> uuid.UUID:
    return uuid.uuid4()


def test_tokenize_should_lowercase_and_drop_punctuation():
    assert tokenize("Section 4(a): Mechanic's LIEN.") == ["section", "4", "a", "mechanic", "s", "lien"]


class TestIndexBatch:
    @pytest.mark.asyncio
    async def test_index_batch_should_replace_records_with_same_chunk_id(self, index, document_id):
        record = make_record("first text", document_id)
        replacement = record.model_copy(update={"text": "second text"})

        await index.index_batch([record])
        await index.index_batch([replacement])

        assert len(index) == 1
        hits = await index.search("second", None, 5)
        assert [hit.chunk_id for hit in hits] == [str(record.chunk_id)]


class TestSearch:
    """Test keyword ranking."""

    @pytest.mark.asyncio
    async def test_search_should_return_only_matching_records(self, index, document_id):
        # Arrange
        lien = make_record("A mechanic's lien attaches to the property.", document_id)
        other = make_record("Tenants must receive thirty days notice.", document_id)
        await index.index_batch([lien, other])

        # Act
        hits = await index.search("lien", None, 10)

        # Assert
        assert [hit.chunk_id for hit in hits] == [str(lien.chunk_id)]
        assert hits[0].score > 0
        assert hits[0].metadata["document_id"] == str(document_id)

    @pytest.mark.asyncio
    async def test_search_should_rank_by_term_frequency(self, index, document_id):
        once = make_record("The lien is recorded with the county clerk today.", document_id)
        thrice = make_record("Lien priority: the first lien beats a later lien.", document_id)
        await index.index_batch([once, thrice])

        hits = await index.search("lien", None, 10)

        assert [hit.chunk_id for hit in hits] == [str(thrice.chunk_id), str(once.chunk_id)]

    @pytest.mark.asyncio
    async def test_search_should_match_title_field(self, index, document_id):
        """Test that a title-only match still produces a hit."""
        record = make_record("Filing requirements apply.", document_id, title="Homestead Exemption Act")
        await index.index_batch([record, make_record("Unrelated text.", document_id)])

        hits = await index.search("homestead", None, 10)

        assert [hit.chunk_id for hit in hits] == [str(record.chunk_id)]

    @pytest.mark.asyncio
    async def test_search_should_expand_misspelled_terms(self, index, document_id):
        record = make_record("The easement runs with the land.", document_id)
        await index.index_batch([record])

        hits = await index.search("easment", None, 10)

        assert [hit.chunk_id for hit in hits] == [str(record.chunk_id)]
        assert "<mark>easement</mark>" in hits[0].snippet

    @pytest.mark.asyncio
    async def test_search_should_not_expand_when_fuzzy_disabled(self, document_id):
        index = BM25KeywordIndex(fuzzy_cutoff=1.0)
        await index.index_batch([make_record("The easement runs with the land.", document_id)])

        assert await index.search("easment", None, 10) == []

    @pytest.mark.asyncio
    async def test_search_should_apply_jurisdiction_filter(self, index, document_id):
        ca = make_record("lien law", document_id, jurisdiction="CA")
        ny = make_record("lien law", document_id, jurisdiction="NY")
        await index.index_batch([ca, ny])

        hits = await index.search("lien", SearchFilters(jurisdictions=["NY"]), 10)

        assert [hit.chunk_id for hit in hits] == [str(ny.chunk_id)]

    @pytest.mark.asyncio
    async def test_search_should_apply_date_filter(self, index, document_id):
        from datetime import datetime, timezone

        old = make_record("lien law", document_id, created_at="2019-05-01T00:00:00+00:00")
        new = make_record("lien law", document_id, created_at="2024-05-01T00:00:00+00:00")
        await index.index_batch([old, new])

        filters = SearchFilters(start_date=datetime(2023, 1, 1, tzinfo=timezone.utc))
        hits = await index.search("lien", filters, 10)

        assert [hit.chunk_id for hit in hits] == [str(new.chunk_id)]

    @pytest.mark.asyncio
    async def test_search_should_limit_to_top_k(self, index, document_id):
        await index.index_batch([make_record(f"lien number {i}", document_id) for i in range(5)])

        assert len(await index.search("lien", None, 2)) == 2

    @pytest.mark.asyncio
    async def test_search_should_return_empty_for_empty_index_or_query(self, index, document_id):
        assert await index.search("lien", None, 5) == []
        await index.index_batch([make_record("lien", document_id)])
        assert await index.search("  !! ", None, 5) == []


class TestDeleteByDocument:
    @pytest.mark.asyncio
    async def test_delete_should_remove_only_that_documents_records(self, index):
        keep_id, drop_id = uuid.uuid4(), uuid.uuid4()
        keep = make_record("lien text", keep_id)
        await index.index_batch([keep, make_record("lien text", drop_id)])

        await index.delete_by_document(drop_id)

        assert len(index) == 1
        hits = await index.search("lien", None, 10)
        assert [hit.chunk_id for hit in hits] == [str(keep.chunk_id)]


class TestHighlight:
    """Test snippet generation."""

    def test_highlight_should_wrap_whole_word_matches(self, index):
        snippet = index.highlight("A lien, not a client.", ["lien"])

        assert snippet == "A <mark>lien</mark>, not a client."

    def test_highlight_should_preserve_original_case(self, index):
        assert "<mark>LIEN</mark>" in index.highlight("LIEN NOTICE", ["lien"])

    def test_highlight_should_return_text_without_matches(self, index):
        assert index.highlight("nothing here", ["lien"]) == "nothing here"

    def test_highlight_should_limit_fragments(self):
        index = BM25KeywordIndex(fragment_size=20, max_fragments=2)
        text = " ".join(["lien"] + ["filler"] * 10 + ["lien"] + ["filler"] * 10 + ["lien"])

        snippet = index.highlight(text, ["lien"])

        assert snippet.count("<mark>lien</mark>") == 2
        assert snippet.count(" ... ") == 1
