"""
Test suite for BoostEngine.

Tests stored-weight boosts, the recency fallback and result ordering.

System role: Verification of post-fusion re-ranking
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from lawsearch.boundary.db.models.document_model import DocumentModel
from lawsearch.boundary.db.models.search_weight_model import SearchWeightModel
from lawsearch.core.boost_engine import BoostEngine
from lawsearch.models.search import RankedHit

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_document(created_at: datetime = NOW, weight: SearchWeightModel | None = None) -> DocumentModel:
    document = DocumentModel(
        id=uuid.uuid4(),
        title="Lien Priority Act",
        jurisdiction="CA",
        content_url="s3://bucket/doc.pdf",
        version="1.0",
        created_by="tester",
        created_at=created_at,
    )
    document.search_weight = weight
    return document


def make_hit(document: DocumentModel, score: float) -> RankedHit:
    return RankedHit(
        chunk_id=uuid.uuid4(),
        document_id=document.id,
        document_title=document.title,
        jurisdiction=document.jurisdiction,
        content_url=document.content_url,
        page=1,
        text="text",
        score=score,
    )


@pytest.fixture
def engine() -> BoostEngine:
    return BoostEngine()


class TestFactor:
    """Test per-document boost factors."""

    def test_factor_should_multiply_stored_weights(self, engine):
        """Test (1 + 0.1*j) * (1 + 0.1*r) * (1 + 0.1*m)."""
        # Arrange
        weight = SearchWeightModel(jurisdiction_score=2.0, recency_score=0.0, manual_boost=5.0)
        document = make_document(weight=weight)

        # Act
        factor = engine.factor(document, NOW)

        # Assert
        assert factor == pytest.approx(1.2 * 1.0 * 1.5)

    def test_factor_should_be_neutral_for_zero_weights(self, engine):
        weight = SearchWeightModel(jurisdiction_score=0.0, recency_score=0.0, manual_boost=0.0)

        assert engine.factor(make_document(weight=weight), NOW) == pytest.approx(1.0)

    def test_factor_should_ignore_recency_when_weights_exist(self, engine):
        """Test that stored weights and the recency fallback never combine."""
        weight = SearchWeightModel(jurisdiction_score=0.0, recency_score=0.0, manual_boost=0.0)
        document = make_document(created_at=NOW, weight=weight)

        assert engine.factor(document, NOW) == pytest.approx(1.0)

    def test_factor_should_use_full_recency_boost_for_new_documents(self, engine):
        assert engine.factor(make_document(created_at=NOW), NOW) == pytest.approx(1.05)

    def test_factor_should_decay_recency_linearly(self, engine):
        document = make_document(created_at=NOW - timedelta(days=182.5))

        assert engine.factor(document, NOW) == pytest.approx(1.025)

    def test_factor_should_be_neutral_for_documents_older_than_a_year(self, engine):
        document = make_document(created_at=NOW - timedelta(days=400))

        assert engine.factor(document, NOW) == pytest.approx(1.0)

    def test_factor_should_cap_future_timestamps(self, engine):
        document = make_document(created_at=NOW + timedelta(days=30))

        assert engine.factor(document, NOW) == pytest.approx(1.05)

    def test_factor_should_treat_naive_timestamps_as_utc(self, engine):
        document = make_document(created_at=NOW.replace(tzinfo=None))

        assert engine.factor(document, NOW) == pytest.approx(1.05)


class TestApply:
    """Test boosting a hit list."""

    def test_apply_should_reorder_by_boosted_score(self, engine):
        """Test that a boost can lift a lower fused score above a higher one."""
        # Arrange
        boosted_doc = make_document(
            weight=SearchWeightModel(jurisdiction_score=0.0, recency_score=0.0, manual_boost=10.0)
        )
        plain_doc = make_document(created_at=NOW - timedelta(days=1000))
        hits = [make_hit(plain_doc, 0.8), make_hit(boosted_doc, 0.5)]
        documents = {plain_doc.id: plain_doc, boosted_doc.id: boosted_doc}

        # Act
        ranked = engine.apply(hits, documents, top_k=10, now=NOW)

        # Assert
        assert [hit.document_id for hit in ranked] == [boosted_doc.id, plain_doc.id]
        assert ranked[0].score == pytest.approx(1.0)
        assert ranked[1].score == pytest.approx(0.8)

    def test_apply_should_truncate_to_top_k(self, engine):
        document = make_document()
        hits = [make_hit(document, score) for score in (0.1, 0.9, 0.5)]

        ranked = engine.apply(hits, {document.id: document}, top_k=2, now=NOW)

        assert [hit.score for hit in ranked] == pytest.approx([0.9 * 1.05, 0.5 * 1.05])

    def test_apply_should_not_mutate_input_hits(self, engine):
        document = make_document()
        hits = [make_hit(document, 0.5)]

        engine.apply(hits, {document.id: document}, top_k=5, now=NOW)

        assert hits[0].score == 0.5

    def test_apply_should_drop_hits_without_document(self, engine):
        document = make_document()

        assert engine.apply([make_hit(document, 0.5)], {}, top_k=5, now=NOW) == []
