"""
Document-level score boosting.

Applies a multiplicative factor per document after fusion: stored search
weights when present, otherwise a recency fallback. The two paths never
combine for the same document.

Dependencies: lawsearch.boundary.db.models
System role: Re-ranking stage of hybrid search
"""

import uuid
from datetime import datetime, timezone

from lawsearch.boundary.db.models.document_model import DocumentModel
from lawsearch.models.search import RankedHit

WEIGHT_STEP = 0.1
RECENCY_FALLBACK_STEP = 0.05
RECENCY_HORIZON_DAYS = 365.0


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BoostEngine:
    """Multiply fused scores by per-document boost factors."""

    def factor(self, document: DocumentModel, now: datetime | None = None) -> float:
        """
        Compute the boost factor for one document.

        Args:
            document: Document with its search_weight loaded
            now: Reference time for the recency fallback (defaults to UTC now)

        Returns:
            float: Multiplier applied to every hit of the document
        """
        weight = document.search_weight
        if weight is not None:
            return (
                (1 + weight.jurisdiction_score * WEIGHT_STEP)
                * (1 + weight.recency_score * WEIGHT_STEP)
                * (1 + weight.manual_boost * WEIGHT_STEP)
            )

        now = _as_utc(now or datetime.now(timezone.utc))
        age_days = (now - _as_utc(document.created_at)).total_seconds() / 86400
        recency = max(0.0, 1 - age_days / RECENCY_HORIZON_DAYS)
        # Future timestamps are capped at the age-zero factor
        recency = min(recency, 1.0)
        return 1 + recency * RECENCY_FALLBACK_STEP

    def apply(
        self,
        hits: list[RankedHit],
        documents: dict[uuid.UUID, DocumentModel],
        top_k: int,
        now: datetime | None = None,
    ) -> list[RankedHit]:
        """
        Boost, sort descending and truncate.

        Args:
            hits: Fused hits with pre-boost scores
            documents: Owning documents keyed by ID
            top_k: Number of hits to keep
            now: Reference time for the recency fallback

        Returns:
            list[RankedHit]: Boosted hits, best first
        """
        now = now or datetime.now(timezone.utc)
        factors: dict[uuid.UUID, float] = {}
        boosted: list[RankedHit] = []

        for hit in hits:
            document = documents.get(hit.document_id)
            if document is None:
                continue
            if hit.document_id not in factors:
                factors[hit.document_id] = self.factor(document, now)
            boosted.append(hit.model_copy(update={"score": hit.score * factors[hit.document_id]}))

        boosted.sort(key=lambda hit: hit.score, reverse=True)
        return boosted[:top_k]
