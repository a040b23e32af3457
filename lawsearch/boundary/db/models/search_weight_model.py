"""
Search weight ORM model.

Per-document ranking metadata maintained by ranking administration.

Dependencies: sqlalchemy, lawsearch.boundary.db.base
System role: Boost inputs for the hybrid ranker
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Float, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lawsearch.boundary.db.base import Base, UUIDMixin

if TYPE_CHECKING:
    from lawsearch.boundary.db.models.document_model import DocumentModel


class SearchWeightModel(Base, UUIDMixin):
    """
    Search weight ORM model.

    All scores are bounded to [0, 10].

    Attributes:
        document_id: Owning document (one weight row per document)
        jurisdiction_score: Jurisdiction relevance boost input
        recency_score: Recency boost input
        manual_boost: Editorial boost input
    """

    __tablename__ = "search_weights"
    __table_args__ = (
        CheckConstraint("jurisdiction_score BETWEEN 0 AND 10", name="ck_search_weights_jurisdiction"),
        CheckConstraint("recency_score BETWEEN 0 AND 10", name="ck_search_weights_recency"),
        CheckConstraint("manual_boost BETWEEN 0 AND 10", name="ck_search_weights_manual"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    jurisdiction_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    recency_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    manual_boost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Relationships
    document: Mapped["DocumentModel"] = relationship("DocumentModel", back_populates="search_weight")
