"""
Document ORM model.

Represents one version of an uploaded legal document. Versions form a
forest through parent_document_id; each update inserts a new row whose
parent is the previous version.

Dependencies: sqlalchemy, lawsearch.boundary.db.base
System role: Document persistence for ingestion and ranking
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lawsearch.boundary.db.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from lawsearch.boundary.db.models.search_weight_model import SearchWeightModel


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Display title (255 char limit)
        jurisdiction: Jurisdiction label used for filtering and boosts
        content_url: Blob store URL of the raw document bytes
        version: Version label ("1.0", "1.1", ...)
        parent_document_id: Previous version, None for a root document
        created_by: Uploading user
        created_at: Upload timestamp (UTC)
        last_modified: Timestamp of the update that superseded this version
        last_modified_by: User who made that update

    Relationships:
        search_weight: Optional ranking metadata (eager-loaded for boosting)
    """

    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    jurisdiction: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    content_url: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Blob store URL for raw document",
    )

    version: Mapped[str] = mapped_column(String(32), nullable=False, default="1.0")

    parent_document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_by: Mapped[str] = mapped_column(String(255), nullable=False)

    last_modified: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    last_modified_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    search_weight: Mapped["SearchWeightModel | None"] = relationship(
        "SearchWeightModel",
        back_populates="document",
        uselist=False,
        lazy="selectin",
    )
