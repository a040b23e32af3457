"""
Chunk ORM model.

Stores segmented page text with its embedding. Chunk IDs are assigned by
the segmenter, so rows are replaced wholesale on reprocessing.

Dependencies: sqlalchemy, lawsearch.boundary.db.base
System role: Chunk persistence for ranking resolution and recommendations
"""

import uuid

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lawsearch.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    Attributes:
        id: Deterministic chunk UUID
        document_id: Owning document (cascade delete)
        page: 1-based page number
        text: Chunk text, equal to page_text[start_offset:end_offset]
        start_offset: Start character offset within the page
        end_offset: Exclusive end character offset within the page
        embedding: Embedding vector as a JSON float list
    """

    __tablename__ = "chunks"
    __table_args__ = (
        CheckConstraint("page >= 1", name="ck_chunks_page_positive"),
        CheckConstraint("start_offset >= 0 AND start_offset < end_offset", name="ck_chunks_offsets"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    page: Mapped[int] = mapped_column(Integer, nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False)

    start_offset: Mapped[int] = mapped_column(Integer, nullable=False)

    end_offset: Mapped[int] = mapped_column(Integer, nullable=False)

    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False, default=list)
