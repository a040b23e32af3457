"""
Chunk CRUD operations.

Bulk insert, per-document listing and per-document deletion for
ChunkModel.

Dependencies: sqlalchemy, lawsearch.boundary.db.models
System role: Chunk persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.boundary.db.CRUD.base_crud import BaseCRUD
from lawsearch.boundary.db.models.chunk_model import ChunkModel
from lawsearch.models.chunk import Chunk


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def add_many(self, session: AsyncSession, chunks: Sequence[Chunk]) -> int:
        """
        Insert chunks produced by the segmenter.

        Args:
            session: Async database session
            chunks: Domain chunks with embeddings

        Returns:
            int: Number of rows added
        """
        session.add_all(
            ChunkModel(
                id=chunk.id,
                document_id=chunk.document_id,
                page=chunk.page,
                text=chunk.text,
                start_offset=chunk.start_offset,
                end_offset=chunk.end_offset,
                embedding=list(chunk.embedding),
            )
            for chunk in chunks
        )
        await session.flush()
        return len(chunks)

    async def get_by_document_id(self, session: AsyncSession, document_id: UUID) -> Sequence[ChunkModel]:
        """Retrieve a document's chunks in page and offset order."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.page, ChunkModel.start_offset)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_page(self, session: AsyncSession, document_id: UUID, page: int) -> Sequence[ChunkModel]:
        """Retrieve the chunks of one page in offset order."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id, ChunkModel.page == page)
            .order_by(ChunkModel.start_offset)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document_id(self, session: AsyncSession, document_id: UUID) -> int:
        stmt = select(func.count()).select_from(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def delete_by_document_id(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Delete all chunks of a document.

        Returns:
            int: Number of rows deleted
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


chunk_crud = ChunkCRUD()
