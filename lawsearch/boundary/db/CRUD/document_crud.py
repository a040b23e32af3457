"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with queries for jurisdiction filtering and version-tree traversal.

Dependencies: sqlalchemy, lawsearch.boundary.db.models
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.boundary.db.CRUD.base_crud import BaseCRUD
from lawsearch.boundary.db.models.document_model import DocumentModel


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with jurisdiction listing and child lookup for
    version lineage.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """Retrieve all documents, newest first."""
        stmt = select(DocumentModel).order_by(DocumentModel.created_at.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_all_ids(self, session: AsyncSession) -> list[UUID]:
        """Retrieve every document ID, oldest first."""
        stmt = select(DocumentModel.id).order_by(DocumentModel.created_at)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_jurisdiction(
        self,
        session: AsyncSession,
        jurisdiction: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents for one jurisdiction, newest first.

        Args:
            session: Async database session
            jurisdiction: Exact jurisdiction label
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of matching DocumentModels
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.jurisdiction == jurisdiction)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_children(
        self,
        session: AsyncSession,
        parent_document_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve direct successors of a document version.

        Args:
            session: Async database session
            parent_document_id: Parent version UUID

        Returns:
            Sequence of DocumentModels whose parent is the given document
        """
        stmt = select(DocumentModel).where(DocumentModel.parent_document_id == parent_document_id)
        result = await session.execute(stmt)
        return result.scalars().all()


document_crud = DocumentCRUD()
