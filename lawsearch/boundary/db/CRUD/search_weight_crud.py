"""
Search weight CRUD operations.

Dependencies: sqlalchemy, lawsearch.boundary.db.models
System role: Ranking metadata persistence
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lawsearch.boundary.db.CRUD.base_crud import BaseCRUD
from lawsearch.boundary.db.models.search_weight_model import SearchWeightModel
from lawsearch.core.exceptions import ValidationError

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class SearchWeightCRUD(BaseCRUD[SearchWeightModel]):
    """CRUD operations for SearchWeightModel."""

    def __init__(self) -> None:
        """Initialize SearchWeightCRUD with SearchWeightModel."""
        super().__init__(SearchWeightModel)

    async def get_by_document_id(self, session: AsyncSession, document_id: UUID) -> SearchWeightModel | None:
        stmt = select(SearchWeightModel).where(SearchWeightModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        session: AsyncSession,
        document_id: UUID,
        jurisdiction_score: float = 0.0,
        recency_score: float = 0.0,
        manual_boost: float = 0.0,
    ) -> SearchWeightModel:
        """
        Create or replace the ranking metadata of a document.

        Args:
            session: Async database session
            document_id: Document UUID
            jurisdiction_score: Jurisdiction boost input in [0, 10]
            recency_score: Recency boost input in [0, 10]
            manual_boost: Editorial boost input in [0, 10]

        Returns:
            SearchWeightModel: The stored weight row

        Raises:
            ValidationError: When a score is outside [0, 10]
        """
        scores = {
            "jurisdiction_score": jurisdiction_score,
            "recency_score": recency_score,
            "manual_boost": manual_boost,
        }
        for field, value in scores.items():
            if not SCORE_MIN <= value <= SCORE_MAX:
                raise ValidationError(f"{field} must be between 0 and 10, got {value}", field=field)

        existing = await self.get_by_document_id(session, document_id)
        if existing is None:
            return await self.create(session, document_id=document_id, **scores)

        for field, value in scores.items():
            setattr(existing, field, value)
        await session.flush()
        return existing

    async def delete_by_document_id(self, session: AsyncSession, document_id: UUID) -> bool:
        stmt = delete(SearchWeightModel).where(SearchWeightModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount > 0


search_weight_crud = SearchWeightCRUD()
