"""
Health checks for the database and external stores.

Dependencies: sqlalchemy, lawsearch.core.interfaces, pydantic
System role: Reachability probes for operators
"""

import asyncio
import logging
from typing import Awaitable, Callable

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lawsearch.core.interfaces import BlobStore, KeywordIndex, VectorIndex

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health of one component."""

    status: str
    message: str


class HealthReport(BaseModel):
    """Aggregated health of every component."""

    status: str
    components: dict[str, HealthResponse]


class HealthService:
    """Probe each backend and aggregate the results."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        blob_store: BlobStore,
        vector_index: VectorIndex,
        keyword_index: KeywordIndex,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._session_factory = session_factory
        self._blob_store = blob_store
        self._vector_index = vector_index
        self._keyword_index = keyword_index
        self.timeout_seconds = timeout_seconds

    async def check_db(self) -> HealthResponse:
        """Database health check."""
        return await self._probe("database", self._ping_db, "Database connection OK")

    async def check_blob_store(self) -> HealthResponse:
        return await self._probe("blob_store", self._blob_store.health_check, "Blob store accessible")

    async def check_vector_store(self) -> HealthResponse:
        return await self._probe("vector_store", self._vector_index.health_check, "Vector store accessible")

    async def check_keyword_index(self) -> HealthResponse:
        return await self._probe("keyword_index", self._keyword_index.health_check, "Keyword index accessible")

    async def check_all(self) -> HealthReport:
        """
        Run every probe concurrently.

        Returns:
            HealthReport: "healthy" only when every component is healthy
        """
        names = ["database", "blob_store", "vector_store", "keyword_index"]
        results = await asyncio.gather(
            self.check_db(),
            self.check_blob_store(),
            self.check_vector_store(),
            self.check_keyword_index(),
        )
        components = dict(zip(names, results))
        healthy = all(component.status == "healthy" for component in components.values())
        return HealthReport(status="healthy" if healthy else "unhealthy", components=components)

    async def _ping_db(self) -> bool:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True

    async def _probe(
        self,
        component: str,
        check: Callable[[], Awaitable[bool]],
        ok_message: str,
    ) -> HealthResponse:
        try:
            healthy = await asyncio.wait_for(check(), self.timeout_seconds)
        except Exception as e:
            logger.warning(f"{__name__}:_probe - {component} check failed: {e}")
            return HealthResponse(status="unhealthy", message=f"{type(e).__name__}: {e}")

        if not healthy:
            return HealthResponse(status="unhealthy", message=f"{component} unreachable")
        return HealthResponse(status="healthy", message=ok_message)
