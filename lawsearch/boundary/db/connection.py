"""
Database connection management.

Provides async SQLAlchemy engine and session factory. Services take a
session factory and open one session per unit of work.

Dependencies: sqlalchemy, asyncpg, lawsearch.configs
System role: Database connection lifecycle management
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from lawsearch.boundary.db.base import Base
from lawsearch.configs import get_settings


def get_async_engine() -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    db_config = get_settings().database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    autoflush=False and expire_on_commit=False keep ORM instances usable
    after commit, which the ingestion pipeline relies on.

    Args:
        engine: Engine to bind; a new pooled engine when omitted

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session that is closed when the consumer finishes.

    Yields:
        AsyncSession: Async SQLAlchemy database session
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def create_tables(engine: AsyncEngine) -> None:
    """Create all registered tables if they do not exist."""
    # Import registers the models on Base.metadata
    from lawsearch.boundary.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
