"""
Database connection management.

Builds the async SQLAlchemy engine and session factory from explicit
settings. Both are created once at process start and passed to the
components that need them.

Dependencies: sqlalchemy, rag_backend.configs
System role: Database connection lifecycle management
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rag_backend.boundary.db.base import Base
from rag_backend.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def create_engine_from_settings(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use. SQLite URLs skip the
    pool sizing arguments, which its pool class does not accept.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async engine
    """
    url = db_config.async_database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory with explicit transaction control.

    Returns:
        async_sessionmaker: Factory producing sessions that do not expire on commit

    Usage:
        SessionFactory = create_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all registered tables that do not exist yet."""
    # Model modules must be imported so their tables register on Base.metadata
    from rag_backend.boundary.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Tables ensured: {sorted(Base.metadata.tables)}")


async def ping(session: AsyncSession) -> None:
    """Run a trivial query; raises if the database is unreachable."""
    await session.execute(text("SELECT 1"))
