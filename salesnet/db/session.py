"""
Async SQLAlchemy database session configuration.

Two databases are involved:
- the local store (documents + sync ledger), always present
- the remote mirror (relational entity rows), optional
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from salesnet.config import settings

logger = logging.getLogger(__name__)


def _engine_for(url: str) -> AsyncEngine:
    connect_args = {}
    if "+asyncpg" in url:
        # Required for Supabase Transaction Pooler
        connect_args["statement_cache_size"] = 0
    return create_async_engine(
        url,
        poolclass=NullPool,
        echo=False,
        connect_args=connect_args,
    )


# Local store engine
engine = _engine_for(settings.database_url)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

_remote_sessionmaker: Optional[async_sessionmaker] = None


def get_remote_sessionmaker() -> Optional[async_sessionmaker]:
    """
    Session factory for the remote mirror.

    Returns None when no remote database is configured (offline mode).
    """
    global _remote_sessionmaker
    if not settings.remote_database_url:
        return None
    if _remote_sessionmaker is None:
        logger.info("Creating remote mirror engine")
        _remote_sessionmaker = async_sessionmaker(
            bind=_engine_for(settings.remote_database_url),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _remote_sessionmaker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for local store sessions.
    Usage:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for local store sessions.
    Use in non-FastAPI contexts (scheduler jobs, startup, etc).
    Usage:
        async with get_db_context() as db:
            result = await db.execute(...)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
