"""Async SQLAlchemy database engine and session management.

Provides the async database layer used by every request:
- Connection pooling (configurable pool_size/max_overflow)
- FastAPI dependency injection via get_session()
- Automatic session lifecycle (commit on success, rollback on error)
- PostgreSQL (asyncpg) by default, SQLite (aiosqlite) for local runs and tests

Each application owns its engine and session factory on ``app.state``; both
are built from the settings the application was created with.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Engine & session factory
# ---------------------------------------------------------------------------

def build_engine(config: Settings) -> AsyncEngine:
    """Create an async engine for the configured database URL.

    SQLite drivers do not take queue-pool sizing arguments, so those are only
    passed for server databases.
    """
    options: dict = {"echo": config.echo_sql}
    if not config.is_sqlite:
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_pre_ping=True,
        )
    return create_async_engine(config.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session with automatic commit/rollback.

    Usage in FastAPI routes::

        @router.get("/items")
        async def list_items(session: AsyncSession = Depends(get_session)):
            result = await session.execute(select(Item))
            return result.scalars().all()
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ---------------------------------------------------------------------------
# Lifecycle hooks
# ---------------------------------------------------------------------------

async def init_db(bind: AsyncEngine) -> None:
    """Create tables for every imported model (dev/test only, not a migration tool)."""
    from core.models.base import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def close_db(bind: AsyncEngine) -> None:
    """Dispose of the connection pool on shutdown."""
    await bind.dispose()
