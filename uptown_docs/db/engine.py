"""PostgreSQL access for the document service.

SQLAlchemy 2.0 async over asyncpg. The schema belongs to the sales API;
this service only reads deals, units, pricing, users and reservation forms.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from uptown_docs.config import settings

logger = logging.getLogger(__name__)

# ── Engine and sessions ──────────────────────────────────────────────

engine: AsyncEngine = create_async_engine(
    settings.db.database_url,
    echo=settings.log_level == "DEBUG",
    pool_size=settings.db.pool_size,
    max_overflow=settings.db.pool_size * 2,
    pool_pre_ping=True,
    pool_recycle=3600,
)

async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per document request, never committed."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ── Lifespan ─────────────────────────────────────────────────────────


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Check connectivity on startup; dispose the pool on shutdown."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database reachable (pool_size=%d)", settings.db.pool_size)
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database pool disposed")
