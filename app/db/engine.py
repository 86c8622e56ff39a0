"""Async SQLAlchemy engine and session factory.

When DATABASE_URL is configured, provides:
- async engine for PostgreSQL via asyncpg
- async session factory for request-scoped sessions
- lifespan hook for startup/shutdown

When DATABASE_URL is None, engine and session factory are None and the
app wires in-memory repositories instead (see app/api/dependencies.py).

ONE SESSION PER REQUEST
-----------------------
A grading request touches three tables: it reads the assessment
definition, reads the selected questions from the bank and inserts the
graded submission.  get_async_session() opens one AsyncSession for the
whole request and hands the same session to every Pg*Repo the request
builds, so those reads and the insert share a single transaction.  The
transaction commits after the handler returns and rolls back if it
raises, so a submission is never stored half-graded and an idempotency
key is never recorded without its submission.

THE CONNECTION POOL
-------------------
Opening a PostgreSQL connection costs a TCP handshake plus
authentication.  The engine keeps up to pool_size connections open and
lends them to sessions; under a burst it opens up to max_overflow extra
connections and closes them again once the burst passes.
expire_on_commit=False keeps loaded rows readable after commit instead
of reloading every attribute from the database on next access.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import SETTINGS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


# --- Engine and session factory (None when no DATABASE_URL) ---

if SETTINGS.database_url:
    engine = create_async_engine(
        SETTINGS.database_url,
        echo=SETTINGS.is_dev,  # log SQL in dev only
        pool_size=5,
        max_overflow=10,
    )
    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
else:
    engine = None
    async_session_factory = None


async def get_async_session() -> AsyncGenerator[AsyncSession | None, None]:
    """FastAPI dependency that yields a request-scoped async session.

    Yields None when no database is configured so callers fall back to the
    in-memory repositories.  Commits on success, rolls back on exception.
    """
    if async_session_factory is None:
        yield None
        return
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def lifespan_db():
    """Startup/shutdown hook for the database engine.

    Entered from the FastAPI lifespan in app/main.py.  Disposing the engine
    on shutdown closes every pooled connection.
    """
    if engine is None:
        logger.info("No DATABASE_URL configured, using in-memory repositories")
        yield
        return

    logger.info("Database engine created: %s", engine.url)
    yield
    await engine.dispose()
    logger.info("Database engine disposed")
