"""Redis connection management.

This module follows the same pattern as engine.py for PostgreSQL:
when REDIS_URL is configured, we create a real connection pool at
import time; when it's None (local dev, tests), redis_pool is None and
the cache layer falls back to its in-memory implementation, so no
Redis server is needed to run the API or the test suite.

WHAT LIVES IN REDIS?
--------------------
PostgreSQL holds the durable records: the question bank, assessment
definitions and graded submissions.  Redis only holds data that can be
rebuilt from those tables at any moment: the sorted category list the
question bank filters and the HR screens read on every page load.

The key carries a TTL (CATEGORIES_CACHE_TTL, five minutes by default)
and every write to the question bank invalidates it, so a stale list
survives at most one TTL even when an invalidation is missed.
If Redis restarts and loses everything, the next request misses the
cache, reads PostgreSQL and repopulates the key.

CONNECTION POOLING
------------------
Redis processes one command at a time, but the API serves many
requests concurrently through async/await.  A pool lets several
handlers issue commands at once on the Python side: each handler
borrows a connection, sends its GET or SETEX, and hands the connection
back.  Twenty connections comfortably cover a single API process.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from app.core.config import SETTINGS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Conditional Redis client (None when REDIS_URL is not set)
# ---------------------------------------------------------------------------
# Checked once at import time, like the database engine.  Consumers of
# redis_pool (the cache service, the readiness check in health.py) test for
# None and fall back to in-memory behaviour.

if SETTINGS.redis_url:
    redis_pool: aioredis.Redis | None = aioredis.from_url(  # type: ignore[type-arg]
        SETTINGS.redis_url,
        decode_responses=True,  # cached JSON comes back as str
        max_connections=20,  # one API process worth of concurrency
    )
else:
    redis_pool = None


@asynccontextmanager
async def lifespan_redis():
    """Startup/shutdown hook for Redis, mirrors lifespan_db().

    On startup a PING confirms the server is reachable and logs the
    outcome.  On shutdown the pool is closed so no sockets leak between
    test runs or worker restarts.  A failed PING is logged and the app
    still starts: cache reads then miss and fall through to the
    repositories.
    """
    if redis_pool is None:
        logger.info("No REDIS_URL configured, cache uses in-memory fallback")
        yield
        return

    try:
        await redis_pool.ping()  # type: ignore[misc]
        logger.info("Redis connected: %s", SETTINGS.redis_url)
    except Exception:
        logger.exception("Redis connection failed on startup")
        # Keep serving; cache reads will fail over to the data store.
        yield
        return

    yield

    await redis_pool.aclose()
    logger.info("Redis connection pool closed")
