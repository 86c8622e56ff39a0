"""Read-through cache service.

Used for data that is read on every page of the HR and candidate UIs but
changes rarely, such as the question bank's category list.

Two invalidation mechanisms work together:

  1. TTL: every entry expires after CATEGORIES_CACHE_TTL seconds (or the
     caller's ttl), so a missed invalidation heals itself.
  2. Explicit delete: writers that change the underlying data delete the
     affected key right after the write.

Redis backs the cache when REDIS_URL is set so every API instance shares
one view; otherwise a per-process dict is used.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from app.core.metrics import CACHE_OPERATIONS
from app.db.redis import redis_pool


@runtime_checkable
class CacheService(Protocol):
    async def get(self, key: str) -> str | None:
        """Fetch a cached value.  Returns None on cache miss."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value with a TTL (time to live)."""
        ...

    async def delete(self, key: str) -> None:
        """Explicitly invalidate a cached entry."""
        ...

    async def delete_pattern(self, pattern: str) -> None:
        """Delete all keys matching a glob pattern (e.g., 'question-bank:*')."""
        ...


class InMemoryCacheService:
    """In-memory cache for dev and tests; no TTL enforcement.

    The autouse fixture in conftest.py clears the store between tests.
    """

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        value = self._store.get(key)
        CACHE_OPERATIONS.labels(operation="miss" if value is None else "hit").inc()
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._store[key] = value

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def delete_pattern(self, pattern: str) -> None:
        prefix = pattern.rstrip("*")
        for k in [k for k in self._store if k.startswith(prefix)]:
            del self._store[k]

    def clear(self) -> None:
        self._store.clear()


class RedisCacheService:
    """Redis-backed cache, shared across all API instances."""

    _PREFIX = "cache:"

    def __init__(self, redis_client) -> None:
        self._redis = redis_client

    async def get(self, key: str) -> str | None:
        value = await self._redis.get(f"{self._PREFIX}{key}")
        CACHE_OPERATIONS.labels(operation="miss" if value is None else "hit").inc()
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._redis.setex(f"{self._PREFIX}{key}", ttl_seconds, value)

    async def delete(self, key: str) -> None:
        await self._redis.delete(f"{self._PREFIX}{key}")

    async def delete_pattern(self, pattern: str) -> None:
        # SCAN, not KEYS: KEYS blocks the server for the whole keyspace.
        cursor = 0
        while True:
            cursor, keys = await self._redis.scan(
                cursor, match=f"{self._PREFIX}{pattern}", count=100
            )
            if keys:
                await self._redis.delete(*keys)
            if cursor == 0:
                break


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

if redis_pool is not None:
    cache_service: CacheService = RedisCacheService(redis_pool)
else:
    cache_service = InMemoryCacheService()
