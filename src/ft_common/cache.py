"""Cache-aside layer over a best-effort key/value store.

The store is injected (``CacheStoreProtocol``) so services can run against
Redis in production and an in-memory double in tests. A store signals any
backend failure with ``CacheUnavailableError``; ``CacheAside`` catches it at
this boundary and degrades to direct computation. Nothing here ever raises
to the caller because the cache is down.

Key scheme (every parameter that affects a result is part of the key):
  analytics:{user_id}:{scope}:summary
  analytics:{user_id}:{scope}:monthly:{year}
  analytics:{user_id}:{scope}:yearly:{year}
  analytics:{user_id}:{scope}:categories:{year}:{month}:{type}
  categories:all
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

from redis.exceptions import RedisError

from config.settings import settings
from src.ft_common.errors import CacheUnavailableError
from src.ft_common.redis_client import get_redis

logger = logging.getLogger(__name__)

T = TypeVar("T")

CATEGORIES_ALL_KEY = "categories:all"


# ---------------------------------------------------------------------------
# Key construction
# ---------------------------------------------------------------------------


def analytics_prefix(user_id: str) -> str:
    return f"analytics:{user_id}"


def summary_key(user_id: str, scope: str) -> str:
    return f"{analytics_prefix(user_id)}:{scope}:summary"


def monthly_trend_key(user_id: str, scope: str, year: int) -> str:
    return f"{analytics_prefix(user_id)}:{scope}:monthly:{year}"


def yearly_overview_key(user_id: str, scope: str, year: int) -> str:
    return f"{analytics_prefix(user_id)}:{scope}:yearly:{year}"


def category_breakdown_key(
    user_id: str, scope: str, year: int, month: int, tx_type: str
) -> str:
    return f"{analytics_prefix(user_id)}:{scope}:categories:{year}:{month}:{tx_type}"


def user_analytics_patterns(user_id: str) -> tuple[str, str]:
    """Exact key plus children; ``analytics:4*`` alone would also hit user 42."""
    prefix = analytics_prefix(user_id)
    return prefix, f"{prefix}:*"


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


class CacheStoreProtocol(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def delete_pattern(self, pattern: str) -> int: ...

    async def ping(self) -> bool: ...


class RedisCacheStore:
    """JSON values in Redis. Every Redis/connection failure -> CacheUnavailableError."""

    def __init__(
        self, client_factory: Callable[[], Awaitable[Any]] = get_redis
    ) -> None:
        self._client_factory = client_factory

    async def get(self, key: str) -> Any | None:
        try:
            client = await self._client_factory()
            raw = await client.get(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"get {key}: {exc}") from exc
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        payload = json.dumps(value)
        try:
            client = await self._client_factory()
            await client.set(key, payload, ex=ttl_seconds)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"set {key}: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            client = await self._client_factory()
            await client.delete(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"delete {key}: {exc}") from exc

    async def delete_pattern(self, pattern: str) -> int:
        """SCAN + DEL in batches (KEYS would block the server on large keyspaces)."""
        deleted = 0
        try:
            client = await self._client_factory()
            batch: list[str] = []
            async for key in client.scan_iter(match=pattern, count=500):
                batch.append(key)
                if len(batch) >= 500:
                    deleted += await client.delete(*batch)
                    batch = []
            if batch:
                deleted += await client.delete(*batch)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"delete_pattern {pattern}: {exc}") from exc
        return deleted

    async def ping(self) -> bool:
        try:
            client = await self._client_factory()
            return bool(await client.ping())
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"ping: {exc}") from exc


class NullCacheStore:
    """Used when CACHE_ENABLED=False: always a miss, writes are no-ops."""

    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def delete_pattern(self, pattern: str) -> int:
        return 0

    async def ping(self) -> bool:
        return False


# ---------------------------------------------------------------------------
# Cache-aside
# ---------------------------------------------------------------------------


class CacheAside:
    """get_or_compute + invalidation rules on top of an injected store.

    Cached values must be JSON-compatible so a hit returns exactly what the
    miss returned.
    """

    def __init__(self, store: CacheStoreProtocol) -> None:
        self._store = store

    async def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], Awaitable[T]],
        ttl_seconds: int,
    ) -> T:
        try:
            cached = await self._store.get(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache get failed, computing directly: %s", exc)
            cached = None
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached  # type: ignore[no-any-return]

        logger.debug("Cache miss: %s", key)
        value = await compute_fn()
        try:
            await self._store.set(key, value, ttl_seconds)
        except CacheUnavailableError as exc:
            logger.warning("Cache set failed for %s: %s", key, exc)
        return value

    async def invalidate(self, key: str) -> bool:
        try:
            await self._store.delete(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return False
        return True

    async def invalidate_patterns(self, *patterns: str) -> bool:
        ok = True
        for pattern in patterns:
            try:
                await self._store.delete_pattern(pattern)
            except CacheUnavailableError as exc:
                logger.warning("Cache pattern delete failed for %s: %s", pattern, exc)
                ok = False
        return ok

    async def invalidate_user_analytics(self, user_id: str) -> bool:
        """Drop every analytics entry keyed to ``user_id``."""
        return await self.invalidate_patterns(*user_analytics_patterns(user_id))

    async def invalidate_categories(self) -> bool:
        return await self.invalidate(CATEGORIES_ALL_KEY)

    async def flush_all(self) -> bool:
        return await self.invalidate_patterns("analytics:*", "categories:*")

    async def healthy(self) -> bool:
        try:
            return await self._store.ping()
        except CacheUnavailableError:
            return False


_default_cache: CacheAside | None = None


def get_cache() -> CacheAside:
    """Process-wide CacheAside (Redis, or a null store when caching is disabled)."""
    global _default_cache  # noqa: PLW0603
    if _default_cache is None:
        store: CacheStoreProtocol = (
            RedisCacheStore() if settings.CACHE_ENABLED else NullCacheStore()
        )
        _default_cache = CacheAside(store)
    return _default_cache
