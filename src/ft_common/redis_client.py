"""Shared Redis connection for the cache store and the rate limiter.

Redis is never a correctness dependency: every consumer treats a failed call
as a cache miss or an allowed request. Timeouts are short for the same reason.
"""

import redis.asyncio as aioredis

from config.settings import settings

_client: aioredis.Redis | None = None


def _connect() -> aioredis.Redis:
    timeout = settings.REDIS_SOCKET_TIMEOUT_SECONDS
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=timeout,
        socket_timeout=timeout,
        health_check_interval=30,
    )


async def get_redis() -> aioredis.Redis:
    """Process-wide client; created on first use, connects lazily."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = _connect()
    return _client


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    client, _client = _client, None
    if client is not None:
        await client.aclose()
