"""Fixed-window rate limiting backed by Redis.

Rules (per client IP, per endpoint group):
  - auth:          20 req / 15 min  (anti brute-force)
  - transactions: 100 req / hour
  - analytics:     50 req / hour
  - admin:        200 req / hour
  - general:     1000 req / hour   (everything else under /api)

Key pattern: "ratelimit:{client_ip}:{group}". One MULTI/EXEC per request:
SET NX EX opens the window with its expiry, INCR counts (and keeps the TTL),
TTL reports what is left for Retry-After. Redis failures fail open: the
request is let through and the failure is logged.
"""

import logging
from dataclasses import dataclass

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.settings import settings
from src.ft_common.errors import RateLimitError
from src.ft_common.redis_client import get_redis
from src.ft_common.response import error_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateRule:
    group: str
    limit: int
    window_seconds: int


_RULES: tuple[tuple[str, RateRule], ...] = (
    ("/api/v1/auth", RateRule("auth", 20, 15 * 60)),
    ("/api/v1/transactions", RateRule("transactions", 100, 60 * 60)),
    ("/api/v1/analytics", RateRule("analytics", 50, 60 * 60)),
    ("/api/v1/admin", RateRule("admin", 200, 60 * 60)),
)
_GENERAL = RateRule("general", 1000, 60 * 60)


def rule_for_path(path: str) -> RateRule | None:
    """Most specific rule for ``path``; None for paths outside the API (health, docs)."""
    for prefix, rule in _RULES:
        if path.startswith(prefix):
            return rule
    if path.startswith("/api/"):
        return _GENERAL
    return None


def client_ip(request: Request) -> str:
    """Peer address, or the first X-Forwarded-For hop when TRUST_FORWARDED_FOR is set."""
    if settings.TRUST_FORWARDED_FOR:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def hit(key: str, window_seconds: int) -> tuple[int, int]:
    """Count one request in the window at ``key``. Returns (count, seconds left)."""
    redis = await get_redis()
    async with redis.pipeline(transaction=True) as pipe:
        pipe.set(key, 0, ex=window_seconds, nx=True)
        pipe.incr(key)
        pipe.ttl(key)
        _, count, ttl = await pipe.execute()
    return int(count), int(ttl) if ttl and ttl > 0 else window_seconds


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rule = rule_for_path(request.url.path)
        if rule is None:
            return await call_next(request)

        ip = client_ip(request)
        try:
            count, remaining = await hit(f"ratelimit:{ip}:{rule.group}", rule.window_seconds)
        except (RedisError, OSError) as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > rule.limit:
            logger.info(
                "Rate limit exceeded for %s group=%s (%d/%d)",
                ip, rule.group, count, rule.limit,
            )
            err = RateLimitError(retry_after=remaining)
            return JSONResponse(
                status_code=err.http_status,
                content=error_payload(request, err),
                headers={"Retry-After": str(err.retry_after)},
            )
        return await call_next(request)
