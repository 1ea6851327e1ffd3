"""Shared test fixtures.

Environment defaults are set before ``src`` is imported: settings are read
once at import time.
"""

# ruff: noqa: E402  -- env defaults must be set before importing src

import fnmatch
import os
from collections.abc import AsyncIterator
from typing import Any

os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-only")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CACHE_ENABLED", "false")
if os.environ.get("INTEGRATION_DATABASE_URL"):
    os.environ["DATABASE_URL"] = os.environ["INTEGRATION_DATABASE_URL"]

import pytest
from httpx import ASGITransport, AsyncClient

from src.ft_common.cache import CacheAside
from src.ft_common.errors import CacheUnavailableError
from src.main import app


class InMemoryCacheStore:
    """CacheStoreProtocol double. ``fail=True`` makes every call raise."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise CacheUnavailableError("store down")

    async def get(self, key: str) -> Any | None:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._check()
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self._check()
        self.data.pop(key, None)

    async def delete_pattern(self, pattern: str) -> int:
        self._check()
        doomed = [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]
        for k in doomed:
            del self.data[k]
        return len(doomed)

    async def ping(self) -> bool:
        self._check()
        return True


@pytest.fixture
def store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def cache(store: InMemoryCacheStore) -> CacheAside:
    return CacheAside(store)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
