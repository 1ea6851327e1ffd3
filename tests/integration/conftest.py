"""Integration-test fixtures.

Needs a migrated PostgreSQL (``alembic upgrade head``) reachable through
INTEGRATION_DATABASE_URL; the tests are skipped otherwise. All tests share one
event loop so the module-level async engine pool stays valid.
"""

import os
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.ft_common.database import async_session_factory
from src.main import app

PASSWORD = "TestPass123"


@dataclass
class Account:
    user_id: str
    email: str
    headers: dict[str, str]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("INTEGRATION_DATABASE_URL"):
        return
    skip = pytest.mark.skip(reason="INTEGRATION_DATABASE_URL not set")
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncIterator[AsyncClient]:
    """Session-scoped async HTTP client, keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _set_role(email: str, role: str) -> None:
    async with async_session_factory() as session, session.begin():
        await session.execute(
            text("UPDATE users SET role = :role WHERE email = :email"),
            {"role": role, "email": email},
        )


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def make_account(
    client: AsyncClient,
) -> Callable[[str], Awaitable[Account]]:
    """Factory: register a fresh account with ``role`` and log it in."""

    async def _make(role: str = "user") -> Account:
        email = f"it_{uuid.uuid4().hex[:10]}@example.com"
        resp = await client.post(
            "/api/v1/auth/register", json={"email": email, "password": PASSWORD}
        )
        assert resp.status_code == 201, resp.text
        if role != "user":
            await _set_role(email, role)
        login = await client.post(
            "/api/v1/auth/login", json={"email": email, "password": PASSWORD}
        )
        assert login.status_code == 200, login.text
        data = login.json()["data"]
        return Account(
            user_id=data["user"]["user_id"],
            email=email,
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )

    return _make
