"""End-to-end flows against a migrated PostgreSQL.

Run: INTEGRATION_DATABASE_URL=postgresql+asyncpg://... pytest tests/integration -v
Pre-condition: alembic upgrade head (seeds the default categories)
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")

YEAR = 2024


async def _category_id(client: AsyncClient, headers: dict[str, str], name: str) -> int:
    resp = await client.get("/api/v1/categories", headers=headers)
    assert resp.status_code == 200
    return next(c["id"] for c in resp.json()["data"]["categories"] if c["name"] == name)


async def _create(
    client: AsyncClient, headers: dict[str, str], **fields: object
) -> dict:
    payload = {"description": "it", "date": f"{YEAR}-03-05", **fields}
    resp = await client.post("/api/v1/transactions", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestAuthFlow:
    async def test_register_login_me(self, client: AsyncClient, make_account) -> None:
        account = await make_account()
        resp = await client.get("/api/v1/auth/me", headers=account.headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["role"] == "user"

    async def test_duplicate_email(self, client: AsyncClient, make_account) -> None:
        account = await make_account()
        resp = await client.post(
            "/api/v1/auth/register",
            json={"email": account.email.upper(), "password": "TestPass123"},
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 1001


class TestTransactionFlow:
    async def test_crud_and_analytics(self, client: AsyncClient, make_account) -> None:
        account = await make_account()
        headers = account.headers
        food = await _category_id(client, headers, "food")
        salary = await _category_id(client, headers, "salary")

        await _create(client, headers, type="income", amount="100.00", category_id=salary)
        await _create(client, headers, type="expense", amount="10.00", category_id=food)
        tx = await _create(client, headers, type="expense", amount="25.00", category_id=food)
        assert tx["category_name"] == "food"

        resp = await client.get(
            "/api/v1/analytics/categories",
            params={"year": YEAR, "month": 3},
            headers=headers,
        )
        assert resp.json()["data"]["breakdown"] == {"food": "35.00"}

        resp = await client.put(
            f"/api/v1/transactions/{tx['id']}", json={"amount": "15.00"}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["amount"] == "15.00"

        summary = (await client.get("/api/v1/analytics/summary", headers=headers)).json()
        assert summary["data"]["total_transactions"] == 3
        assert summary["data"]["net"] == "75.00"

        resp = await client.delete(f"/api/v1/transactions/{tx['id']}", headers=headers)
        assert resp.status_code == 200
        resp = await client.get(f"/api/v1/transactions/{tx['id']}", headers=headers)
        assert resp.status_code == 404

    async def test_other_users_rows_are_invisible(
        self, client: AsyncClient, make_account
    ) -> None:
        owner = await make_account()
        stranger = await make_account()
        food = await _category_id(client, owner.headers, "food")
        tx = await _create(client, owner.headers, type="expense", amount="5.00", category_id=food)

        resp = await client.get(f"/api/v1/transactions/{tx['id']}", headers=stranger.headers)
        assert resp.status_code == 404
        resp = await client.delete(f"/api/v1/transactions/{tx['id']}", headers=stranger.headers)
        assert resp.status_code == 404

    async def test_unknown_category_rejected(self, client: AsyncClient, make_account) -> None:
        account = await make_account()
        resp = await client.post(
            "/api/v1/transactions",
            json={
                "type": "expense",
                "amount": "5.00",
                "category_id": 999999,
                "description": "x",
                "date": f"{YEAR}-03-01",
            },
            headers=account.headers,
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 3004


class TestRoles:
    async def test_read_only_sees_everything_but_cannot_write(
        self, client: AsyncClient, make_account
    ) -> None:
        writer = await make_account()
        reader = await make_account("read-only")
        food = await _category_id(client, writer.headers, "food")
        tx = await _create(client, writer.headers, type="expense", amount="7.00", category_id=food)

        resp = await client.get(f"/api/v1/transactions/{tx['id']}", headers=reader.headers)
        assert resp.status_code == 200
        summary = (await client.get("/api/v1/analytics/summary", headers=reader.headers)).json()
        assert summary["data"]["scope"] == "all"

        resp = await client.delete(f"/api/v1/transactions/{tx['id']}", headers=reader.headers)
        assert resp.status_code == 403

    async def test_admin_manages_users(self, client: AsyncClient, make_account) -> None:
        admin = await make_account("admin")
        target = await make_account()

        resp = await client.get("/api/v1/admin/overview", headers=admin.headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["total_users"] >= 2

        resp = await client.put(
            f"/api/v1/admin/users/{target.user_id}",
            json={"role": "read-only"},
            headers=admin.headers,
        )
        assert resp.json()["data"]["role"] == "read-only"

        resp = await client.delete(
            f"/api/v1/admin/users/{admin.user_id}", headers=admin.headers
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 1006

        resp = await client.delete(
            f"/api/v1/admin/users/{target.user_id}", headers=admin.headers
        )
        assert resp.status_code == 200

    async def test_category_admin_only(self, client: AsyncClient, make_account) -> None:
        user = await make_account()
        resp = await client.post(
            "/api/v1/categories",
            json={"name": "pets", "description": "Pet costs", "color": "#123456"},
            headers=user.headers,
        )
        assert resp.status_code == 403
