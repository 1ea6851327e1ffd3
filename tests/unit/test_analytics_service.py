"""Unit tests for AnalyticsApplicationService (mock repository, in-memory cache)."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.ft_analytics.application.service import AnalyticsApplicationService
from src.ft_common.cache import (
    CacheAside,
    category_breakdown_key,
    monthly_trend_key,
    summary_key,
)
from src.ft_common.enums import UserRole
from src.ft_gateway.auth.scope import Caller
from src.ft_transaction.domain.models import Transaction

USER = Caller("u1", UserRole.USER)
READ_ONLY = Caller("r1", UserRole.READ_ONLY)


def _tx(amount: str, tx_type: str = "expense", on: date = date(2024, 3, 10)) -> Transaction:
    return Transaction(
        id=1,
        user_id="u1",
        category_id=1,
        type=tx_type,
        amount=Decimal(amount),
        description="t",
        date=on,
        category_name="food",
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def repo() -> MagicMock:
    mock = MagicMock()
    mock.find = AsyncMock(return_value=[_tx("100.00", "income"), _tx("25.00")])
    return mock


@pytest.fixture
def svc(repo, cache: CacheAside) -> AnalyticsApplicationService:
    return AnalyticsApplicationService(repo=repo, cache=cache)


class TestSummary:
    async def test_miss_then_hit_is_identical(self, svc, repo, db, store) -> None:
        first = await svc.get_summary(db, USER)
        second = await svc.get_summary(db, USER)

        assert first == second
        assert repo.find.await_count == 1
        assert first["total_income"] == "100.00"
        assert first["net"] == "75.00"
        assert first["scope"] == "own"
        assert store.ttls[summary_key("u1", "own")] == 900

    async def test_user_query_is_owner_filtered(self, svc, repo, db) -> None:
        await svc.get_summary(db, USER)
        assert repo.find.await_args.args[1].owner_id == "u1"

    async def test_read_only_recomputes_every_time(self, svc, repo, db) -> None:
        await svc.get_summary(db, READ_ONLY)
        await svc.get_summary(db, READ_ONLY)

        assert repo.find.await_count == 2
        assert repo.find.await_args.args[1].owner_id is None

    async def test_cache_down_still_answers(self, svc, repo, db, store) -> None:
        store.fail = True
        data = await svc.get_summary(db, USER)
        assert data["total_transactions"] == 2


class TestMonthly:
    async def test_year_filter_and_key(self, svc, repo, db, store) -> None:
        data = await svc.get_monthly_trend(db, USER, 2024)

        filters = repo.find.await_args.args[1]
        assert (filters.start_date, filters.end_date) == (date(2024, 1, 1), date(2024, 12, 31))
        assert len(data["months"]) == 12
        assert data["months"][2]["expense"] == "25.00"
        assert monthly_trend_key("u1", "own", 2024) in store.data

    async def test_different_year_is_a_different_entry(self, svc, repo, db) -> None:
        await svc.get_monthly_trend(db, USER, 2024)
        await svc.get_monthly_trend(db, USER, 2025)
        assert repo.find.await_count == 2


class TestYearly:
    async def test_savings_rate(self, svc, db) -> None:
        data = await svc.get_yearly_overview(db, USER, 2024)
        assert data["savings_rate"] == "75.00"
        assert data["transaction_count"] == 2


class TestCategoryBreakdown:
    async def test_breakdown_payload(self, svc, repo, db, store) -> None:
        repo.find = AsyncMock(return_value=[_tx("10.00"), _tx("20.00"), _tx("5.00")])

        data = await svc.get_category_breakdown(db, USER, 2024, 3, "expense")

        assert data["breakdown"] == {"food": "35.00"}
        assert data["total"] == "35.00"
        assert data["month_name"] == "March"
        filters = repo.find.await_args.args[1]
        assert filters.type == "expense"
        assert filters.end_date == date(2024, 3, 31)
        assert category_breakdown_key("u1", "own", 2024, 3, "expense") in store.data
