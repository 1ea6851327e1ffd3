"""Unit tests for the pure aggregation engine."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

from src.ft_analytics.domain.aggregation import (
    UNCATEGORIZED,
    category_breakdown,
    category_usage,
    daily_transaction_trends,
    monthly_trend,
    role_histogram,
    savings_rate,
    summarize,
    system_overview,
    top_active_users,
    totals_by_type,
    user_registration_trends,
    yearly_overview,
)
from src.ft_transaction.domain.models import Transaction

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=UTC)


def _tx(
    amount: str,
    tx_type: str = "expense",
    on: date = date(2024, 3, 15),
    user_id: str = "u1",
    category: str | None = "food",
    created_at: datetime | None = None,
) -> Transaction:
    return Transaction(
        id=0,
        user_id=user_id,
        category_id=1,
        type=tx_type,
        amount=Decimal(amount),
        description="t",
        date=on,
        category_name=category,
        created_at=created_at or NOW,
    )


@dataclass
class _User:
    id: str
    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime | None = None


class TestTotalsByType:
    def test_empty_is_all_zero(self) -> None:
        totals = totals_by_type([])
        assert totals.income_sum == Decimal("0.00")
        assert totals.expense_sum == Decimal("0.00")
        assert totals.net == Decimal("0.00")
        assert totals.count == 0

    def test_net_is_income_minus_expense(self) -> None:
        txs = [_tx("1500.00", "income"), _tx("200.10"), _tx("0.05"), _tx("99.99", "income")]
        totals = totals_by_type(txs)
        assert totals.income_sum == Decimal("1599.99")
        assert totals.expense_sum == Decimal("200.15")
        assert totals.net == totals.income_sum - totals.expense_sum
        assert totals.count == 4

    def test_decimal_sums_are_exact(self) -> None:
        totals = totals_by_type([_tx("0.10")] * 3)
        assert totals.expense_sum == Decimal("0.30")

    def test_expense_only_gives_negative_net(self) -> None:
        assert totals_by_type([_tx("12.00")]).net == Decimal("-12.00")


class TestMonthlyTrend:
    def test_always_twelve_buckets(self) -> None:
        buckets = monthly_trend([], 2024)
        assert [b.month for b in buckets] == list(range(1, 13))
        assert buckets[0].label == "Jan"
        assert all(b.net == Decimal("0.00") for b in buckets)

    def test_buckets_by_calendar_date_and_ignores_other_years(self) -> None:
        txs = [
            _tx("100.00", "income", date(2024, 1, 31)),
            _tx("40.00", "expense", date(2024, 1, 1)),
            _tx("10.00", "expense", date(2024, 12, 31)),
            _tx("999.00", "income", date(2023, 12, 31)),
        ]
        buckets = monthly_trend(txs, 2024)
        assert buckets[0].income == Decimal("100.00")
        assert buckets[0].expense == Decimal("40.00")
        assert buckets[0].net == Decimal("60.00")
        assert buckets[11].expense == Decimal("10.00")

    def test_monthly_income_sums_to_yearly_total(self) -> None:
        txs = [
            _tx("10.50", "income", date(2024, m, 1)) for m in range(1, 13)
        ] + [_tx("3.25", "expense", date(2024, 5, 5))]
        months = monthly_trend(txs, 2024)
        overview = yearly_overview(txs, 2024)
        assert sum(b.income for b in months) == overview.total_income
        assert sum(b.expense for b in months) == overview.total_expense


class TestYearlyOverview:
    def test_inclusive_year_bounds(self) -> None:
        txs = [
            _tx("100.00", "income", date(2024, 1, 1)),
            _tx("25.00", "expense", date(2024, 12, 31)),
            _tx("50.00", "expense", date(2025, 1, 1)),
        ]
        overview = yearly_overview(txs, 2024)
        assert overview.transaction_count == 2
        assert overview.net == Decimal("75.00")
        assert overview.savings_rate == Decimal("75.00")

    def test_no_income_savings_rate_is_zero(self) -> None:
        assert yearly_overview([_tx("5.00")], 2024).savings_rate == Decimal("0.00")


class TestCategoryBreakdown:
    def test_march_food_expenses(self) -> None:
        txs = [
            _tx("10.00", on=date(2024, 3, 1)),
            _tx("20.00", on=date(2024, 3, 15)),
            _tx("5.00", on=date(2024, 3, 31)),
        ]
        assert category_breakdown(txs, 2024, 3, "expense") == {"food": Decimal("35.00")}

    def test_defaults_to_expense_and_excludes_other_months(self) -> None:
        txs = [
            _tx("10.00", on=date(2024, 3, 1)),
            _tx("500.00", "income", on=date(2024, 3, 2), category="salary"),
            _tx("7.00", on=date(2024, 4, 1)),
            _tx("8.00", on=date(2024, 2, 29)),
        ]
        assert category_breakdown(txs, 2024, 3) == {"food": Decimal("10.00")}

    def test_missing_category_is_uncategorized(self) -> None:
        result = category_breakdown([_tx("4.00", category=None)], 2024, 3)
        assert result == {UNCATEGORIZED: Decimal("4.00")}

    def test_income_breakdown(self) -> None:
        txs = [_tx("500.00", "income", category="salary"), _tx("1.00")]
        assert category_breakdown(txs, 2024, 3, "income") == {"salary": Decimal("500.00")}


class TestSystemOverview:
    def test_one_admin_one_user_five_transactions(self) -> None:
        users = [_User("a", "a@x.io", "admin"), _User("u", "u@x.io", "user")]
        txs = [_tx("10.00", user_id="u") for _ in range(4)] + [_tx("100.00", "income", user_id="a")]

        overview = system_overview(users, txs, category_count=10, now=NOW)

        roles = [{"role": r.role, "count": r.count} for r in overview.user_roles]
        assert roles == [{"role": "admin", "count": 1}, {"role": "user", "count": 1}]
        assert overview.total_transactions == 5
        assert overview.total_users == 2
        assert overview.total_categories == 10
        assert overview.total_income == Decimal("100.00")
        assert overview.total_expense == Decimal("40.00")
        assert overview.net == Decimal("60.00")

    def test_histogram_order_and_read_only(self) -> None:
        users = [
            _User("r", "r@x.io", "read-only"),
            _User("u", "u@x.io", "user"),
            _User("a", "a@x.io", "admin"),
            _User("u2", "u2@x.io", "user"),
        ]
        assert [(r.role, r.count) for r in role_histogram(users)] == [
            ("admin", 1), ("user", 2), ("read-only", 1),
        ]

    def test_empty_system(self) -> None:
        overview = system_overview([], [], 0, now=NOW)
        assert overview.total_users == 0
        assert overview.user_roles == []
        assert overview.net == Decimal("0.00")

    def test_recent_activity_counts_last_week(self) -> None:
        users = [
            _User("old", "o@x.io", "user", created_at=NOW - timedelta(days=30)),
            _User("new", "n@x.io", "user", created_at=NOW - timedelta(days=1)),
        ]
        txs = [
            _tx("1.00", created_at=NOW - timedelta(days=2)),
            _tx("1.00", created_at=NOW - timedelta(days=20)),
        ]
        overview = system_overview(users, txs, 0, now=NOW)
        assert overview.new_users == 1
        assert overview.recent_transactions == 1


class TestTopActiveUsers:
    def test_ranked_by_count_within_window(self) -> None:
        txs = [
            _tx("1.00", user_id="a"),
            _tx("2.00", user_id="b"),
            _tx("3.00", user_id="b"),
            _tx("50.00", user_id="c", created_at=NOW - timedelta(days=40)),
        ]
        top = top_active_users(txs, window_days=30, now=NOW)
        assert [(u.user_id, u.transaction_count) for u in top] == [("b", 2), ("a", 1)]
        assert top[0].total_amount == Decimal("5.00")

    def test_ties_keep_first_seen_order(self) -> None:
        txs = [_tx("1.00", user_id=uid) for uid in ("x", "y", "z")]
        assert [u.user_id for u in top_active_users(txs, 7, now=NOW)] == ["x", "y", "z"]

    def test_limit(self) -> None:
        txs = [_tx("1.00", user_id=f"u{i}") for i in range(15)]
        assert len(top_active_users(txs, 7, now=NOW)) == 10
        assert len(top_active_users(txs, 7, limit=3, now=NOW)) == 3

    def test_empty(self) -> None:
        assert top_active_users([], 30, now=NOW) == []


class TestActivityTrends:
    def test_daily_trends_by_creation_day(self) -> None:
        day1 = NOW - timedelta(days=2)
        txs = [
            _tx("10.00", "income", created_at=day1),
            _tx("4.00", "expense", created_at=day1),
            _tx("1.00", created_at=NOW),
            _tx("1.00", created_at=NOW - timedelta(days=60)),
        ]
        trends = daily_transaction_trends(txs, 30, now=NOW)
        assert [t.day for t in trends] == [day1.date(), NOW.date()]
        assert trends[0].count == 2
        assert trends[0].income == Decimal("10.00")
        assert trends[0].expense == Decimal("4.00")

    def test_registration_trends(self) -> None:
        users = [
            _User("a", "a@x.io", "user", created_at=NOW),
            _User("b", "b@x.io", "user", created_at=NOW),
            _User("c", "c@x.io", "user", created_at=NOW - timedelta(days=100)),
        ]
        trends = user_registration_trends(users, 30, now=NOW)
        assert [(t.day, t.count) for t in trends] == [(NOW.date(), 2)]

    def test_category_usage_most_used_first(self) -> None:
        txs = [
            _tx("5.00", category="food"),
            _tx("100.00", category="bills"),
            _tx("6.00", category="bills"),
            _tx("1.00", category=None),
        ]
        usage = category_usage(txs, 30, now=NOW)
        assert [(c.category, c.count, c.total) for c in usage] == [
            ("bills", 2, Decimal("106.00")),
            ("food", 1, Decimal("5.00")),
            (UNCATEGORIZED, 1, Decimal("1.00")),
        ]

    def test_category_usage_without_window(self) -> None:
        txs = [_tx("5.00", created_at=NOW - timedelta(days=3000))]
        assert category_usage(txs, None, now=NOW)[0].count == 1
        assert category_usage(txs, 30, now=NOW) == []


def test_savings_rate() -> None:
    assert savings_rate(Decimal("1000.00"), Decimal("250.00")) == Decimal("75.00")
    assert savings_rate(Decimal("0"), Decimal("10.00")) == Decimal("0.00")


def test_summarize() -> None:
    summary = summarize([_tx("200.00", "income"), _tx("50.00")])
    assert summary.total_transactions == 2
    assert summary.net == Decimal("150.00")
    assert summary.savings_rate == Decimal("75.00")
