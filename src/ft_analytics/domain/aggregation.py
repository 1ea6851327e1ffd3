"""Aggregation engine: pure sums, counts and groupings over transaction records.

No I/O, no cache, no role logic. Callers hand in already-scoped records.
Every function returns zero aggregates for empty input.

Calendar functions (monthly/yearly/category breakdown) bucket by the
transaction's calendar ``date``; activity functions (top users, daily trends,
category usage) window by ``created_at``.
"""

from collections import Counter, OrderedDict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from decimal import Decimal

from src.ft_analytics.domain.models import (
    ActiveUser,
    CategoryUsage,
    DailyTransactionTrend,
    MonthBucket,
    RegistrationTrend,
    RoleCount,
    Summary,
    SystemOverview,
    Totals,
    UserRecord,
    YearlyOverview,
)
from src.ft_common.datetime_utils import month_abbr, month_bounds, utc_now, year_bounds
from src.ft_common.enums import ROLE_ORDER, TransactionType
from src.ft_common.money import ZERO, percentage, to_money
from src.ft_transaction.domain.models import Transaction

UNCATEGORIZED = "Uncategorized"
RECENT_ACTIVITY_DAYS = 7

_INCOME = TransactionType.INCOME.value
_EXPENSE = TransactionType.EXPENSE.value


def _within(transactions: Iterable[Transaction], start: date, end: date) -> list[Transaction]:
    return [t for t in transactions if start <= t.date <= end]


def _window_start(window_days: int, now: datetime | None) -> datetime:
    return (now or utc_now()) - timedelta(days=window_days)


def _created_since(created_at: datetime | None, since: datetime) -> bool:
    return created_at is not None and created_at >= since


def totals_by_type(transactions: Iterable[Transaction]) -> Totals:
    income = ZERO
    expense = ZERO
    count = 0
    for t in transactions:
        count += 1
        if t.type == _INCOME:
            income += t.amount
        elif t.type == _EXPENSE:
            expense += t.amount
    income = to_money(income)
    expense = to_money(expense)
    return Totals(income_sum=income, expense_sum=expense, net=income - expense, count=count)


def savings_rate(income: Decimal, expense: Decimal) -> Decimal:
    """(income - expense) / income as a percentage; 0 when there is no income."""
    return percentage(income - expense, income)


def summarize(transactions: Iterable[Transaction]) -> Summary:
    totals = totals_by_type(transactions)
    return Summary(
        total_transactions=totals.count,
        total_income=totals.income_sum,
        total_expense=totals.expense_sum,
        net=totals.net,
        savings_rate=savings_rate(totals.income_sum, totals.expense_sum),
    )


def monthly_trend(transactions: Iterable[Transaction], year: int) -> list[MonthBucket]:
    """Twelve buckets, January..December, always present."""
    start, end = year_bounds(year)
    by_month: dict[int, list[Transaction]] = {m: [] for m in range(1, 13)}
    for t in _within(transactions, start, end):
        by_month[t.date.month].append(t)

    buckets = []
    for month in range(1, 13):
        totals = totals_by_type(by_month[month])
        buckets.append(
            MonthBucket(
                month=month,
                label=month_abbr(month),
                income=totals.income_sum,
                expense=totals.expense_sum,
                net=totals.net,
            )
        )
    return buckets


def yearly_overview(transactions: Iterable[Transaction], year: int) -> YearlyOverview:
    start, end = year_bounds(year)
    totals = totals_by_type(_within(transactions, start, end))
    return YearlyOverview(
        year=year,
        total_income=totals.income_sum,
        total_expense=totals.expense_sum,
        net=totals.net,
        transaction_count=totals.count,
        savings_rate=savings_rate(totals.income_sum, totals.expense_sum),
    )


def category_breakdown(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    tx_type: str = _EXPENSE,
) -> dict[str, Decimal]:
    """Category name -> summed amount for one calendar month and one type."""
    start, end = month_bounds(year, month)
    sums: dict[str, Decimal] = {}
    for t in _within(transactions, start, end):
        if t.type != tx_type:
            continue
        name = t.category_name or UNCATEGORIZED
        sums[name] = sums.get(name, ZERO) + t.amount
    return {name: to_money(total) for name, total in sums.items()}


def role_histogram(users: Iterable[UserRecord]) -> list[RoleCount]:
    """Counts per role in admin, user, read-only order; zero counts omitted."""
    counts = Counter(u.role for u in users)
    return [
        RoleCount(role=role.value, count=counts[role.value])
        for role in ROLE_ORDER
        if counts[role.value]
    ]


def system_overview(
    users: Sequence[UserRecord],
    transactions: Sequence[Transaction],
    category_count: int,
    now: datetime | None = None,
) -> SystemOverview:
    totals = totals_by_type(transactions)
    since = _window_start(RECENT_ACTIVITY_DAYS, now)
    return SystemOverview(
        total_users=len(users),
        total_transactions=totals.count,
        total_categories=category_count,
        total_income=totals.income_sum,
        total_expense=totals.expense_sum,
        net=totals.net,
        recent_transactions=sum(1 for t in transactions if _created_since(t.created_at, since)),
        new_users=sum(1 for u in users if _created_since(u.created_at, since)),
        user_roles=role_histogram(users),
    )


def top_active_users(
    transactions: Iterable[Transaction],
    window_days: int,
    limit: int = 10,
    now: datetime | None = None,
) -> list[ActiveUser]:
    """Users by transaction count inside the trailing window, descending.

    Ties keep first-seen order (``sorted`` is stable).
    """
    since = _window_start(window_days, now)
    counts: OrderedDict[str, int] = OrderedDict()
    amounts: dict[str, Decimal] = {}
    for t in transactions:
        if not _created_since(t.created_at, since):
            continue
        counts[t.user_id] = counts.get(t.user_id, 0) + 1
        amounts[t.user_id] = amounts.get(t.user_id, ZERO) + t.amount

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        ActiveUser(user_id=uid, transaction_count=n, total_amount=to_money(amounts[uid]))
        for uid, n in ranked[:limit]
    ]


def daily_transaction_trends(
    transactions: Iterable[Transaction],
    window_days: int,
    now: datetime | None = None,
) -> list[DailyTransactionTrend]:
    """Per creation day inside the window, ascending by day."""
    since = _window_start(window_days, now)
    by_day: dict[date, list[Transaction]] = {}
    for t in transactions:
        if _created_since(t.created_at, since):
            by_day.setdefault(t.created_at.date(), []).append(t)  # type: ignore[union-attr]

    trends = []
    for day in sorted(by_day):
        totals = totals_by_type(by_day[day])
        trends.append(
            DailyTransactionTrend(
                day=day,
                count=totals.count,
                income=totals.income_sum,
                expense=totals.expense_sum,
            )
        )
    return trends


def user_registration_trends(
    users: Iterable[UserRecord],
    window_days: int,
    now: datetime | None = None,
) -> list[RegistrationTrend]:
    since = _window_start(window_days, now)
    counts = Counter(
        u.created_at.date() for u in users if _created_since(u.created_at, since)  # type: ignore[union-attr]
    )
    return [RegistrationTrend(day=day, count=counts[day]) for day in sorted(counts)]


def category_usage(
    transactions: Iterable[Transaction],
    window_days: int | None,
    now: datetime | None = None,
) -> list[CategoryUsage]:
    """Per category count and total, most used first.

    ``window_days=None`` counts every transaction regardless of age.
    """
    since = _window_start(window_days, now) if window_days is not None else None
    counts: OrderedDict[str, int] = OrderedDict()
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if since is not None and not _created_since(t.created_at, since):
            continue
        name = t.category_name or UNCATEGORIZED
        counts[name] = counts.get(name, 0) + 1
        totals[name] = totals.get(name, ZERO) + t.amount

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryUsage(category=name, count=n, total=to_money(totals[name]))
        for name, n in ranked
    ]
