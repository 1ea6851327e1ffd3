"""Aggregate value types produced by the aggregation engine.

Pure dataclasses; money is ``Decimal`` quantized to 2 places.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol

from src.ft_common.money import ZERO


class UserRecord(Protocol):
    """What aggregation needs from a user row."""

    id: str
    email: str
    role: str
    first_name: str | None
    last_name: str | None
    created_at: datetime | None


@dataclass(frozen=True)
class Totals:
    income_sum: Decimal = ZERO
    expense_sum: Decimal = ZERO
    net: Decimal = ZERO
    count: int = 0


@dataclass(frozen=True)
class MonthBucket:
    month: int          # 1..12
    label: str          # "Jan"
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class YearlyOverview:
    year: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    transaction_count: int
    savings_rate: Decimal


@dataclass(frozen=True)
class Summary:
    total_transactions: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    savings_rate: Decimal


@dataclass(frozen=True)
class RoleCount:
    role: str
    count: int


@dataclass(frozen=True)
class SystemOverview:
    total_users: int
    total_transactions: int
    total_categories: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    recent_transactions: int    # created within RECENT_ACTIVITY_DAYS
    new_users: int              # registered within RECENT_ACTIVITY_DAYS
    user_roles: list[RoleCount] = field(default_factory=list)


@dataclass(frozen=True)
class ActiveUser:
    user_id: str
    transaction_count: int
    total_amount: Decimal


@dataclass(frozen=True)
class DailyTransactionTrend:
    day: date
    count: int
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class RegistrationTrend:
    day: date
    count: int


@dataclass(frozen=True)
class CategoryUsage:
    category: str
    count: int
    total: Decimal
