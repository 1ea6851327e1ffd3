"""Domain models for ft_transaction: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal


@dataclass
class Transaction:
    id: int
    user_id: str
    category_id: int
    type: str                        # TransactionType value
    amount: Decimal                  # >= 0, 2 places; sign comes from type
    description: str
    date: date                       # calendar date, not the creation time
    category_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TransactionFilter:
    """Query predicate. owner_id=None means system-wide (already scope-checked)."""

    owner_id: str | None = None
    type: str | None = None
    category_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
