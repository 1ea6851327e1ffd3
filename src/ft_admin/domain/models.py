"""Domain models for ft_admin: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.ft_common.money import ZERO


@dataclass
class UserStats:
    total_transactions: int = 0
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass
class ManagedUser:
    """A user as seen by an administrator (never carries the password hash)."""

    id: str
    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    stats: UserStats = field(default_factory=UserStats)
