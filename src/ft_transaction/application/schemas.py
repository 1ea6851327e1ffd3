"""Pydantic schemas for ft_transaction API."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from src.ft_common.enums import TransactionType
from src.ft_common.money import money_to_display
from src.ft_transaction.domain.models import Transaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TransactionCreateRequest(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    category_id: int = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    date: dt.date


class TransactionUpdateRequest(BaseModel):
    """Partial update: omitted fields keep their stored value."""

    type: TransactionType | None = None
    amount: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    category_id: int | None = Field(None, gt=0)
    description: str | None = Field(None, min_length=1, max_length=255)
    date: dt.date | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionResponse(BaseModel):
    id: int
    user_id: str
    category_id: int
    category_name: str | None
    type: str
    amount: Decimal
    amount_display: str
    description: str
    date: str
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionResponse":
        return cls(
            id=t.id,
            user_id=t.user_id,
            category_id=t.category_id,
            category_name=t.category_name,
            type=t.type,
            amount=t.amount,
            amount_display=money_to_display(t.amount),
            description=t.description,
            date=t.date.isoformat(),
            created_at=t.created_at.isoformat() if t.created_at else None,
            updated_at=t.updated_at.isoformat() if t.updated_at else None,
        )


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    pagination: Pagination
