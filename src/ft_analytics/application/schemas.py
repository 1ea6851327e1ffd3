"""Pydantic schemas for ft_analytics API.

Services cache ``model_dump(mode="json")`` of these models, so a cache hit
returns the exact payload the miss returned.
"""

from decimal import Decimal

from pydantic import BaseModel

from src.ft_analytics.domain.models import MonthBucket, Summary, YearlyOverview
from src.ft_transaction.application.schemas import TransactionResponse


class SummaryResponse(BaseModel):
    scope: str
    total_transactions: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    savings_rate: Decimal
    recent_transactions: list[TransactionResponse]

    @classmethod
    def build(
        cls, scope: str, s: Summary, recent: list[TransactionResponse]
    ) -> "SummaryResponse":
        return cls(
            scope=scope,
            total_transactions=s.total_transactions,
            total_income=s.total_income,
            total_expense=s.total_expense,
            net=s.net,
            savings_rate=s.savings_rate,
            recent_transactions=recent,
        )


class MonthBucketResponse(BaseModel):
    month: int
    label: str
    income: Decimal
    expense: Decimal
    net: Decimal

    @classmethod
    def from_domain(cls, b: MonthBucket) -> "MonthBucketResponse":
        return cls(month=b.month, label=b.label, income=b.income, expense=b.expense, net=b.net)


class MonthlyTrendResponse(BaseModel):
    scope: str
    year: int
    months: list[MonthBucketResponse]


class YearlyOverviewResponse(BaseModel):
    scope: str
    year: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    transaction_count: int
    savings_rate: Decimal

    @classmethod
    def from_domain(cls, scope: str, y: YearlyOverview) -> "YearlyOverviewResponse":
        return cls(
            scope=scope,
            year=y.year,
            total_income=y.total_income,
            total_expense=y.total_expense,
            net=y.net,
            transaction_count=y.transaction_count,
            savings_rate=y.savings_rate,
        )


class CategoryBreakdownResponse(BaseModel):
    scope: str
    year: int
    month: int
    month_name: str
    type: str
    breakdown: dict[str, Decimal]
    total: Decimal
