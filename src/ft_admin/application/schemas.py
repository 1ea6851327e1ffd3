"""Pydantic schemas for ft_admin API."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.ft_admin.domain.models import ManagedUser
from src.ft_analytics.domain.models import (
    ActiveUser,
    CategoryUsage,
    DailyTransactionTrend,
    RegistrationTrend,
    SystemOverview,
)
from src.ft_common.enums import UserRole
from src.ft_gateway.user.schemas import check_password_complexity
from src.ft_transaction.application.schemas import TransactionResponse

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class AdminUserCreateRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        return check_password_complexity(v)


class AdminUserUpdateRequest(BaseModel):
    """Partial update: omitted fields keep their stored value."""

    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str | None) -> str | None:
        return check_password_complexity(v) if v is not None else v


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UserStatsResponse(BaseModel):
    total_transactions: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal


class AdminUserResponse(BaseModel):
    user_id: str
    email: str
    role: str
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: str | None
    stats: UserStatsResponse

    @classmethod
    def from_domain(cls, u: ManagedUser) -> "AdminUserResponse":
        return cls(
            user_id=u.id,
            email=u.email,
            role=u.role,
            first_name=u.first_name,
            last_name=u.last_name,
            is_active=u.is_active,
            created_at=u.created_at.isoformat() if u.created_at else None,
            stats=UserStatsResponse(
                total_transactions=u.stats.total_transactions,
                total_income=u.stats.total_income,
                total_expense=u.stats.total_expense,
                net=u.stats.net,
            ),
        )


class UserListResponse(BaseModel):
    users: list[AdminUserResponse]
    count: int


class CategoryUsageResponse(BaseModel):
    category: str
    count: int
    total: Decimal

    @classmethod
    def from_domain(cls, c: CategoryUsage) -> "CategoryUsageResponse":
        return cls(category=c.category, count=c.count, total=c.total)


class UserDetailResponse(BaseModel):
    user: AdminUserResponse
    recent_transactions: list[TransactionResponse]
    category_breakdown: list[CategoryUsageResponse]


class RoleCountResponse(BaseModel):
    role: str
    count: int


class SystemOverviewResponse(BaseModel):
    total_users: int
    total_transactions: int
    total_categories: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    recent_transactions: int
    new_users: int
    user_roles: list[RoleCountResponse]

    @classmethod
    def from_domain(cls, o: SystemOverview) -> "SystemOverviewResponse":
        return cls(
            total_users=o.total_users,
            total_transactions=o.total_transactions,
            total_categories=o.total_categories,
            total_income=o.total_income,
            total_expense=o.total_expense,
            net=o.net,
            recent_transactions=o.recent_transactions,
            new_users=o.new_users,
            user_roles=[RoleCountResponse(role=r.role, count=r.count) for r in o.user_roles],
        )


class TransactionTrendResponse(BaseModel):
    day: date
    count: int
    income: Decimal
    expense: Decimal

    @classmethod
    def from_domain(cls, t: DailyTransactionTrend) -> "TransactionTrendResponse":
        return cls(day=t.day, count=t.count, income=t.income, expense=t.expense)


class RegistrationTrendResponse(BaseModel):
    day: date
    count: int

    @classmethod
    def from_domain(cls, t: RegistrationTrend) -> "RegistrationTrendResponse":
        return cls(day=t.day, count=t.count)


class TopUserResponse(BaseModel):
    user_id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    transaction_count: int
    total_amount: Decimal


class SystemAnalyticsResponse(BaseModel):
    period_days: int
    transaction_trends: list[TransactionTrendResponse]
    user_trends: list[RegistrationTrendResponse]
    category_usage: list[CategoryUsageResponse]
    top_users: list[TopUserResponse]


class CacheFlushResponse(BaseModel):
    flushed: bool


def top_user_response(active: ActiveUser, user: ManagedUser | None) -> TopUserResponse:
    return TopUserResponse(
        user_id=active.user_id,
        email=user.email if user else None,
        first_name=user.first_name if user else None,
        last_name=user.last_name if user else None,
        transaction_count=active.transaction_count,
        total_amount=active.total_amount,
    )
