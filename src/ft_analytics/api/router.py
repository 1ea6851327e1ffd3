"""ft_analytics REST endpoints (all roles; scope decided per caller).

GET /analytics/summary
GET /analytics/monthly?year=
GET /analytics/yearly?year=
GET /analytics/categories?year=&month=&type=
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_analytics.application.service import AnalyticsApplicationService
from src.ft_common.database import get_db_session
from src.ft_common.datetime_utils import utc_now
from src.ft_common.enums import TransactionType
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import require_any_role
from src.ft_gateway.auth.scope import Caller
from src.ft_gateway.user.db_models import UserModel

router = APIRouter(prefix="/analytics", tags=["analytics"])

_service = AnalyticsApplicationService()


@router.get("/summary")
async def get_summary(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_summary(db, Caller.from_user(current_user))
    return respond(request, data)


@router.get("/monthly")
async def get_monthly_trend(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    year: int | None = Query(None, ge=1900, le=9999, description="Defaults to current year"),
) -> ApiResponse:
    data = await _service.get_monthly_trend(
        db, Caller.from_user(current_user), year or utc_now().year
    )
    return respond(request, data)


@router.get("/yearly")
async def get_yearly_overview(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    year: int | None = Query(None, ge=1900, le=9999, description="Defaults to current year"),
) -> ApiResponse:
    data = await _service.get_yearly_overview(
        db, Caller.from_user(current_user), year or utc_now().year
    )
    return respond(request, data)


@router.get("/categories")
async def get_category_breakdown(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    year: int | None = Query(None, ge=1900, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    type: TransactionType = Query(TransactionType.EXPENSE),
) -> ApiResponse:
    now = utc_now()
    data = await _service.get_category_breakdown(
        db,
        Caller.from_user(current_user),
        year or now.year,
        month or now.month,
        type.value,
    )
    return respond(request, data)
