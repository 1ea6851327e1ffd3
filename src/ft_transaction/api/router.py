"""ft_transaction REST endpoints.

GET    /transactions                    scoped list with filters + pagination
POST   /transactions                    create (user/admin)
GET    /transactions/{transaction_id}   one transaction (scoped)
PUT    /transactions/{transaction_id}   partial update (owner or admin)
DELETE /transactions/{transaction_id}   delete (owner or admin)
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.enums import TransactionType
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import require_any_role, require_user_or_admin
from src.ft_gateway.auth.scope import Caller
from src.ft_gateway.user.db_models import UserModel
from src.ft_transaction.application.schemas import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
)
from src.ft_transaction.application.service import TransactionApplicationService
from src.ft_transaction.domain.models import TransactionFilter

router = APIRouter(prefix="/transactions", tags=["transactions"])

_service = TransactionApplicationService()


@router.get("")
async def list_transactions(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    type: TransactionType | None = Query(None, description="income or expense"),
    category_id: int | None = Query(None, gt=0),
    start_date: date | None = Query(None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: date | None = Query(None, description="Inclusive upper bound (YYYY-MM-DD)"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    filters = TransactionFilter(
        type=type.value if type else None,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
    )
    data = await _service.list_transactions(
        db, Caller.from_user(current_user), filters, page, limit
    )
    return respond(request, data.model_dump(mode="json"))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    body: TransactionCreateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_user_or_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_transaction(db, Caller.from_user(current_user), body)
    return respond(request, data.model_dump(mode="json"), "Transaction created successfully")


@router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_transaction(db, Caller.from_user(current_user), transaction_id)
    return respond(request, data.model_dump(mode="json"))


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    body: TransactionUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_user_or_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_transaction(
        db, Caller.from_user(current_user), transaction_id, body
    )
    return respond(request, data.model_dump(mode="json"), "Transaction updated successfully")


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_user_or_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_transaction(db, Caller.from_user(current_user), transaction_id)
    return respond(request, None, "Transaction deleted successfully")
