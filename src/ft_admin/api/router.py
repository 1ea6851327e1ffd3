"""ft_admin REST endpoints (admin role only).

GET    /admin/overview
GET    /admin/users
POST   /admin/users
GET    /admin/users/{user_id}
PUT    /admin/users/{user_id}
DELETE /admin/users/{user_id}
GET    /admin/analytics?period=30
POST   /admin/cache/flush
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.application.schemas import AdminUserCreateRequest, AdminUserUpdateRequest
from src.ft_admin.application.service import AdminApplicationService
from src.ft_common.database import get_db_session
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import require_admin
from src.ft_gateway.auth.scope import Caller
from src.ft_gateway.user.db_models import UserModel

router = APIRouter(prefix="/admin", tags=["admin"])

_service = AdminApplicationService()


@router.get("/overview")
async def get_overview(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_overview(db, Caller.from_user(current_user))
    return respond(request, data.model_dump(mode="json"))


@router.get("/users")
async def list_users(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.list_users(db, Caller.from_user(current_user))
    return respond(request, data.model_dump(mode="json"))


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: AdminUserCreateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_user(db, Caller.from_user(current_user), body)
    return respond(request, data.model_dump(mode="json"), "User created successfully")


@router.get("/users/{user_id}")
async def get_user_details(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_user_details(db, Caller.from_user(current_user), user_id)
    return respond(request, data.model_dump(mode="json"))


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    body: AdminUserUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_user(db, Caller.from_user(current_user), user_id, body)
    return respond(request, data.model_dump(mode="json"), "User updated successfully")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_user(db, Caller.from_user(current_user), user_id)
    return respond(request, None, "User deleted successfully")


@router.get("/analytics")
async def get_system_analytics(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    period: int = Query(30, ge=1, le=365, description="Trailing window in days"),
) -> ApiResponse:
    data = await _service.get_system_analytics(db, Caller.from_user(current_user), period)
    return respond(request, data.model_dump(mode="json"))


@router.post("/cache/flush")
async def flush_cache(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
) -> ApiResponse:
    data = await _service.flush_cache(Caller.from_user(current_user))
    return respond(request, data.model_dump(), "Cache flushed")
