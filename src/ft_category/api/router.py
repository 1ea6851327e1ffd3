"""ft_category REST endpoints.

GET    /categories                 active categories (any role, cached 1 h)
GET    /categories/{category_id}   one category (any role)
POST   /categories                 create (admin)
PUT    /categories/{category_id}   update (admin)
DELETE /categories/{category_id}   soft delete (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.application.schemas import CategoryCreateRequest, CategoryUpdateRequest
from src.ft_category.application.service import CategoryApplicationService
from src.ft_common.database import get_db_session
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import require_admin, require_any_role
from src.ft_gateway.user.db_models import UserModel

router = APIRouter(prefix="/categories", tags=["categories"])

_service = CategoryApplicationService()


@router.get("")
async def list_categories(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.list_categories(db)
    return respond(request, data)


@router.get("/{category_id}")
async def get_category(
    category_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_any_role)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_category(db, category_id)
    return respond(request, data.model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_category(db, body)
    return respond(request, data.model_dump(), "Category created successfully")


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    body: CategoryUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_category(db, category_id, body)
    return respond(request, data.model_dump(), "Category updated successfully")


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.delete_category(db, category_id)
    return respond(request, data.model_dump(), "Category deleted successfully")
