"""CategoryApplicationService: shared category list with a 1 h cache.

Writes: validate → persist (commit) → drop the single ``categories:all`` key.
A failed invalidation is logged by the cache layer and never undoes the write.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ft_category.application.schemas import (
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdateRequest,
)
from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.cache import CATEGORIES_ALL_KEY, CacheAside, get_cache
from src.ft_common.errors import CategoryExistsError, CategoryNotFoundError, InternalError

logger = logging.getLogger(__name__)


class CategoryApplicationService:
    def __init__(
        self,
        repo: CategoryRepositoryProtocol | None = None,
        cache: CacheAside | None = None,
    ) -> None:
        self._repo: CategoryRepositoryProtocol = repo or CategoryRepository()
        self._cache = cache

    @property
    def cache(self) -> CacheAside:
        return self._cache or get_cache()

    async def list_categories(self, db: AsyncSession) -> dict[str, Any]:
        async def compute() -> dict[str, Any]:
            categories = await self._repo.list_active(db)
            return CategoryListResponse(
                categories=[CategoryResponse.from_domain(c) for c in categories],
                count=len(categories),
            ).model_dump(mode="json")

        return await self.cache.get_or_compute(
            CATEGORIES_ALL_KEY, compute, settings.CATEGORY_CACHE_TTL_SECONDS
        )

    async def get_category(self, db: AsyncSession, category_id: int) -> CategoryResponse:
        category = await self._repo.get_by_id(db, category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return CategoryResponse.from_domain(category)

    async def create_category(
        self, db: AsyncSession, req: CategoryCreateRequest
    ) -> CategoryResponse:
        if await self._repo.get_by_name(db, req.name) is not None:
            raise CategoryExistsError(req.name)
        try:
            category = await self._repo.create(db, req.name, req.description, req.color)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise CategoryExistsError(req.name) from None
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to create category %s", req.name)
            raise InternalError("Failed to create category") from exc

        await self.cache.invalidate_categories()
        logger.info("Category created: id=%s name=%s", category.id, category.name)
        return CategoryResponse.from_domain(category)

    async def update_category(
        self, db: AsyncSession, category_id: int, req: CategoryUpdateRequest
    ) -> CategoryResponse:
        existing = await self._repo.get_by_id(db, category_id)
        if existing is None:
            raise CategoryNotFoundError(category_id)
        if req.name is not None and req.name != existing.name:
            clash = await self._repo.get_by_name(db, req.name)
            if clash is not None and clash.id != category_id:
                raise CategoryExistsError(req.name)
        try:
            category = await self._repo.update(
                db, category_id, req.name, req.description, req.color, req.is_active
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise CategoryExistsError(req.name or existing.name) from None
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to update category %s", category_id)
            raise InternalError("Failed to update category") from exc
        if category is None:
            raise CategoryNotFoundError(category_id)

        await self.cache.invalidate_categories()
        return CategoryResponse.from_domain(category)

    async def delete_category(self, db: AsyncSession, category_id: int) -> CategoryResponse:
        """Soft delete: historical transactions keep pointing at the row."""
        try:
            category = await self._repo.soft_delete(db, category_id)
            if category is None:
                await db.rollback()
                raise CategoryNotFoundError(category_id)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to delete category %s", category_id)
            raise InternalError("Failed to delete category") from exc

        await self.cache.invalidate_categories()
        logger.info("Category soft-deleted: id=%s", category_id)
        return CategoryResponse.from_domain(category)
