"""Repository Protocol; the SQLAlchemy implementation lives in infrastructure/persistence.py.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.domain.models import Category


class CategoryRepositoryProtocol(Protocol):
    async def list_active(self, db: AsyncSession) -> list[Category]: ...

    async def get_by_id(self, db: AsyncSession, category_id: int) -> Category | None: ...

    async def get_by_name(self, db: AsyncSession, name: str) -> Category | None: ...

    async def create(
        self, db: AsyncSession, name: str, description: str | None, color: str | None
    ) -> Category: ...

    async def update(
        self,
        db: AsyncSession,
        category_id: int,
        name: str | None,
        description: str | None,
        color: str | None,
        is_active: bool | None,
    ) -> Category | None: ...

    async def soft_delete(self, db: AsyncSession, category_id: int) -> Category | None: ...

    async def count_all(self, db: AsyncSession) -> int: ...
