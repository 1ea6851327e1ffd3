"""CategoryRepository: concrete implementation of CategoryRepositoryProtocol.

Statements are built on the ORM mapping (select/insert/update ... RETURNING)
and mapped to domain dataclasses; callers never see ORM instances.

Transaction ownership: the application service commits or rolls back.
"""

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.domain.models import Category
from src.ft_category.infrastructure.db_models import CategoryORM

_COLUMNS = (
    CategoryORM.id,
    CategoryORM.name,
    CategoryORM.description,
    CategoryORM.color,
    CategoryORM.is_active,
    CategoryORM.created_at,
    CategoryORM.updated_at,
)


def _row_to_category(row: object) -> Category:
    return Category(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        color=row.color,  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class CategoryRepository:
    async def list_active(self, db: AsyncSession) -> list[Category]:
        result = await db.execute(
            select(*_COLUMNS)
            .where(CategoryORM.is_active.is_(True))
            .order_by(CategoryORM.name.asc())
        )
        return [_row_to_category(row) for row in result.fetchall()]

    async def get_by_id(self, db: AsyncSession, category_id: int) -> Category | None:
        result = await db.execute(select(*_COLUMNS).where(CategoryORM.id == category_id))
        row = result.fetchone()
        return _row_to_category(row) if row else None

    async def get_by_name(self, db: AsyncSession, name: str) -> Category | None:
        result = await db.execute(
            select(*_COLUMNS).where(func.lower(CategoryORM.name) == name.lower())
        )
        row = result.fetchone()
        return _row_to_category(row) if row else None

    async def create(
        self, db: AsyncSession, name: str, description: str | None, color: str | None
    ) -> Category:
        result = await db.execute(
            insert(CategoryORM)
            .values(name=name, description=description, color=color, is_active=True)
            .returning(*_COLUMNS)
        )
        return _row_to_category(result.one())

    async def update(
        self,
        db: AsyncSession,
        category_id: int,
        name: str | None,
        description: str | None,
        color: str | None,
        is_active: bool | None,
    ) -> Category | None:
        values: dict[str, object] = {"updated_at": func.now()}
        if name is not None:
            values["name"] = name
        if description is not None:
            values["description"] = description
        if color is not None:
            values["color"] = color
        if is_active is not None:
            values["is_active"] = is_active
        result = await db.execute(
            update(CategoryORM)
            .where(CategoryORM.id == category_id)
            .values(**values)
            .returning(*_COLUMNS)
        )
        row = result.fetchone()
        return _row_to_category(row) if row else None

    async def soft_delete(self, db: AsyncSession, category_id: int) -> Category | None:
        return await self.update(db, category_id, None, None, None, is_active=False)

    async def count_all(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(CategoryORM))
        return int(result.scalar_one())
