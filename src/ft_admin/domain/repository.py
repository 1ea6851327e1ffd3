"""Repository Protocol; the SQLAlchemy implementation lives in infrastructure/persistence.py."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.domain.models import ManagedUser


class UserAdminRepositoryProtocol(Protocol):
    async def list_users(self, db: AsyncSession) -> list[ManagedUser]:
        """All users, newest first, each with transaction stats."""
        ...

    async def get_user(self, db: AsyncSession, user_id: str) -> ManagedUser | None: ...

    async def get_by_email(self, db: AsyncSession, email: str) -> ManagedUser | None: ...

    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password_hash: str,
        role: str,
        first_name: str | None,
        last_name: str | None,
    ) -> ManagedUser: ...

    async def update_user(
        self, db: AsyncSession, user_id: str, fields: dict[str, Any]
    ) -> ManagedUser | None: ...

    async def delete_user(self, db: AsyncSession, user_id: str) -> bool: ...
