"""UserAdminRepository: raw SQL over users + per-user transaction stats.

Transaction ownership: the application service commits or rolls back.
"""

import uuid
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.domain.models import ManagedUser, UserStats

_USER_COLUMNS = "u.id, u.email, u.role, u.first_name, u.last_name, u.is_active, u.created_at, u.updated_at"

_STATS_JOIN = """
    LEFT JOIN (
        SELECT user_id,
               COUNT(*) AS total_transactions,
               COALESCE(SUM(CASE WHEN type = 'income' THEN amount END), 0) AS total_income,
               COALESCE(SUM(CASE WHEN type = 'expense' THEN amount END), 0) AS total_expense
        FROM transactions
        GROUP BY user_id
    ) s ON s.user_id = u.id
"""

_STATS_COLUMNS = """
    COALESCE(s.total_transactions, 0) AS total_transactions,
    COALESCE(s.total_income, 0) AS total_income,
    COALESCE(s.total_expense, 0) AS total_expense
"""

_LIST_USERS_SQL = text(f"""
    SELECT {_USER_COLUMNS}, {_STATS_COLUMNS}
    FROM users u
    {_STATS_JOIN}
    ORDER BY u.created_at DESC
""")

_GET_USER_SQL = text(f"""
    SELECT {_USER_COLUMNS}, {_STATS_COLUMNS}
    FROM users u
    {_STATS_JOIN}
    WHERE u.id = :user_id
""")

_GET_BY_EMAIL_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users u
    WHERE u.email = :email
""")

_INSERT_USER_SQL = text("""
    INSERT INTO users (email, password_hash, role, first_name, last_name, is_active)
    VALUES (:email, :password_hash, :role, :first_name, :last_name, TRUE)
    RETURNING id, email, role, first_name, last_name, is_active, created_at, updated_at
""")

_DELETE_USER_SQL = text("DELETE FROM users WHERE id = :user_id RETURNING id")

# Columns an admin update may touch. Keys come from this whitelist only,
# never from request input, so building the SET clause is injection-safe.
_UPDATABLE = ("email", "password_hash", "role", "first_name", "last_name", "is_active")


def _row_to_user(row: Any) -> ManagedUser:
    mapping = row._mapping
    stats = UserStats()
    if "total_transactions" in mapping:
        stats = UserStats(
            total_transactions=int(mapping["total_transactions"]),
            total_income=Decimal(mapping["total_income"]),
            total_expense=Decimal(mapping["total_expense"]),
        )
    return ManagedUser(
        id=str(row.id),
        email=row.email,
        role=row.role,
        first_name=row.first_name,
        last_name=row.last_name,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        stats=stats,
    )


def _as_uuid(user_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(user_id)
    except ValueError:
        return None


class UserAdminRepository:
    async def list_users(self, db: AsyncSession) -> list[ManagedUser]:
        result = await db.execute(_LIST_USERS_SQL)
        return [_row_to_user(row) for row in result.fetchall()]

    async def get_user(self, db: AsyncSession, user_id: str) -> ManagedUser | None:
        uid = _as_uuid(user_id)
        if uid is None:
            return None
        row = (await db.execute(_GET_USER_SQL, {"user_id": uid})).fetchone()
        return _row_to_user(row) if row else None

    async def get_by_email(self, db: AsyncSession, email: str) -> ManagedUser | None:
        row = (await db.execute(_GET_BY_EMAIL_SQL, {"email": email})).fetchone()
        return _row_to_user(row) if row else None

    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password_hash: str,
        role: str,
        first_name: str | None,
        last_name: str | None,
    ) -> ManagedUser:
        result = await db.execute(
            _INSERT_USER_SQL,
            {
                "email": email,
                "password_hash": password_hash,
                "role": role,
                "first_name": first_name,
                "last_name": last_name,
            },
        )
        return _row_to_user(result.one())

    async def update_user(
        self, db: AsyncSession, user_id: str, fields: dict[str, Any]
    ) -> ManagedUser | None:
        uid = _as_uuid(user_id)
        if uid is None:
            return None
        assignments = [f"{name} = :{name}" for name in _UPDATABLE if name in fields]
        if assignments:
            params = {name: fields[name] for name in _UPDATABLE if name in fields}
            params["user_id"] = uid
            result = await db.execute(
                text(
                    f"UPDATE users SET {', '.join(assignments)}, updated_at = NOW() "
                    "WHERE id = :user_id RETURNING id"
                ),
                params,
            )
            if result.fetchone() is None:
                return None
        return await self.get_user(db, user_id)

    async def delete_user(self, db: AsyncSession, user_id: str) -> bool:
        """Transactions go with the user (ON DELETE CASCADE)."""
        uid = _as_uuid(user_id)
        if uid is None:
            return False
        result = await db.execute(_DELETE_USER_SQL, {"user_id": uid})
        return result.fetchone() is not None
