"""TransactionRepository: concrete implementation of TransactionRepositoryProtocol.

Reads LEFT JOIN categories so every domain Transaction carries its category
name (NULL only if the row's category was removed out-of-band).

Transaction ownership: the application service commits or rolls back.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.infrastructure.db_models import CategoryORM
from src.ft_transaction.domain.models import Transaction, TransactionFilter
from src.ft_transaction.infrastructure.db_models import TransactionORM

_COLUMNS = (
    TransactionORM.id,
    TransactionORM.user_id,
    TransactionORM.category_id,
    TransactionORM.type,
    TransactionORM.amount,
    TransactionORM.description,
    TransactionORM.tx_date.label("tx_date"),
    TransactionORM.created_at,
    TransactionORM.updated_at,
)


def _row_to_transaction(row: Any, category_name: str | None = None) -> Transaction:
    return Transaction(
        id=row.id,
        user_id=str(row.user_id),
        category_id=row.category_id,
        type=row.type,
        amount=Decimal(row.amount),
        description=row.description,
        date=row.tx_date,
        category_name=getattr(row, "category_name", category_name),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply_filters(stmt: Select[Any], filters: TransactionFilter) -> Select[Any]:
    if filters.owner_id is not None:
        stmt = stmt.where(TransactionORM.user_id == uuid.UUID(filters.owner_id))
    if filters.type is not None:
        stmt = stmt.where(TransactionORM.type == filters.type)
    if filters.category_id is not None:
        stmt = stmt.where(TransactionORM.category_id == filters.category_id)
    if filters.start_date is not None:
        stmt = stmt.where(TransactionORM.tx_date >= filters.start_date)
    if filters.end_date is not None:
        stmt = stmt.where(TransactionORM.tx_date <= filters.end_date)
    return stmt


def _joined_select() -> Select[Any]:
    return select(*_COLUMNS, CategoryORM.name.label("category_name")).outerjoin(
        CategoryORM, CategoryORM.id == TransactionORM.category_id
    )


class TransactionRepository:
    async def find(
        self,
        db: AsyncSession,
        filters: TransactionFilter,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        stmt = _apply_filters(_joined_select(), filters).order_by(
            TransactionORM.tx_date.desc(), TransactionORM.id.desc()
        )
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def count(self, db: AsyncSession, filters: TransactionFilter) -> int:
        stmt = _apply_filters(select(func.count(TransactionORM.id)), filters)
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def get_by_id(self, db: AsyncSession, transaction_id: int) -> Transaction | None:
        result = await db.execute(
            _joined_select().where(TransactionORM.id == transaction_id)
        )
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        category_id: int,
        tx_type: str,
        amount: Decimal,
        description: str,
        tx_date: date,
    ) -> Transaction:
        result = await db.execute(
            insert(TransactionORM)
            .values(
                user_id=uuid.UUID(user_id),
                category_id=category_id,
                type=tx_type,
                amount=amount,
                description=description,
                tx_date=tx_date,
            )
            .returning(*_COLUMNS)
        )
        return _row_to_transaction(result.one())

    async def update(
        self,
        db: AsyncSession,
        transaction_id: int,
        category_id: int,
        tx_type: str,
        amount: Decimal,
        description: str,
        tx_date: date,
    ) -> Transaction | None:
        # Last write wins: no version column on transactions.
        result = await db.execute(
            update(TransactionORM)
            .where(TransactionORM.id == transaction_id)
            .values(
                category_id=category_id,
                type=tx_type,
                amount=amount,
                description=description,
                tx_date=tx_date,
                updated_at=func.now(),
            )
            .returning(*_COLUMNS)
        )
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def delete(self, db: AsyncSession, transaction_id: int) -> bool:
        result = await db.execute(
            delete(TransactionORM)
            .where(TransactionORM.id == transaction_id)
            .returning(TransactionORM.id)
        )
        return result.fetchone() is not None
