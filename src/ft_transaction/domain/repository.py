"""Repository Protocol; the SQLAlchemy implementation lives in infrastructure/persistence.py."""

from datetime import date
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_transaction.domain.models import Transaction, TransactionFilter


class TransactionRepositoryProtocol(Protocol):
    async def find(
        self,
        db: AsyncSession,
        filters: TransactionFilter,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]: ...

    async def count(self, db: AsyncSession, filters: TransactionFilter) -> int: ...

    async def get_by_id(self, db: AsyncSession, transaction_id: int) -> Transaction | None: ...

    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        category_id: int,
        tx_type: str,
        amount: Decimal,
        description: str,
        tx_date: date,
    ) -> Transaction: ...

    async def update(
        self,
        db: AsyncSession,
        transaction_id: int,
        category_id: int,
        tx_type: str,
        amount: Decimal,
        description: str,
        tx_date: date,
    ) -> Transaction | None: ...

    async def delete(self, db: AsyncSession, transaction_id: int) -> bool: ...
