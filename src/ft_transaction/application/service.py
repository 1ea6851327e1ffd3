"""TransactionApplicationService: scoped reads and the write path.

Writes either fully succeed (persist + commit + invalidate the owner's
analytics) or fully fail (validation before any side effect, or a rolled
back persistence error surfaced as InternalError). Cache invalidation runs
after the commit; if it fails the write still stands.
"""

import logging
import math
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.cache import CacheAside, get_cache
from src.ft_common.errors import (
    CategoryInactiveError,
    InternalError,
    InvalidAmountError,
    MissingFieldError,
    TransactionNotFoundError,
    UnknownCategoryReferenceError,
)
from src.ft_common.money import to_money, validate_amount
from src.ft_gateway.auth.scope import Caller, can_modify, require_writer, resolve_scope
from src.ft_transaction.application.schemas import (
    Pagination,
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdateRequest,
)
from src.ft_transaction.domain.models import Transaction, TransactionFilter
from src.ft_transaction.domain.repository import TransactionRepositoryProtocol
from src.ft_transaction.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)


class TransactionApplicationService:
    def __init__(
        self,
        repo: TransactionRepositoryProtocol | None = None,
        category_repo: CategoryRepositoryProtocol | None = None,
        cache: CacheAside | None = None,
    ) -> None:
        self._repo: TransactionRepositoryProtocol = repo or TransactionRepository()
        self._category_repo: CategoryRepositoryProtocol = category_repo or CategoryRepository()
        self._cache = cache

    @property
    def cache(self) -> CacheAside:
        return self._cache or get_cache()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_transactions(
        self,
        db: AsyncSession,
        caller: Caller,
        filters: TransactionFilter,
        page: int,
        limit: int,
    ) -> TransactionListResponse:
        scope = resolve_scope(caller)
        scoped = TransactionFilter(
            owner_id=scope.owner_id,
            type=filters.type,
            category_id=filters.category_id,
            start_date=filters.start_date,
            end_date=filters.end_date,
        )
        total = await self._repo.count(db, scoped)
        rows = await self._repo.find(db, scoped, offset=(page - 1) * limit, limit=limit)
        return TransactionListResponse(
            transactions=[TransactionResponse.from_domain(t) for t in rows],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit) if limit else 0,
            ),
        )

    async def get_transaction(
        self, db: AsyncSession, caller: Caller, transaction_id: int
    ) -> TransactionResponse:
        scope = resolve_scope(caller)
        tx = await self._repo.get_by_id(db, transaction_id)
        if tx is None or not scope.can_see(tx.user_id):
            raise TransactionNotFoundError(transaction_id)
        return TransactionResponse.from_domain(tx)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_transaction(
        self, db: AsyncSession, caller: Caller, req: TransactionCreateRequest
    ) -> TransactionResponse:
        require_writer(caller)
        amount = _checked_amount(req.amount)
        description = _checked_description(req.description)
        category = await self._category_repo.get_by_id(db, req.category_id)
        if category is None:
            raise UnknownCategoryReferenceError(req.category_id)
        if not category.is_active:
            raise CategoryInactiveError(req.category_id)

        try:
            tx = await self._repo.create(
                db,
                caller.user_id,
                req.category_id,
                req.type.value,
                amount,
                description,
                req.date,
            )
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to create transaction for user %s", caller.user_id)
            raise InternalError("Failed to create transaction") from exc

        tx.category_name = category.name
        await self._invalidate_owner(tx.user_id)
        logger.info("Transaction created: id=%s user=%s", tx.id, tx.user_id)
        return TransactionResponse.from_domain(tx)

    async def update_transaction(
        self,
        db: AsyncSession,
        caller: Caller,
        transaction_id: int,
        req: TransactionUpdateRequest,
    ) -> TransactionResponse:
        require_writer(caller)
        existing = await self._get_modifiable(db, caller, transaction_id)

        amount = _checked_amount(req.amount) if req.amount is not None else existing.amount
        description = (
            _checked_description(req.description)
            if req.description is not None
            else existing.description
        )
        category_id = req.category_id if req.category_id is not None else existing.category_id
        category_name = existing.category_name
        if category_id != existing.category_id:
            category = await self._category_repo.get_by_id(db, category_id)
            if category is None:
                raise UnknownCategoryReferenceError(category_id)
            if not category.is_active:
                raise CategoryInactiveError(category_id)
            category_name = category.name

        try:
            tx = await self._repo.update(
                db,
                transaction_id,
                category_id,
                req.type.value if req.type is not None else existing.type,
                amount,
                description,
                req.date if req.date is not None else existing.date,
            )
            if tx is None:
                # deleted concurrently between the read and the update
                await db.rollback()
                raise TransactionNotFoundError(transaction_id)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to update transaction %s", transaction_id)
            raise InternalError("Failed to update transaction") from exc

        tx.category_name = category_name
        await self._invalidate_owner(tx.user_id)
        return TransactionResponse.from_domain(tx)

    async def delete_transaction(
        self, db: AsyncSession, caller: Caller, transaction_id: int
    ) -> None:
        require_writer(caller)
        existing = await self._get_modifiable(db, caller, transaction_id)
        try:
            deleted = await self._repo.delete(db, transaction_id)
            if not deleted:
                await db.rollback()
                raise TransactionNotFoundError(transaction_id)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to delete transaction %s", transaction_id)
            raise InternalError("Failed to delete transaction") from exc

        await self._invalidate_owner(existing.user_id)
        logger.info("Transaction deleted: id=%s user=%s", transaction_id, existing.user_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_modifiable(
        self, db: AsyncSession, caller: Caller, transaction_id: int
    ) -> Transaction:
        tx = await self._repo.get_by_id(db, transaction_id)
        if tx is None or not can_modify(caller, tx.user_id):
            raise TransactionNotFoundError(transaction_id)
        return tx

    async def _invalidate_owner(self, owner_id: str) -> None:
        if not await self.cache.invalidate_user_analytics(owner_id):
            logger.warning(
                "Analytics cache for user %s may be stale until TTL expiry", owner_id
            )


def _checked_amount(value: Decimal) -> Decimal:
    try:
        validate_amount(value)
        return to_money(value)
    except ValueError as exc:
        raise InvalidAmountError(str(exc)) from exc


def _checked_description(value: str) -> str:
    description = value.strip()
    if not description:
        raise MissingFieldError("description")
    return description
