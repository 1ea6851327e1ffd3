"""AdminApplicationService: user management, system overview and analytics.

Every operation re-checks the admin role through ``resolve_scope(admin_only=True)``
on top of the router's ``require_admin`` dependency.
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.application.schemas import (
    AdminUserCreateRequest,
    AdminUserResponse,
    AdminUserUpdateRequest,
    CacheFlushResponse,
    CategoryUsageResponse,
    RegistrationTrendResponse,
    SystemAnalyticsResponse,
    SystemOverviewResponse,
    TransactionTrendResponse,
    UserDetailResponse,
    UserListResponse,
    top_user_response,
)
from src.ft_admin.domain.repository import UserAdminRepositoryProtocol
from src.ft_admin.infrastructure.persistence import UserAdminRepository
from src.ft_analytics.domain import aggregation
from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.cache import CacheAside, get_cache
from src.ft_common.errors import (
    CannotDeleteSelfError,
    EmailExistsError,
    InternalError,
    UserNotFoundError,
)
from src.ft_gateway.auth.password import hash_password
from src.ft_gateway.auth.scope import Caller, resolve_scope
from src.ft_transaction.application.schemas import TransactionResponse
from src.ft_transaction.domain.models import TransactionFilter
from src.ft_transaction.domain.repository import TransactionRepositoryProtocol
from src.ft_transaction.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)

USER_DETAIL_TRANSACTIONS = 50
TOP_USERS_LIMIT = 10


def _canonical_user_id(user_id: str) -> str:
    """Lowercase hyphenated form, so it compares equal to ids read from the DB."""
    try:
        return str(uuid.UUID(user_id))
    except ValueError:
        return user_id


class AdminApplicationService:
    def __init__(
        self,
        user_repo: UserAdminRepositoryProtocol | None = None,
        tx_repo: TransactionRepositoryProtocol | None = None,
        category_repo: CategoryRepositoryProtocol | None = None,
        cache: CacheAside | None = None,
    ) -> None:
        self._users: UserAdminRepositoryProtocol = user_repo or UserAdminRepository()
        self._transactions: TransactionRepositoryProtocol = tx_repo or TransactionRepository()
        self._categories: CategoryRepositoryProtocol = category_repo or CategoryRepository()
        self._cache = cache

    @property
    def cache(self) -> CacheAside:
        return self._cache or get_cache()

    # ------------------------------------------------------------------
    # System-wide reads
    # ------------------------------------------------------------------

    async def get_overview(self, db: AsyncSession, caller: Caller) -> SystemOverviewResponse:
        scope = resolve_scope(caller, admin_only=True)
        users = await self._users.list_users(db)
        transactions = await self._transactions.find(db, TransactionFilter(owner_id=scope.owner_id))
        category_count = await self._categories.count_all(db)
        overview = aggregation.system_overview(users, transactions, category_count)
        return SystemOverviewResponse.from_domain(overview)

    async def get_system_analytics(
        self, db: AsyncSession, caller: Caller, period_days: int
    ) -> SystemAnalyticsResponse:
        scope = resolve_scope(caller, admin_only=True)
        users = await self._users.list_users(db)
        transactions = await self._transactions.find(db, TransactionFilter(owner_id=scope.owner_id))
        by_id = {u.id: u for u in users}

        top = aggregation.top_active_users(transactions, period_days, limit=TOP_USERS_LIMIT)
        return SystemAnalyticsResponse(
            period_days=period_days,
            transaction_trends=[
                TransactionTrendResponse.from_domain(t)
                for t in aggregation.daily_transaction_trends(transactions, period_days)
            ],
            user_trends=[
                RegistrationTrendResponse.from_domain(t)
                for t in aggregation.user_registration_trends(users, period_days)
            ],
            category_usage=[
                CategoryUsageResponse.from_domain(c)
                for c in aggregation.category_usage(transactions, period_days)
            ],
            top_users=[top_user_response(a, by_id.get(a.user_id)) for a in top],
        )

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------

    async def list_users(self, db: AsyncSession, caller: Caller) -> UserListResponse:
        resolve_scope(caller, admin_only=True)
        users = await self._users.list_users(db)
        return UserListResponse(
            users=[AdminUserResponse.from_domain(u) for u in users], count=len(users)
        )

    async def get_user_details(
        self, db: AsyncSession, caller: Caller, user_id: str
    ) -> UserDetailResponse:
        resolve_scope(caller, admin_only=True)
        user = await self._users.get_user(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        owned = await self._transactions.find(db, TransactionFilter(owner_id=user.id))
        return UserDetailResponse(
            user=AdminUserResponse.from_domain(user),
            recent_transactions=[
                TransactionResponse.from_domain(t) for t in owned[:USER_DETAIL_TRANSACTIONS]
            ],
            category_breakdown=[
                CategoryUsageResponse.from_domain(c)
                for c in aggregation.category_usage(owned, window_days=None)
            ],
        )

    async def create_user(
        self, db: AsyncSession, caller: Caller, req: AdminUserCreateRequest
    ) -> AdminUserResponse:
        resolve_scope(caller, admin_only=True)
        email = req.email.lower()
        if await self._users.get_by_email(db, email) is not None:
            raise EmailExistsError()
        try:
            user = await self._users.create_user(
                db,
                email,
                hash_password(req.password),
                req.role.value,
                req.first_name,
                req.last_name,
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise EmailExistsError() from None
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to create user %s", email)
            raise InternalError("Failed to create user") from exc

        logger.info("User created by admin %s: id=%s role=%s", caller.user_id, user.id, user.role)
        return AdminUserResponse.from_domain(user)

    async def update_user(
        self,
        db: AsyncSession,
        caller: Caller,
        user_id: str,
        req: AdminUserUpdateRequest,
    ) -> AdminUserResponse:
        resolve_scope(caller, admin_only=True)
        existing = await self._users.get_user(db, user_id)
        if existing is None:
            raise UserNotFoundError(user_id)

        fields = req.model_dump(exclude_unset=True, exclude={"password", "email", "role"})
        if fields.get("is_active", False) is None:
            del fields["is_active"]
        if req.email is not None and req.email.lower() != existing.email:
            email = req.email.lower()
            if await self._users.get_by_email(db, email) is not None:
                raise EmailExistsError()
            fields["email"] = email
        if req.role is not None:
            fields["role"] = req.role.value
        if req.password is not None:
            fields["password_hash"] = hash_password(req.password)

        try:
            user = await self._users.update_user(db, user_id, fields)
            if user is None:
                await db.rollback()
                raise UserNotFoundError(user_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise EmailExistsError() from None
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to update user %s", user_id)
            raise InternalError("Failed to update user") from exc

        if user.role != existing.role:
            # cached analytics were computed under the old scope
            await self.cache.invalidate_user_analytics(user.id)
            logger.info("Role changed for user %s: %s -> %s", user.id, existing.role, user.role)
        return AdminUserResponse.from_domain(user)

    async def delete_user(self, db: AsyncSession, caller: Caller, user_id: str) -> None:
        resolve_scope(caller, admin_only=True)
        user_id = _canonical_user_id(user_id)
        if user_id == _canonical_user_id(caller.user_id):
            raise CannotDeleteSelfError()
        try:
            deleted = await self._users.delete_user(db, user_id)
            if not deleted:
                await db.rollback()
                raise UserNotFoundError(user_id)
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Failed to delete user %s", user_id)
            raise InternalError("Failed to delete user") from exc

        await self.cache.invalidate_user_analytics(user_id)
        logger.info("User deleted by admin %s: id=%s", caller.user_id, user_id)

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    async def flush_cache(self, caller: Caller) -> CacheFlushResponse:
        resolve_scope(caller, admin_only=True)
        flushed = await self.cache.flush_all()
        logger.info("Cache flush requested by admin %s: flushed=%s", caller.user_id, flushed)
        return CacheFlushResponse(flushed=flushed)
