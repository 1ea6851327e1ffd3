"""Role-scoped data access.

Single place that turns (caller id, caller role) into the owner predicate
applied to transaction queries:

  read-only       -> no owner filter, the caller reads every transaction
  user / admin    -> owner filter = caller id
  admin-only ops  -> role must be admin, no owner filter

Read-only callers also get their cached analytics dropped before every read:
entries written under a previous role assignment carry a different scope.
"""

from dataclasses import dataclass

from src.ft_common.cache import CacheAside
from src.ft_common.enums import UserRole
from src.ft_common.errors import PermissionDeniedError
from src.ft_gateway.user.db_models import UserModel


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: UserRole

    @classmethod
    def from_user(cls, user: UserModel) -> "Caller":
        return cls(user_id=str(user.id), role=user.user_role)


@dataclass(frozen=True)
class DataScope:
    caller_id: str
    owner_id: str | None  # None = system-wide

    @property
    def system_wide(self) -> bool:
        return self.owner_id is None

    @property
    def cache_segment(self) -> str:
        return "all" if self.system_wide else "own"

    def can_see(self, owner_id: str) -> bool:
        return self.owner_id is None or self.owner_id == owner_id


def resolve_scope(caller: Caller, admin_only: bool = False) -> DataScope:
    if admin_only:
        if caller.role != UserRole.ADMIN:
            raise PermissionDeniedError("Admin role required")
        return DataScope(caller_id=caller.user_id, owner_id=None)
    if caller.role == UserRole.READ_ONLY:
        return DataScope(caller_id=caller.user_id, owner_id=None)
    return DataScope(caller_id=caller.user_id, owner_id=caller.user_id)


async def prepare_scope(
    caller: Caller, cache: CacheAside, admin_only: bool = False
) -> DataScope:
    """resolve_scope plus the read-only stale-scope guard. Use for every analytics read."""
    scope = resolve_scope(caller, admin_only=admin_only)
    if caller.role == UserRole.READ_ONLY:
        await cache.invalidate_user_analytics(caller.user_id)
    return scope


def require_writer(caller: Caller) -> None:
    """Transactions can only be written by ``user`` and ``admin`` roles."""
    if caller.role not in (UserRole.USER, UserRole.ADMIN):
        raise PermissionDeniedError("Read-only accounts cannot modify data")


def can_modify(caller: Caller, owner_id: str) -> bool:
    """Owners modify their own rows; admins modify any row."""
    return caller.role == UserRole.ADMIN or caller.user_id == owner_id
