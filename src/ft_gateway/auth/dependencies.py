"""FastAPI auth dependencies.

Usage in any protected router:
    from src.ft_gateway.auth.dependencies import get_current_user, require_admin

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...

    @router.post("/admin-only")
    async def admin_only(user: UserModel = Depends(require_admin)):
        ...
"""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.enums import UserRole
from src.ft_common.errors import (
    AccountDisabledError,
    InvalidCredentialsError,
    PermissionDeniedError,
)
from src.ft_gateway.auth.jwt_handler import decode_token
from src.ft_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the Bearer token and load the caller.

    The role is taken from the users table, not from the token, so a role
    change by an admin applies on the next request.

    Raises HTTP 401 if the token is missing, invalid, expired or the user is gone.
    Raises AccountDisabledError (403) if the account is disabled.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[UserModel]]:
    """Dependency factory: caller's role must be one of ``roles``."""
    allowed = {r.value for r in roles}

    async def _check(current_user: UserModel = Depends(get_current_user)) -> UserModel:
        if current_user.role not in allowed:
            raise PermissionDeniedError()
        return current_user

    return _check


require_admin = require_roles(UserRole.ADMIN)
require_user_or_admin = require_roles(UserRole.USER, UserRole.ADMIN)
require_any_role = require_roles(UserRole.ADMIN, UserRole.USER, UserRole.READ_ONLY)
