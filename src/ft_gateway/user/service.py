"""User domain service: register, login, refresh.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import UserRole
from src.ft_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
)
from src.ft_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ft_gateway.auth.password import hash_password, verify_password
from src.ft_gateway.user.db_models import UserModel


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    async def register(
        self,
        email: str,
        password: str,
        db: AsyncSession,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserModel:
        """Self-registration. Always creates a plain ``user``; other roles are admin-assigned."""
        email = email.lower()
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            role=UserRole.USER.value,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        db.add(user)
        await db.flush()  # populate id/created_at without committing
        await db.refresh(user)
        return user

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError so
        the endpoint cannot be used to enumerate accounts.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id), user.role),
            create_refresh_token(str(user.id), user.role),
        )

    async def refresh(self, refresh_token: str, db: AsyncSession) -> str:
        """Validate a refresh token and issue an access token with the user's current role."""
        payload = decode_token(refresh_token, expected_type="refresh")
        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except (KeyError, ValueError):
            raise InvalidRefreshTokenError() from None

        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise InvalidRefreshTokenError()
        if not user.is_active:
            raise AccountDisabledError()
        return create_access_token(str(user.id), user.role)
