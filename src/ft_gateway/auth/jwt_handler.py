"""JWT token creation and verification.

HS256 with the shared JWT_SECRET. Tokens carry the caller identity (``sub``)
and role so clients can render role-aware UI, but the role used for access
decisions is always re-read from the users table by get_current_user.

No token revocation: logout is client-side, tokens live until expiry.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.ft_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _encode(user_id: str, role: str, token_type: str, ttl: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "role": role,
        "type": token_type,
        "iat": now,
        "exp": now + ttl,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(user_id: str, role: str) -> str:
    """Issue an access token (default: 24 h)."""
    return _encode(user_id, role, "access", _ACCESS_EXPIRE)


def create_refresh_token(user_id: str, role: str) -> str:
    """Issue a refresh token (default: 7 days). Not rotated on use."""
    return _encode(user_id, role, "refresh", _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode and validate a JWT token.

    Args:
        token: Raw JWT string.
        expected_type: "access" or "refresh". Strictly enforced so a refresh
                       token can never be presented as an access token.

    Raises:
        InvalidCredentialsError: invalid/expired and expected_type="access".
        InvalidRefreshTokenError: invalid/expired and expected_type="refresh".
    """
    payload: dict[str, str] = {}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],
        )
    except JWTError:
        _raise_auth_error(expected_type)

    if payload.get("type") != expected_type:
        _raise_auth_error(expected_type)

    return payload


def _raise_auth_error(expected_type: str) -> None:
    if expected_type == "access":
        raise InvalidCredentialsError()
    raise InvalidRefreshTokenError()
