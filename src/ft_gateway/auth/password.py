"""Password hashing with the ``bcrypt`` library (passlib is unmaintained)."""

import bcrypt

_ROUNDS = 10


def hash_password(plain: str) -> str:
    """Hash a plain-text password. Returns the utf-8 bcrypt hash string."""
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(_ROUNDS))
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
