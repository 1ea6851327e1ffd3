"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    READ_ONLY = "read-only"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


# Display / histogram order
ROLE_ORDER: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.USER, UserRole.READ_ONLY)
