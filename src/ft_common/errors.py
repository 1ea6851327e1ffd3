"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Transaction
  3xxx: Category
  4xxx: Access / Admin
  9xxx: System

The numeric code is the stable machine-readable kind; the message is for humans.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    """Missing or malformed input, raised before any side effect."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


class NotFoundError(AppError):
    """Entity does not exist or is not visible to the caller's scope."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "User with this email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid email or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Refresh token is invalid or expired", 401)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1005, f"User not found: {user_id}")


class CannotDeleteSelfError(ValidationError):
    def __init__(self) -> None:
        super().__init__(1006, "Cannot delete your own account")


# --- 2xxx: Transaction ---

class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: int) -> None:
        super().__init__(2001, f"Transaction not found: {transaction_id}")


class InvalidAmountError(ValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Invalid amount: {detail}")


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(2003, f"Missing required field: {field}")


# --- 3xxx: Category ---

class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: int) -> None:
        super().__init__(3001, f"Category not found: {category_id}")


class CategoryExistsError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(3002, f"Category already exists: {name}", 409)


class CategoryInactiveError(ValidationError):
    def __init__(self, category_id: int) -> None:
        super().__init__(3003, f"Category is inactive: {category_id}")


class UnknownCategoryReferenceError(ValidationError):
    """A write references a category id that does not exist."""

    def __init__(self, category_id: int) -> None:
        super().__init__(3004, f"Referenced category does not exist: {category_id}")


# --- 4xxx: Access / Admin ---

class PermissionDeniedError(AppError):
    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(4001, detail, 403)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self, retry_after: int = 60) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)
        self.retry_after = retry_after


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class CacheUnavailableError(Exception):
    """Cache backend failure.

    Caught at the cache-aside boundary and treated as a miss; never reaches
    the API, hence not an AppError.
    """
