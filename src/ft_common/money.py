"""Decimal money utilities.

All amounts are ``Decimal`` with exactly 2 fractional digits (NUMERIC(12, 2)
in the database). No float anywhere on the money path.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize to 2 places. Raises ValueError for non-numeric input."""
    try:
        return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a decimal amount: {value!r}") from exc


def validate_amount(value: Decimal) -> None:
    """Amount must be non-negative with at most 2 fractional digits."""
    if not value.is_finite():
        raise ValueError("Amount must be a finite number")
    if value < 0:
        raise ValueError(f"Amount must be non-negative, got {value}")
    exponent = value.as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise ValueError(f"Amount supports at most 2 decimal places, got {value}")


def money_to_display(amount: Decimal) -> str:
    """Decimal('1500') -> '$1,500.00', Decimal('-12') -> '-$12.00'."""
    q = to_money(amount)
    if q < 0:
        return f"-${-q:,.2f}"
    return f"${q:,.2f}"


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, quantized; 0 when whole is 0."""
    if whole == 0:
        return ZERO
    return to_money(part / whole * 100)
