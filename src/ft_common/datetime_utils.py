"""UTC datetime and calendar helpers."""

import calendar
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def year_bounds(year: int) -> tuple[date, date]:
    """Inclusive [Jan 1, Dec 31] of ``year``."""
    return date(year, 1, 1), date(year, 12, 31)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Inclusive first and last calendar day of ``month``."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_abbr(month: int) -> str:
    """1 -> 'Jan'."""
    return calendar.month_abbr[month]


def month_name(month: int) -> str:
    """1 -> 'January'."""
    return calendar.month_name[month]
