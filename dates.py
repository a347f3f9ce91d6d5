"""Pure calendar calculations for the monthly habit grid."""

import calendar
from datetime import date

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
WEEK_BUCKETS = (1, 2, 3, 4, 5)


def _check_month(month: int):
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be in 1..12, got {month}.")


def days_in_month(year: int, month: int) -> int:
    """Number of days in the month, leap years included."""
    _check_month(month)
    return calendar.monthrange(year, month)[1]


def format_date(year: int, month: int, day: int) -> str:
    """Canonical YYYY-MM-DD key shared with the habit service."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date(date_str: str) -> tuple[int, int, int]:
    """Split a YYYY-MM-DD string into (year, month, day)."""
    try:
        parsed = date.fromisoformat(date_str.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Not a YYYY-MM-DD date: {date_str!r}") from None
    return parsed.year, parsed.month, parsed.day


def week_bucket(day: int) -> int:
    """Fixed 7-day bucket of a day-of-month: 1-7 -> 1, 8-14 -> 2, ... 29-31 -> 5.

    Not aligned to calendar weeks.
    """
    if not 1 <= day <= 31:
        raise ValueError(f"Day must be in 1..31, got {day}.")
    return min((day + 6) // 7, len(WEEK_BUCKETS))


def weekday_label(year: int, month: int, day: int) -> str:
    return DAY_ABBR[date(year, month, day).weekday()]


def month_name(month: int) -> str:
    _check_month(month)
    return calendar.month_name[month]


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
