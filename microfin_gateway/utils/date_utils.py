"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta

from microfin_gateway.domain.exceptions import InvalidArgumentError


def ensure_date(value, field: str = "date") -> date:
    """Return value as a naive calendar date (datetimes lose their time part, no tz conversion)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidArgumentError(f"{field} must be a calendar date, got {type(value).__name__}", field)


def advance_date(start: date, length: int, unit: str) -> date:
    """
    Move start forward by length units of day/week/month/year.

    Months and years clamp to the last valid day of the target month:
    2024-01-31 + 1 month -> 2024-02-29, 2024-02-29 + 1 year -> 2025-02-28.
    """
    if unit not in ("day", "week", "month", "year"):
        raise InvalidArgumentError(f"Unknown term unit: {unit!r}", "term_unit")

    try:
        if unit == "day":
            return start + timedelta(days=length)
        if unit == "week":
            return start + timedelta(days=length * 7)
        if unit == "month":
            return start + relativedelta(months=length)
        return start + relativedelta(years=length)
    except (OverflowError, ValueError):
        raise InvalidArgumentError(f"Due date {length} {unit}(s) after {start} is out of range", "term_length")
