"""
Numeric helpers shared by the calculators.

Stored amounts arrive as Decimal (or, from free-form metadata, as strings
or anything else); the calculators work in float and round on output.
"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

SECONDS_PER_DAY = 24 * 60 * 60


def to_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce a value to a finite float.

    Numbers and numeric strings convert; None, booleans, non-numeric
    strings, NaN and infinities all collapse to `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


def round_currency(value: float) -> float:
    """Round to cents; non-finite values become 0."""
    if not math.isfinite(value):
        return 0.0
    return round(value, 2)


def round_months(value: float) -> Optional[float]:
    """Round a month count to 1 decimal; an unbounded timeline becomes None."""
    if not math.isfinite(value):
        return None
    return max(0.0, round(value, 1))


def percentage(part: float, whole: float) -> float:
    """part / whole * 100, or 0 when whole is not positive."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def clamp_int(
    value: Any,
    default: int,
    minimum: int,
    maximum: int,
) -> int:
    """
    Floor a caller-supplied count and clamp it into [minimum, maximum].

    Absent, zero, NaN and non-numeric input falls back to `default`;
    anything else outside the range, infinities included, snaps to the
    nearest bound.
    """
    if isinstance(value, (float, Decimal)) and math.isinf(value):
        return maximum if value > 0 else minimum
    number = to_number(value, default=0.0)
    if number == 0:
        return default
    return min(max(math.floor(number), minimum), maximum)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    """Midnight UTC of a calendar date."""
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def days_until(moment: datetime, now: datetime) -> int:
    """Whole days from now until moment, rounded up (negative when past)."""
    delta = (as_utc(moment) - as_utc(now)).total_seconds()
    return math.ceil(delta / SECONDS_PER_DAY)


def parse_moment(value: Any) -> Optional[datetime]:
    """
    Parse an ISO date or datetime string (or date object) into a UTC datetime.

    Returns None for anything that is not a valid date.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return start_of_day(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None
