"""Utility functions for calendar, number and display handling."""

from __future__ import annotations

import math
from calendar import monthrange
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator

# Indexed by the report service's weekday convention (0 = Sunday)
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

PLACEHOLDER = "—"


def js_weekday(d: date) -> int:
    """Weekday index with Sunday = 0 through Saturday = 6."""
    return d.isoweekday() % 7


def month_bounds(d: date) -> tuple[date, date]:
    """Get the first and last day of the month containing d."""
    first_day = d.replace(day=1)
    last_day = d.replace(day=monthrange(d.year, d.month)[1])
    return first_day, last_day


def iter_month_days(d: date) -> Iterator[date]:
    """Yield every day of the month containing d, first to last inclusive."""
    current, last_day = month_bounds(d)
    while current <= last_day:
        yield current
        current += timedelta(days=1)


def month_range_ms(d: date) -> tuple[int, int]:
    """Epoch milliseconds for local midnight on the 1st and 23:59:59 on the last day."""
    first_day, last_day = month_bounds(d)
    start = datetime.combine(first_day, time.min).astimezone()
    end = datetime.combine(last_day, time(23, 59, 59)).astimezone()
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


def finite_float(value: Any) -> float | None:
    """Convert a number to a finite float, or None for bools, non-numbers and overflow."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        converted = float(value)
    except OverflowError:
        return None
    return converted if math.isfinite(converted) else None


def sanitise_number(value: Any) -> float | int | None:
    """Return value if it is a finite number, otherwise None."""
    if finite_float(value) is None:
        return None
    return value


def parse_decimal(val: Any) -> Decimal | None:
    """Parse user or stored input to a finite Decimal, or None if blank/invalid."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, Decimal):
        return val if val.is_finite() else None
    if isinstance(val, (int, float)):
        if isinstance(val, float) and not math.isfinite(val):
            return None
        return Decimal(str(val))
    text = str(val).strip()
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def parse_iso_date(val: str) -> date | None:
    """Parse YYYY-MM-DD, returning None for anything that is not a real date."""
    try:
        return date.fromisoformat(val.strip())
    except (ValueError, AttributeError):
        return None


def format_number(value: Any) -> str:
    """Group thousands and keep at most one decimal place."""
    text = f"{float(value):,.1f}"
    return text[:-2] if text.endswith(".0") else text


def format_hours(hours: Any) -> str:
    if sanitise_number(hours) is None:
        return PLACEHOLDER
    return f"{format_number(hours)} h"


def format_percentage(ratio: Any) -> str:
    if sanitise_number(ratio) is None:
        return PLACEHOLDER
    return f"{format_number(ratio * 100)}%"


def format_timestamp(value_ms: Any) -> str:
    if sanitise_number(value_ms) is None or value_ms <= 0:
        return PLACEHOLDER
    return datetime.fromtimestamp(value_ms / 1000).strftime("%d %b %Y %H:%M")
