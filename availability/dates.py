"""Date coercion shared by every inbound boundary of the engine.

Values arrive as ISO strings, epoch-millisecond numbers (browser clients) or
real date objects. `coerce_date` is the one rule for all of them and it never
raises: anything it cannot read is treated as absent.
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime


def coerce_date(value: object) -> date | None:
    """Best-effort conversion of a date-like value into a calendar date.

    Args:
        value: `date`, `datetime`, ISO-8601 string, or epoch milliseconds.

    Returns:
        The calendar date, or None when the value is missing or unreadable.

    Notes:
        - Strings use the calendar date as written; a time-of-day or offset does
          not shift the day.
        - Numbers are epoch milliseconds interpreted in UTC.
        - Booleans are rejected even though they are ints.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_iso(value)
    if isinstance(value, (int, float)):
        return _from_epoch_ms(value)
    return None


def _parse_iso(raw: str) -> date | None:
    """Parse `YYYY-MM-DD` or an ISO date-time string."""

    text = raw.strip()
    if not text:
        return None
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text[-1:] in {"Z", "z"}:
            text = f"{text[:-1]}+00:00"
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _from_epoch_ms(value: int | float) -> date | None:
    """Convert epoch milliseconds into a UTC calendar date."""

    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=UTC).date()
    except (OverflowError, OSError, ValueError):
        return None
