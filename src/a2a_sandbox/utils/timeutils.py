"""Date and time helpers.

Times of day travel as zero-padded ``HH:mm`` strings and dates as
``YYYY-MM-DD``; interval arithmetic is done in minutes since midnight.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_minutes(value: str) -> int:
    """Convert ``H:mm``/``HH:mm`` to minutes since midnight.

    Raises:
        ValueError: If the value is not a valid time of day
    """
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time (expected HH:mm): {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59 or (hours == 24 and minutes != 0):
        raise ValueError(f"Invalid time (expected HH:mm): {value!r}")
    return hours * 60 + minutes


def from_minutes(total: int) -> str:
    """Format minutes since midnight as ``HH:mm``."""
    hours, minutes = divmod(total, 60)
    return f"{hours:02d}:{minutes:02d}"


def normalize_time(value: str) -> str:
    """Zero-pad a time of day, e.g. ``9:00`` -> ``09:00``."""
    return from_minutes(to_minutes(value))


def add_hour(value: str) -> str:
    """Return the time one hour later, wrapping at midnight."""
    return from_minutes((to_minutes(value) + 60) % (24 * 60))


def is_valid_date(value: str) -> bool:
    """Check a ``YYYY-MM-DD`` calendar date."""
    if not _DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def today_string() -> str:
    """Today's local date as ``YYYY-MM-DD``."""
    return date.today().isoformat()


def resolve_date(value: str | None) -> str:
    """Map ``None``/``"today"`` to today's date; pass anything else through."""
    if not value or value == "today":
        return today_string()
    return value


def current_timestamp() -> str:
    """Current UTC time in ISO 8601."""
    return datetime.now(UTC).isoformat()


def intervals_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """Half-open overlap test for ``[start1, end1)`` and ``[start2, end2)``."""
    return to_minutes(start1) < to_minutes(end2) and to_minutes(start2) < to_minutes(end1)
