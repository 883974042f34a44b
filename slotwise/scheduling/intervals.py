"""Minute-of-day arithmetic used by every scheduling check.

Times travel through the system as 24-hour ``"HH:MM"`` strings; internally they
are minutes since midnight so overlap tests are plain integer comparisons.
"""

import re
from datetime import date
from typing import NamedTuple

from slotwise.scheduling.errors import BookingValidationError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")


class Interval(NamedTuple):
    """Half-open ``[start, end)`` interval in minutes since midnight."""

    start: int
    end: int

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end


def time_to_minutes(value: str) -> int:
    """Convert HH:MM string to minutes since midnight."""
    match = _TIME_RE.match(value or "")
    if not match:
        raise BookingValidationError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise BookingValidationError(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM string."""
    h = minutes // 60
    m = minutes % 60
    return f"{h:02d}:{m:02d}"


def sunday_weekday(day: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday, the convention stored on profiles."""
    return (day.weekday() + 1) % 7
