"""Overlap detection between a requested interval and existing bookings.

An existing booking occupies time when:
- it is on the same calendar day
- it is not cancelled (pending, confirmed, completed, no_show and blocked all count)
- it belongs to the same staff member, is unassigned, or the request is not
  staff-scoped at all
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from slotwise.scheduling.intervals import Interval
from slotwise.scheduling.types import AppointmentStatus, Booking


def occupying_bookings(
    bookings: Iterable[Booking],
    day: date,
    staff_id: Optional[UUID] = None,
    exclude_id: Optional[UUID] = None,
) -> list[Booking]:
    """Bookings that take capacity away from ``staff_id`` on ``day``, sorted by start."""
    result = []
    for booking in bookings:
        if booking.status == AppointmentStatus.CANCELLED:
            continue
        if booking.appointment_date != day:
            continue
        if exclude_id is not None and booking.id == exclude_id:
            continue
        # Unassigned bookings and business-wide blocks hold every staff member.
        if staff_id is not None and booking.staff_id is not None and booking.staff_id != staff_id:
            continue
        result.append(booking)

    result.sort(key=lambda b: b.start_minutes)
    return result


def find_conflicts(candidate: Interval, busy: Iterable[Booking]) -> list[Booking]:
    """Bookings whose ``[start, end)`` intersects ``candidate``."""
    return [b for b in busy if b.interval.overlaps(candidate)]


def leaves_small_gap(candidate: Interval, busy: list[Booking], min_gap_minutes: int) -> bool:
    """True if ``candidate`` would leave a positive gap shorter than ``min_gap_minutes``
    to the booking right before or right after it."""
    if min_gap_minutes <= 0:
        return False

    previous_end = None
    next_start = None
    for booking in busy:
        interval = booking.interval
        if interval.end <= candidate.start:
            if previous_end is None or interval.end > previous_end:
                previous_end = interval.end
        elif interval.start >= candidate.end:
            if next_start is None or interval.start < next_start:
                next_start = interval.start

    if previous_end is not None and 0 < candidate.start - previous_end < min_gap_minutes:
        return True
    if next_start is not None and 0 < next_start - candidate.end < min_gap_minutes:
        return True
    return False
