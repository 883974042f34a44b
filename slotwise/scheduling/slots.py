"""Slot generation for the booking calendar.

A single pure function shared by the public booking page and the owner's
scheduler, so both see exactly the same grid.
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from slotwise.scheduling.errors import BookingValidationError
from slotwise.scheduling.intervals import Interval, minutes_to_time
from slotwise.scheduling.overlap import find_conflicts, leaves_small_gap, occupying_bookings
from slotwise.scheduling.types import Booking, BusinessHours


def compute_available_slots(
    hours: BusinessHours,
    appointments: Iterable[Booking],
    day: date,
    duration_minutes: int,
    staff_id: Optional[UUID] = None,
    not_before: Optional[int] = None,
) -> list[str]:
    """Return bookable start times (``"HH:MM"``) for ``day``.

    Args:
        hours: the business's working-hours configuration
        appointments: existing bookings; anything not on ``day`` is ignored
        day: requested calendar day
        duration_minutes: length of the service being booked
        staff_id: restrict conflicts to one staff member (None = whole business)
        not_before: minute-of-day before which no slot may start (used for "today")

    Algorithm:
        1. Closed day -> no slots
        2. Walk the grid from opening time in ``slot_interval`` steps while the
           slot still ends by closing time
        3. Drop slots touching the break, an existing booking, or leaving a gap
           shorter than ``min_gap_minutes``
    """
    if duration_minutes <= 0:
        raise BookingValidationError("duration must be a positive number of minutes")

    window = hours.window_for(day)
    if window is None:
        return []

    busy = occupying_bookings(appointments, day, staff_id)
    break_window = hours.break_interval()

    slots = []
    current = window.start
    while current + duration_minutes <= window.end:
        candidate = Interval(current, current + duration_minutes)
        current += hours.slot_interval

        if not_before is not None and candidate.start < not_before:
            continue
        if break_window is not None and candidate.overlaps(break_window):
            continue
        if find_conflicts(candidate, busy):
            continue
        if leaves_small_gap(candidate, busy, hours.min_gap_minutes):
            continue

        slots.append(minutes_to_time(candidate.start))

    return slots
