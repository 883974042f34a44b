"""Booking admission: decide whether a candidate booking may be stored."""

import enum
from typing import Iterable, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from slotwise.scheduling.errors import (
    BookingValidationError,
    OutsideWorkingHoursError,
    SlotUnavailableError,
)
from slotwise.scheduling.overlap import find_conflicts, occupying_bookings
from slotwise.scheduling.types import AppointmentStatus, Booking, BusinessHours


class RejectionReason(str, enum.Enum):
    OVERLAP = "overlap"
    OUTSIDE_WORKING_HOURS = "outside_working_hours"


class Admission(BaseModel):
    accepted: bool
    reason: Optional[RejectionReason] = None
    detail: Optional[str] = None
    conflicts: list[UUID] = Field(default_factory=list)

    def raise_for_rejection(self) -> None:
        """Turn a rejection into the matching typed error."""
        if self.accepted:
            return
        if self.reason == RejectionReason.OVERLAP:
            raise SlotUnavailableError(self.detail or "Time slot is already taken", self.conflicts)
        raise OutsideWorkingHoursError(self.detail or "Requested time is outside working hours")


def admit_booking(
    candidate: Booking,
    existing: Iterable[Booking],
    hours: BusinessHours,
) -> Admission:
    """Check ``candidate`` against working hours and existing bookings.

    Working hours are checked first: a request outside them is reported as such
    even if it also collides with something.
    """
    if candidate.status == AppointmentStatus.CANCELLED:
        raise BookingValidationError("A cancelled appointment cannot be booked")

    interval = candidate.interval
    # Raises for bookings running past midnight.
    end_time = candidate.end_time

    window = hours.window_for(candidate.appointment_date)
    if window is None:
        return Admission(
            accepted=False,
            reason=RejectionReason.OUTSIDE_WORKING_HOURS,
            detail=f"{candidate.appointment_date.isoformat()} is not a working day",
        )
    if not window.contains(interval):
        return Admission(
            accepted=False,
            reason=RejectionReason.OUTSIDE_WORKING_HOURS,
            detail=f"{candidate.start_time}-{end_time} is outside working hours",
        )
    break_window = hours.break_interval()
    if break_window is not None and interval.overlaps(break_window):
        return Admission(
            accepted=False,
            reason=RejectionReason.OUTSIDE_WORKING_HOURS,
            detail=f"{candidate.start_time}-{end_time} overlaps the break",
        )

    busy = occupying_bookings(
        existing, candidate.appointment_date, candidate.staff_id, exclude_id=candidate.id
    )
    conflicts = find_conflicts(interval, busy)
    if conflicts:
        return Admission(
            accepted=False,
            reason=RejectionReason.OVERLAP,
            detail=f"Time slot {candidate.start_time} is not available",
            conflicts=[b.id for b in conflicts if b.id is not None],
        )

    return Admission(accepted=True)
