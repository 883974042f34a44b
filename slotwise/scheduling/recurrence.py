"""Recurring bookings: expand a template into dated occurrences and admit them.

A recurring request is a partial-success batch. Each occurrence is admitted on
its own; the ones that collide or fall on a closed day are skipped and reported
back instead of failing the whole series.
"""

import uuid
from datetime import date, timedelta
from typing import Iterable, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from slotwise.scheduling.admission import RejectionReason, admit_booking
from slotwise.scheduling.errors import BookingValidationError
from slotwise.scheduling.lifecycle import is_terminal
from slotwise.scheduling.types import Booking, BusinessHours, RecurrenceFrequency

MAX_RECURRENCE_DAYS = 730

_FIXED_STEPS = {
    RecurrenceFrequency.WEEKLY: timedelta(days=7),
    RecurrenceFrequency.BIWEEKLY: timedelta(days=14),
}


def occurrence_dates(
    start: date,
    frequency: RecurrenceFrequency,
    until: date,
    max_days: int = MAX_RECURRENCE_DAYS,
) -> list[date]:
    """Dates from ``start`` to ``until`` inclusive.

    Monthly steps are always taken from the original day-of-month, so a series
    starting on the 31st lands on Feb 28/29 and goes back to the 31st in March.
    """
    if until < start:
        raise BookingValidationError("until_date must not be before the first occurrence")
    if (until - start).days > max_days:
        raise BookingValidationError(
            f"Recurring bookings can extend at most {max_days} days ahead"
        )

    dates = []
    index = 0
    current = start
    while current <= until:
        dates.append(current)
        index += 1
        if frequency == RecurrenceFrequency.MONTHLY:
            current = start + relativedelta(months=index)
        else:
            current = start + _FIXED_STEPS[frequency] * index
    return dates


def expand_recurrence(
    template: Booking,
    frequency: RecurrenceFrequency,
    until_date: date,
    group_id: Optional[UUID] = None,
    max_days: int = MAX_RECURRENCE_DAYS,
) -> list[Booking]:
    """Copies of ``template`` for every occurrence date, sharing one group id."""
    group_id = group_id or uuid.uuid4()
    return [
        template.model_copy(update={
            "id": None,
            "appointment_date": day,
            "is_recurring": True,
            "recurrence_group_id": group_id,
        })
        for day in occurrence_dates(template.appointment_date, frequency, until_date, max_days)
    ]


class SkippedOccurrence(BaseModel):
    booking: Booking
    reason: RejectionReason
    detail: Optional[str] = None


class RecurrencePlan(BaseModel):
    accepted: list[Booking] = Field(default_factory=list)
    skipped: list[SkippedOccurrence] = Field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.accepted)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def plan_recurring_batch(
    occurrences: Iterable[Booking],
    existing: Iterable[Booking],
    hours: BusinessHours,
) -> RecurrencePlan:
    """Admit each occurrence independently against ``existing``."""
    existing = list(existing)
    plan = RecurrencePlan()
    for occurrence in occurrences:
        admission = admit_booking(occurrence, existing, hours)
        if admission.accepted:
            plan.accepted.append(occurrence)
            existing.append(occurrence)
        else:
            plan.skipped.append(SkippedOccurrence(
                booking=occurrence,
                reason=admission.reason,
                detail=admission.detail,
            ))
    return plan


def select_group_cancellations(
    members: Iterable[Booking],
    as_of: date,
) -> list[Booking]:
    """Members of a recurrence group that a "cancel all future" action touches."""
    return [
        m for m in members
        if m.appointment_date >= as_of and not is_terminal(m.status)
    ]
