"""
Availability Engine

Pure scheduling logic shared by every booking flow:
- Slot generation (slots.py)
- Booking admission (admission.py)
- Overlap detection (overlap.py)
- Recurring bookings (recurrence.py)
- Cancellation policy (policy.py)
- Status lifecycle (lifecycle.py)

Nothing in this package touches the database or the clock.
"""

from slotwise.scheduling.admission import Admission, RejectionReason, admit_booking
from slotwise.scheduling.errors import (
    BookingValidationError,
    CancellationPolicyError,
    InvalidStatusTransition,
    OutsideWorkingHoursError,
    SchedulingError,
    SlotUnavailableError,
)
from slotwise.scheduling.lifecycle import can_transition, ensure_transition, is_terminal
from slotwise.scheduling.policy import cancellation_allowed, ensure_cancellation_allowed
from slotwise.scheduling.recurrence import (
    MAX_RECURRENCE_DAYS,
    RecurrencePlan,
    expand_recurrence,
    occurrence_dates,
    plan_recurring_batch,
    select_group_cancellations,
)
from slotwise.scheduling.slots import compute_available_slots
from slotwise.scheduling.types import (
    AppointmentStatus,
    Booking,
    BreakTime,
    BusinessHours,
    CancellationPolicy,
    DaySchedule,
    RecurrenceFrequency,
)

__all__ = [
    "Admission",
    "AppointmentStatus",
    "Booking",
    "BookingValidationError",
    "BreakTime",
    "BusinessHours",
    "CancellationPolicy",
    "CancellationPolicyError",
    "DaySchedule",
    "InvalidStatusTransition",
    "MAX_RECURRENCE_DAYS",
    "OutsideWorkingHoursError",
    "RecurrenceFrequency",
    "RecurrencePlan",
    "RejectionReason",
    "SchedulingError",
    "SlotUnavailableError",
    "admit_booking",
    "can_transition",
    "cancellation_allowed",
    "compute_available_slots",
    "ensure_cancellation_allowed",
    "ensure_transition",
    "expand_recurrence",
    "is_terminal",
    "occurrence_dates",
    "plan_recurring_batch",
    "select_group_cancellations",
]
