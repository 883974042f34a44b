"""Appointment status lifecycle."""

from slotwise.scheduling.errors import InvalidStatusTransition
from slotwise.scheduling.types import AppointmentStatus

TERMINAL_STATUSES = frozenset({
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
    AppointmentStatus.NO_SHOW,
})

# Statuses a booking may be created with.
INITIAL_STATUSES = frozenset({
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.BLOCKED,
})

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.BLOCKED: frozenset({AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def is_terminal(status: AppointmentStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: AppointmentStatus, new: AppointmentStatus) -> None:
    if not can_transition(current, new):
        raise InvalidStatusTransition(
            f"Cannot change appointment status from {current.value} to {new.value}"
        )
