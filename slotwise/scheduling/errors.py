"""Typed rejections raised by the availability engine.

Every error carries the HTTP status and the machine-readable code the API
returns, so routers never have to translate them one by one.
"""


class SchedulingError(Exception):
    """Base class for booking rejections."""

    status_code = 400
    code = "scheduling_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(SchedulingError, ValueError):
    """Malformed date, time, duration or request parameters."""

    code = "validation_error"


class InvalidStatusTransition(BookingValidationError):
    """Requested status change is not part of the appointment lifecycle."""

    code = "invalid_status_transition"


class SlotUnavailableError(SchedulingError):
    """The requested interval overlaps an existing booking."""

    status_code = 409
    code = "overlap"

    def __init__(self, message: str, conflicts: list | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


class OutsideWorkingHoursError(SchedulingError):
    """The requested interval falls outside the configured day, hours or break."""

    code = "outside_working_hours"


class CancellationPolicyError(SchedulingError):
    """Cancellation requested inside the business's no-cancel window."""

    code = "policy_violation"
