"""Customer cancellation policy."""

from datetime import datetime, timedelta

from slotwise.scheduling.errors import CancellationPolicyError
from slotwise.scheduling.types import Booking, CancellationPolicy


def cancellation_allowed(booking: Booking, policy: CancellationPolicy, now: datetime) -> bool:
    """True if ``booking`` may still be cancelled at ``now``.

    ``now`` must be a naive datetime in the business's local time, the same
    frame ``appointment_date``/``start_time`` are stored in.
    """
    if not policy.enabled:
        return True
    return booking.start_datetime - now >= timedelta(hours=policy.hours_before)


def ensure_cancellation_allowed(booking: Booking, policy: CancellationPolicy, now: datetime) -> None:
    if not cancellation_allowed(booking, policy, now):
        raise CancellationPolicyError(
            f"Appointments cannot be cancelled less than {policy.hours_before} hours in advance"
        )
