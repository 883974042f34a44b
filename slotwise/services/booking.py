"""Booking store: the database side of the availability engine.

The engine decides; this module reads the bookings it needs, runs the decision
and persists the result. Every check-then-insert runs under:

1. an in-process ``asyncio.Lock`` per (business, day)
2. ``SELECT ... FOR UPDATE`` on the business row (PostgreSQL; SQLite already
   serializes writers)
3. the ``uq_appointments_active_slot`` partial unique index as a last resort

so two concurrent requests for the same slot can never both be accepted.
"""

import asyncio
import logging
import uuid
import weakref
from contextlib import AsyncExitStack
from datetime import date, datetime
from typing import Iterable, Optional
from uuid import UUID

import pytz
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from slotwise.core.config import settings
from slotwise.models.appointment import Appointment
from slotwise.models.business import Business
from slotwise.scheduling import (
    AppointmentStatus,
    Booking,
    RecurrenceFrequency,
    RecurrencePlan,
    SlotUnavailableError,
    admit_booking,
    compute_available_slots,
    ensure_cancellation_allowed,
    ensure_transition,
    expand_recurrence,
    plan_recurring_batch,
    select_group_cancellations,
)
from slotwise.scheduling.errors import BookingValidationError
from slotwise.scheduling.lifecycle import is_terminal

logger = logging.getLogger(__name__)

_day_locks: "weakref.WeakValueDictionary[tuple[UUID, date], asyncio.Lock]" = weakref.WeakValueDictionary()


def _day_lock(business_id: UUID, day: date) -> asyncio.Lock:
    """Lock shared by every booking attempt for one business on one day.

    Unassigned bookings conflict with every staff member, so the key is the whole
    business day rather than a single staff member's day.
    """
    key = (business_id, day)
    lock = _day_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _day_locks[key] = lock
    return lock


async def _lock_business_row(db: AsyncSession, business_id: UUID) -> None:
    await db.execute(select(Business.id).where(Business.id == business_id).with_for_update())


def business_timezone(business: Business):
    tz_name = business.timezone or settings.DEFAULT_TIMEZONE
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        logger.warning("Invalid timezone '%s' for business %s, using UTC", tz_name, business.id)
        return pytz.UTC


def local_now(business: Business) -> datetime:
    """Current wall-clock time at the business, as a naive datetime."""
    return datetime.now(business_timezone(business)).replace(tzinfo=None)


def _not_before(business: Business, day: date, now: Optional[datetime] = None) -> Optional[int]:
    """Current minute of day when ``day`` is today at the business, else None."""
    now = now or local_now(business)
    return now.hour * 60 + now.minute if day == now.date() else None


async def get_active_business_by_slug(db: AsyncSession, slug: str) -> Optional[Business]:
    """Resolve a public booking identifier (case-insensitive)."""
    result = await db.execute(
        select(Business).where(
            func.lower(Business.slug) == slug.lower(),
            Business.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def load_bookings(db: AsyncSession, business_id: UUID, days: Iterable[date]) -> list[Booking]:
    """Non-cancelled bookings of ``business_id`` on any of ``days``."""
    days = list(days)
    if not days:
        return []
    result = await db.execute(
        select(Appointment).where(
            Appointment.business_id == business_id,
            Appointment.appointment_date.in_(days),
            Appointment.status != AppointmentStatus.CANCELLED,
        )
    )
    return [Booking.model_validate(row) for row in result.scalars().all()]


async def available_times(
    db: AsyncSession,
    business: Business,
    day: date,
    duration_minutes: int,
    staff_id: Optional[UUID] = None,
    now: Optional[datetime] = None,
) -> list[str]:
    """Bookable start times for ``day``; today's elapsed slots are hidden."""
    bookings = await load_bookings(db, business.id, [day])
    return compute_available_slots(
        business.business_hours(),
        bookings,
        day,
        duration_minutes,
        staff_id=staff_id,
        not_before=_not_before(business, day, now),
    )


async def book_appointment(
    db: AsyncSession,
    business: Business,
    fields: dict,
    offered_only: bool = False,
    now: Optional[datetime] = None,
) -> Appointment:
    """Admit and store a single appointment.

    ``fields`` are Appointment column values; ``appointment_date``,
    ``start_time`` and ``duration_minutes`` are required. With ``offered_only``
    the start must also be one of the times ``available_times`` lists (public
    bookings: on the grid, respecting the minimum gap, not already past).
    """
    candidate = Booking(
        appointment_date=fields["appointment_date"],
        start_time=fields["start_time"],
        duration_minutes=fields["duration_minutes"],
        status=fields.get("status", AppointmentStatus.PENDING),
        staff_id=fields.get("staff_id"),
    )
    hours = business.business_hours()

    async with _day_lock(business.id, candidate.appointment_date):
        await _lock_business_row(db, business.id)
        existing = await load_bookings(db, business.id, [candidate.appointment_date])

        admission = admit_booking(candidate, existing, hours)
        if not admission.accepted:
            logger.info(
                "Booking rejected for business %s on %s at %s: %s",
                business.id, candidate.appointment_date, candidate.start_time, admission.reason.value,
            )
            admission.raise_for_rejection()

        if offered_only:
            offered = compute_available_slots(
                hours,
                existing,
                candidate.appointment_date,
                candidate.duration_minutes,
                staff_id=candidate.staff_id,
                not_before=_not_before(business, candidate.appointment_date, now),
            )
            if candidate.start_time not in offered:
                logger.info(
                    "Booking rejected for business %s on %s at %s: not an offered slot",
                    business.id, candidate.appointment_date, candidate.start_time,
                )
                raise SlotUnavailableError(f"Time slot {candidate.start_time} is not available")

        appointment = Appointment(
            **fields,
            business_id=business.id,
            end_time=candidate.end_time,
        )
        db.add(appointment)
        await _commit_or_overlap(db, candidate)

    await db.refresh(appointment)
    logger.info(
        "Booked appointment %s for business %s on %s %s-%s (%s)",
        appointment.id, business.id, appointment.appointment_date,
        appointment.start_time, appointment.end_time, appointment.status.value,
    )
    return appointment


class RecurringBookingResult(BaseModel):
    recurrence_group_id: UUID
    plan: RecurrencePlan


async def book_recurring(
    db: AsyncSession,
    business: Business,
    fields: dict,
    frequency: RecurrenceFrequency,
    until_date: date,
) -> RecurringBookingResult:
    """Expand a recurring request and store every occurrence that is free.

    Occurrences that collide or fall outside working hours are skipped; the
    rest are stored in one transaction.
    """
    template = Booking(
        appointment_date=fields["appointment_date"],
        start_time=fields["start_time"],
        duration_minutes=fields["duration_minutes"],
        status=fields.get("status", AppointmentStatus.CONFIRMED),
        staff_id=fields.get("staff_id"),
    )
    group_id = uuid.uuid4()
    occurrences = expand_recurrence(
        template, frequency, until_date, group_id, max_days=settings.MAX_RECURRENCE_DAYS
    )
    days = sorted({o.appointment_date for o in occurrences})
    hours = business.business_hours()

    async with AsyncExitStack() as stack:
        # Sorted acquisition keeps overlapping batches from deadlocking.
        for day in days:
            await stack.enter_async_context(_day_lock(business.id, day))
        await _lock_business_row(db, business.id)

        existing = await load_bookings(db, business.id, days)
        plan = plan_recurring_batch(occurrences, existing, hours)

        base = {k: v for k, v in fields.items() if k != "appointment_date"}
        db.add_all([
            Appointment(
                **base,
                business_id=business.id,
                appointment_date=occurrence.appointment_date,
                end_time=occurrence.end_time,
                is_recurring=True,
                recurrence_group_id=group_id,
            )
            for occurrence in plan.accepted
        ])
        await _commit_or_overlap(db, template)

    logger.info(
        "Recurring booking %s for business %s: %d created, %d skipped",
        group_id, business.id, plan.created_count, plan.skipped_count,
    )
    return RecurringBookingResult(recurrence_group_id=group_id, plan=plan)


async def reschedule_appointment(
    db: AsyncSession,
    business: Business,
    appointment: Appointment,
    changes: dict,
) -> Appointment:
    """Apply edits; moves in time are re-admitted against the new day."""
    timing_keys = {"appointment_date", "start_time", "duration_minutes", "staff_id"}
    timing_changed = any(
        key in changes and changes[key] != getattr(appointment, key) for key in timing_keys
    )

    if not timing_changed:
        for key, value in changes.items():
            setattr(appointment, key, value)
        await db.commit()
        await db.refresh(appointment)
        return appointment

    if is_terminal(appointment.status):
        raise BookingValidationError(
            f"A {appointment.status.value} appointment cannot be rescheduled"
        )

    candidate = Booking(
        id=appointment.id,
        appointment_date=changes.get("appointment_date", appointment.appointment_date),
        start_time=changes.get("start_time", appointment.start_time),
        duration_minutes=changes.get("duration_minutes", appointment.duration_minutes),
        status=appointment.status,
        staff_id=changes.get("staff_id", appointment.staff_id),
    )

    async with _day_lock(business.id, candidate.appointment_date):
        await _lock_business_row(db, business.id)
        existing = await load_bookings(db, business.id, [candidate.appointment_date])
        admit_booking(candidate, existing, business.business_hours()).raise_for_rejection()

        for key, value in changes.items():
            setattr(appointment, key, value)
        appointment.end_time = candidate.end_time
        await _commit_or_overlap(db, candidate)

    await db.refresh(appointment)
    logger.info(
        "Rescheduled appointment %s to %s %s-%s",
        appointment.id, appointment.appointment_date, appointment.start_time, appointment.end_time,
    )
    return appointment


async def change_status(
    db: AsyncSession,
    appointment: Appointment,
    new_status: AppointmentStatus,
) -> Appointment:
    ensure_transition(appointment.status, new_status)
    appointment.status = new_status
    await db.commit()
    await db.refresh(appointment)
    logger.info("Appointment %s is now %s", appointment.id, new_status.value)
    return appointment


async def cancel_by_customer(
    db: AsyncSession,
    business: Business,
    appointment: Appointment,
    now: Optional[datetime] = None,
) -> Appointment:
    """Customer-initiated cancellation, subject to the business's policy."""
    now = now or local_now(business)
    ensure_cancellation_allowed(Booking.model_validate(appointment), business.cancellation_policy(), now)
    return await change_status(db, appointment, AppointmentStatus.CANCELLED)


async def get_recurrence_group(db: AsyncSession, business_id: UUID, group_id: UUID) -> list[Appointment]:
    result = await db.execute(
        select(Appointment)
        .where(
            Appointment.business_id == business_id,
            Appointment.recurrence_group_id == group_id,
        )
        .order_by(Appointment.appointment_date)
    )
    return list(result.scalars().all())


async def cancel_recurrence_group(
    db: AsyncSession,
    members: list[Appointment],
    as_of: date,
) -> int:
    """Cancel every future, non-terminal member of a recurrence group."""
    by_id = {m.id: m for m in members}
    selected = select_group_cancellations((Booking.model_validate(m) for m in members), as_of)
    for booking in selected:
        by_id[booking.id].status = AppointmentStatus.CANCELLED
    await db.commit()

    if members:
        logger.info(
            "Cancelled %d of %d appointments in recurrence group %s from %s",
            len(selected), len(members), members[0].recurrence_group_id, as_of,
        )
    return len(selected)


async def _commit_or_overlap(db: AsyncSession, candidate: Booking) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(
            "Unique slot index rejected booking on %s at %s",
            candidate.appointment_date, candidate.start_time,
        )
        raise SlotUnavailableError(f"Time slot {candidate.start_time} is not available")
