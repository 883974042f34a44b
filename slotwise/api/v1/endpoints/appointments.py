"""Appointment booking and availability endpoints."""

from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from slotwise.core.config import settings
from slotwise.core.database import get_db
from slotwise.core.deps import get_current_business
from slotwise.models.appointment import Appointment
from slotwise.models.appointment_type import AppointmentType
from slotwise.models.business import Business
from slotwise.scheduling import AppointmentStatus, BookingValidationError
from slotwise.schemas.appointment import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentUpdate,
    AvailableTimesResponse,
    BookingResponse,
    CustomerCancelRequest,
    MessageResponse,
    PublicBookingCreate,
    RecurringAppointmentCreate,
    RecurringBookingResponse,
    RecurringCancelResponse,
    SkippedOccurrenceOut,
    StatusUpdate,
)
from slotwise.services import booking
from slotwise.services.sms import send_booking_confirmation, send_cancellation_notice

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_business_or_404(db: AsyncSession, business_slug: str) -> Business:
    business = await booking.get_active_business_by_slug(db, business_slug)
    if not business:
        logger.info("Business lookup failed for '%s'", business_slug)
        raise HTTPException(status_code=404, detail="Business not found")
    return business


async def _get_appointment_type(
    db: AsyncSession, business_id: UUID, appointment_type_id: UUID
) -> AppointmentType:
    result = await db.execute(
        select(AppointmentType).where(
            AppointmentType.id == appointment_type_id,
            AppointmentType.business_id == business_id,
            AppointmentType.is_active.is_(True),
        )
    )
    appointment_type = result.scalar_one_or_none()
    if not appointment_type:
        raise HTTPException(status_code=404, detail="Appointment type not found")
    return appointment_type


async def _get_owned_appointment(db: AsyncSession, business_id: UUID, appointment_id: UUID) -> Appointment:
    result = await db.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.business_id == business_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


async def _appointment_fields(
    db: AsyncSession, business: Business, payload: AppointmentCreate
) -> dict:
    """Column values for a new owner-created appointment, filling service,
    duration and price from the appointment type when one is given."""
    fields = payload.model_dump(
        include={
            "appointment_type_id", "staff_id", "customer_name", "customer_phone",
            "customer_email", "service", "price", "description", "appointment_date",
            "start_time", "duration_minutes", "status",
        }
    )

    if payload.appointment_type_id:
        appointment_type = await _get_appointment_type(db, business.id, payload.appointment_type_id)
        fields["service"] = fields["service"] or appointment_type.name
        fields["duration_minutes"] = fields["duration_minutes"] or appointment_type.duration_minutes
        if fields["price"] is None:
            fields["price"] = appointment_type.price

    if not fields["service"]:
        raise BookingValidationError("service is required when no appointment type is given")
    fields["duration_minutes"] = fields["duration_minutes"] or settings.DEFAULT_APPOINTMENT_DURATION
    if fields["price"] is None:
        fields["price"] = 0
    return fields


# ============================================================================
# PUBLIC BOOKING
# ============================================================================

@router.get("/available/{business_slug}", response_model=AvailableTimesResponse)
async def get_available_times(
    business_slug: str,
    date: date = Query(...),
    duration: Optional[int] = Query(None, gt=0, le=24 * 60),
    appointment_type_id: Optional[UUID] = Query(None),
    staff_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Get bookable start times for a business on a specific date."""
    business = await _get_business_or_404(db, business_slug)

    if appointment_type_id:
        appointment_type = await _get_appointment_type(db, business.id, appointment_type_id)
        duration = appointment_type.duration_minutes
    duration = duration or settings.DEFAULT_APPOINTMENT_DURATION

    times = await booking.available_times(db, business, date, duration, staff_id=staff_id)
    return AvailableTimesResponse(times=times)


@router.post("/public/{business_slug}", response_model=BookingResponse, status_code=201)
async def book_public_appointment(
    business_slug: str,
    payload: PublicBookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """Book an appointment from the public booking page (status: pending)."""
    business = await _get_business_or_404(db, business_slug)
    appointment_type = await _get_appointment_type(db, business.id, payload.appointment_type_id)

    fields = payload.model_dump()
    fields.update(
        service=appointment_type.name,
        price=appointment_type.price,
        duration_minutes=appointment_type.duration_minutes,
        status=AppointmentStatus.PENDING,
    )
    appointment = await booking.book_appointment(db, business, fields, offered_only=True)

    if business.sms_notifications_enabled and appointment.customer_phone:
        await send_booking_confirmation(
            customer_phone=appointment.customer_phone,
            business_name=business.name,
            appointment_date=appointment.appointment_date.isoformat(),
            start_time=appointment.start_time,
            service=appointment.service,
        )

    return BookingResponse(message="Appointment booked", appointment=appointment)


@router.post("/{appointment_id}/cancel", response_model=MessageResponse)
async def cancel_as_customer(
    appointment_id: UUID,
    payload: CustomerCancelRequest,
    db: AsyncSession = Depends(get_db),
):
    """Customer cancellation, allowed only outside the business's no-cancel window."""
    result = await db.execute(select(Appointment).where(Appointment.id == appointment_id))
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")

    # Phone number is the customer's proof of ownership
    if not appointment.customer_phone or appointment.customer_phone != payload.customer_phone:
        raise HTTPException(status_code=403, detail="Not allowed to cancel this appointment")

    result = await db.execute(select(Business).where(Business.id == appointment.business_id))
    business = result.scalar_one()

    await booking.cancel_by_customer(db, business, appointment)

    if business.sms_notifications_enabled:
        await send_cancellation_notice(
            customer_phone=appointment.customer_phone,
            business_name=business.name,
            appointment_date=appointment.appointment_date.isoformat(),
            start_time=appointment.start_time,
        )

    return MessageResponse(message="Appointment cancelled")


# ============================================================================
# OWNER SCHEDULING
# ============================================================================

@router.get("", response_model=list[AppointmentOut])
async def list_appointments(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    status: Optional[AppointmentStatus] = Query(None),
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """List the business's appointments, optionally filtered by date range and status."""
    query = select(Appointment).where(Appointment.business_id == business.id)

    if start_date:
        query = query.where(Appointment.appointment_date >= start_date)
    if end_date:
        query = query.where(Appointment.appointment_date <= end_date)
    if status:
        query = query.where(Appointment.status == status)

    query = query.order_by(Appointment.appointment_date, Appointment.start_time)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=BookingResponse, status_code=201)
async def create_appointment(
    payload: AppointmentCreate,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Create an appointment (or a blocked slot) from the owner's scheduler."""
    fields = await _appointment_fields(db, business, payload)
    appointment = await booking.book_appointment(db, business, fields)
    return BookingResponse(message="Appointment created", appointment=appointment)


@router.post("/recurring", response_model=RecurringBookingResponse, status_code=201)
async def create_recurring_appointments(
    payload: RecurringAppointmentCreate,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Book the same slot weekly, biweekly or monthly until ``until_date``.

    Occurrences that are taken or fall outside working hours are skipped and
    reported; the rest are created.
    """
    fields = await _appointment_fields(db, business, payload)
    result = await booking.book_recurring(
        db, business, fields, payload.frequency, payload.until_date
    )
    plan = result.plan

    return RecurringBookingResponse(
        count=plan.created_count,
        skipped=plan.skipped_count,
        recurrence_group_id=result.recurrence_group_id,
        skipped_dates=[
            SkippedOccurrenceOut(
                appointment_date=s.booking.appointment_date,
                reason=s.reason.value,
                detail=s.detail,
            )
            for s in plan.skipped
        ],
    )


@router.delete("/recurring/{group_id}", response_model=RecurringCancelResponse)
async def cancel_recurring_appointments(
    group_id: UUID,
    as_of: Optional[date] = Query(None),
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Cancel all future occurrences of a recurring booking (default: from today)."""
    members = await booking.get_recurrence_group(db, business.id, group_id)
    if not members:
        raise HTTPException(status_code=404, detail="Recurring booking not found")

    as_of = as_of or booking.local_now(business).date()
    cancelled = await booking.cancel_recurrence_group(db, members, as_of)
    return RecurringCancelResponse(cancelled=cancelled)


@router.put("/{appointment_id}", response_model=BookingResponse)
async def update_appointment(
    appointment_id: UUID,
    payload: AppointmentUpdate,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Edit customer details or move an appointment to another time."""
    appointment = await _get_owned_appointment(db, business.id, appointment_id)
    changes = payload.model_dump(exclude_unset=True)
    appointment = await booking.reschedule_appointment(db, business, appointment, changes)
    return BookingResponse(message="Appointment updated", appointment=appointment)


@router.put("/{appointment_id}/status", response_model=AppointmentOut)
async def update_appointment_status(
    appointment_id: UUID,
    payload: StatusUpdate,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Move an appointment along its lifecycle (confirm, complete, no-show, cancel)."""
    appointment = await _get_owned_appointment(db, business.id, appointment_id)
    return await booking.change_status(db, appointment, payload.status)


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def cancel_appointment(
    appointment_id: UUID,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Cancel an appointment (sets status to cancelled; rows are never deleted)."""
    appointment = await _get_owned_appointment(db, business.id, appointment_id)
    await booking.change_status(db, appointment, AppointmentStatus.CANCELLED)
    return MessageResponse(message="Appointment cancelled")
