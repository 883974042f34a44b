"""Pydantic schemas for Appointments."""

from datetime import datetime, date
from decimal import Decimal
from uuid import UUID
from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Annotated, Optional
from slotwise.scheduling.intervals import time_to_minutes
from slotwise.scheduling.lifecycle import INITIAL_STATUSES
from slotwise.scheduling.types import AppointmentStatus, RecurrenceFrequency


def _check_hhmm(value: str) -> str:
    time_to_minutes(value)
    return value


TimeOfDay = Annotated[str, AfterValidator(_check_hhmm)]


class AppointmentCreate(BaseModel):
    """Schema for an owner creating an appointment or a blocked slot."""
    appointment_type_id: Optional[UUID] = None
    staff_id: Optional[UUID] = None
    customer_name: str = Field(min_length=2, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=32)
    customer_email: Optional[EmailStr] = None
    service: Optional[str] = None  # defaults to the appointment type's name
    price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    appointment_date: date
    start_time: TimeOfDay  # "09:30"
    duration_minutes: Optional[int] = Field(None, gt=0, le=24 * 60)
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    @field_validator("status")
    @classmethod
    def _check_initial_status(cls, value: AppointmentStatus) -> AppointmentStatus:
        if value not in INITIAL_STATUSES:
            raise ValueError(f"New appointments cannot have status '{value.value}'")
        return value


class RecurringAppointmentCreate(AppointmentCreate):
    """Schema for booking the same slot repeatedly."""
    frequency: RecurrenceFrequency
    until_date: date


class PublicBookingCreate(BaseModel):
    """Schema for a client booking through the public page."""
    appointment_type_id: UUID
    staff_id: Optional[UUID] = None
    customer_name: str = Field(min_length=2, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=32)
    customer_email: Optional[EmailStr] = None
    description: Optional[str] = None
    appointment_date: date
    start_time: TimeOfDay


class AppointmentUpdate(BaseModel):
    """Schema for rescheduling or editing an appointment."""
    staff_id: Optional[UUID] = None
    customer_name: Optional[str] = Field(None, min_length=2, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=32)
    customer_email: Optional[EmailStr] = None
    description: Optional[str] = None
    appointment_date: Optional[date] = None
    start_time: Optional[TimeOfDay] = None
    duration_minutes: Optional[int] = Field(None, gt=0, le=24 * 60)

    @model_validator(mode="after")
    def _reject_null_required(self):
        # Omitted keeps the stored value; null is refused.
        for field in ("customer_name", "appointment_date", "start_time", "duration_minutes"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class CustomerCancelRequest(BaseModel):
    customer_phone: str


class AppointmentOut(BaseModel):
    """Schema for returning appointment details."""
    id: UUID
    business_id: UUID
    staff_id: Optional[UUID] = None
    appointment_type_id: Optional[UUID] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    service: str
    price: Decimal
    description: Optional[str] = None
    appointment_date: date
    start_time: str
    end_time: str
    duration_minutes: int
    status: AppointmentStatus
    is_recurring: bool
    recurrence_group_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    message: str
    appointment: AppointmentOut


class MessageResponse(BaseModel):
    message: str


class AvailableTimesResponse(BaseModel):
    """Schema for available slots response."""
    times: list[str]  # ["09:00", "09:30", ...]


class SkippedOccurrenceOut(BaseModel):
    appointment_date: date
    reason: str
    detail: Optional[str] = None


class RecurringBookingResponse(BaseModel):
    count: int
    skipped: int
    recurrence_group_id: UUID
    skipped_dates: list[SkippedOccurrenceOut]


class RecurringCancelResponse(BaseModel):
    cancelled: int
