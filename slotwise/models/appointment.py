"""Appointment model for booking system."""

from sqlalchemy import (
    Column, String, DateTime, Integer, Date, Numeric, Boolean, ForeignKey,
    Enum as SQLEnum, Index, Text, text,
)
from sqlalchemy.dialects.postgresql import UUID
import uuid
from datetime import datetime
from slotwise.core.database import Base
from slotwise.scheduling.types import AppointmentStatus

# Backstop for the per-slot booking lock: no two live rows may start at the same
# time for the same business and staff member.
ACTIVE_SLOT_CONDITION = text("status <> 'cancelled'")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "business_id", "staff_id", "appointment_date", "start_time",
            unique=True,
            postgresql_where=ACTIVE_SLOT_CONDITION,
            sqlite_where=ACTIVE_SLOT_CONDITION,
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    appointment_type_id = Column(UUID(as_uuid=True), ForeignKey("appointment_types.id", ondelete="SET NULL"), nullable=True)

    # Customer info
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)

    # Appointment details
    service = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(Text, nullable=True)
    appointment_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)  # derived from start_time + duration
    duration_minutes = Column(Integer, nullable=False)
    status = Column(
        SQLEnum(
            AppointmentStatus,
            name="appointmentstatus",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        default=AppointmentStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Recurring series
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_group_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
