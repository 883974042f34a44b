"""Business profile model.

Each business (salon, clinic, barber...) stores its public booking identifier,
working hours and cancellation policy here.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.types import JSON
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from slotwise.core.database import Base
from slotwise.scheduling.types import BreakTime, BusinessHours, CancellationPolicy, DaySchedule


class Business(Base):
    __tablename__ = "businesses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)  # public booking URL
    owner_phone = Column(String, nullable=True)
    timezone = Column(String, nullable=False, default="UTC")
    is_active = Column(Boolean, default=True)

    # Working hours
    start_hour = Column(Integer, nullable=False, default=9)
    end_hour = Column(Integer, nullable=False, default=17)
    working_days = Column(JSON, nullable=False, default=lambda: [0, 1, 2, 3, 4])  # 0 = Sunday
    slot_interval = Column(Integer, nullable=False, default=30)  # minutes between slots
    break_enabled = Column(Boolean, nullable=False, default=False)
    break_start_hour = Column(Integer, nullable=False, default=12)
    break_start_minute = Column(Integer, nullable=False, default=0)
    break_end_hour = Column(Integer, nullable=False, default=13)
    break_end_minute = Column(Integer, nullable=False, default=0)
    min_gap_minutes = Column(Integer, nullable=False, default=0)
    day_schedules = Column(JSON, nullable=True)  # {"5": {"enabled": true, "start_hour": 9, "end_hour": 13}}

    # Cancellation policy
    cancellation_enabled = Column(Boolean, nullable=False, default=True)
    cancellation_hours_before = Column(Integer, nullable=False, default=24)

    sms_notifications_enabled = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    users = relationship("User", back_populates="business")

    def business_hours(self) -> BusinessHours:
        schedules = None
        if self.day_schedules:
            schedules = {int(day): DaySchedule(**cfg) for day, cfg in self.day_schedules.items()}
        return BusinessHours(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            working_days=self.working_days or [],
            slot_interval=self.slot_interval,
            break_time=BreakTime(
                enabled=self.break_enabled,
                start_hour=self.break_start_hour,
                start_minute=self.break_start_minute,
                end_hour=self.break_end_hour,
                end_minute=self.break_end_minute,
            ),
            min_gap_minutes=self.min_gap_minutes,
            day_schedules=schedules,
        )

    def apply_business_hours(self, hours: BusinessHours) -> None:
        self.start_hour = hours.start_hour
        self.end_hour = hours.end_hour
        self.working_days = list(hours.working_days)
        self.slot_interval = hours.slot_interval
        self.break_enabled = hours.break_time.enabled
        self.break_start_hour = hours.break_time.start_hour
        self.break_start_minute = hours.break_time.start_minute
        self.break_end_hour = hours.break_time.end_hour
        self.break_end_minute = hours.break_time.end_minute
        self.min_gap_minutes = hours.min_gap_minutes
        self.day_schedules = (
            {str(day): cfg.model_dump() for day, cfg in hours.day_schedules.items()}
            if hours.day_schedules else None
        )

    def cancellation_policy(self) -> CancellationPolicy:
        return CancellationPolicy(
            enabled=self.cancellation_enabled,
            hours_before=self.cancellation_hours_before,
        )
