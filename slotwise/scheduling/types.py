"""Value types consumed by the availability engine.

These are plain pydantic models with no database coupling, so the engine can be
fed ORM rows (via ``from_attributes``), request bodies or hand-built test data.
"""

import enum
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from slotwise.scheduling.errors import BookingValidationError
from slotwise.scheduling.intervals import (
    MINUTES_PER_DAY,
    Interval,
    minutes_to_time,
    sunday_weekday,
    time_to_minutes,
)


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    BLOCKED = "blocked"


class RecurrenceFrequency(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class BreakTime(BaseModel):
    """Daily break window, e.g. lunch."""
    enabled: bool = False
    start_hour: int = Field(12, ge=0, le=23)
    start_minute: int = Field(0, ge=0, le=59)
    end_hour: int = Field(13, ge=0, le=23)
    end_minute: int = Field(0, ge=0, le=59)

    def interval(self) -> Interval:
        return Interval(
            self.start_hour * 60 + self.start_minute,
            self.end_hour * 60 + self.end_minute,
        )


class DaySchedule(BaseModel):
    """Per-weekday override of the opening window."""
    enabled: bool = True
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=0, le=23)

    @model_validator(mode="after")
    def _check_window(self):
        if self.enabled and self.start_hour >= self.end_hour:
            raise ValueError("day schedule start_hour must be before end_hour")
        return self


class BusinessHours(BaseModel):
    """Working-hours configuration of one business."""
    start_hour: int = Field(9, ge=0, le=23)
    end_hour: int = Field(17, ge=0, le=23)
    working_days: list[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])
    slot_interval: int = Field(30, gt=0)
    break_time: BreakTime = Field(default_factory=BreakTime)
    min_gap_minutes: int = Field(0, ge=0)
    day_schedules: Optional[dict[int, DaySchedule]] = None

    class Config:
        from_attributes = True

    @field_validator("working_days")
    @classmethod
    def _check_days(cls, days: list[int]) -> list[int]:
        if any(d < 0 or d > 6 for d in days):
            raise ValueError("working_days must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(days))

    @field_validator("day_schedules")
    @classmethod
    def _check_schedule_keys(cls, schedules):
        if schedules and any(d < 0 or d > 6 for d in schedules):
            raise ValueError("day_schedules keys must be between 0 and 6")
        return schedules

    @model_validator(mode="after")
    def _check_window(self):
        if self.start_hour >= self.end_hour:
            raise ValueError("start_hour must be before end_hour")
        if self.break_time.enabled:
            brk = self.break_time.interval()
            if brk.start >= brk.end:
                raise ValueError("break start must be before break end")
            if not Interval(self.start_hour * 60, self.end_hour * 60).contains(brk):
                raise ValueError("break must lie within working hours")
            # A break clear of a shortened day is ignored there; a partial overlap is not.
            for weekday, override in sorted((self.day_schedules or {}).items()):
                if not override.enabled:
                    continue
                window = Interval(override.start_hour * 60, override.end_hour * 60)
                if brk.overlaps(window) and not window.contains(brk):
                    raise ValueError(f"break must lie within the day schedule for weekday {weekday}")
        return self

    def window_for(self, day: date) -> Optional[Interval]:
        """Opening window for ``day`` in minutes, or None if closed."""
        weekday = sunday_weekday(day)
        if weekday not in self.working_days:
            return None
        override = (self.day_schedules or {}).get(weekday)
        if override is not None:
            if not override.enabled:
                return None
            return Interval(override.start_hour * 60, override.end_hour * 60)
        return Interval(self.start_hour * 60, self.end_hour * 60)

    def break_interval(self) -> Optional[Interval]:
        return self.break_time.interval() if self.break_time.enabled else None


class CancellationPolicy(BaseModel):
    enabled: bool = True
    hours_before: int = Field(24, ge=0)

    class Config:
        from_attributes = True


class Booking(BaseModel):
    """An appointment as the engine sees it: a dated, timed, staffed interval."""
    id: Optional[UUID] = None
    appointment_date: date
    start_time: str
    duration_minutes: int = Field(gt=0)
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    staff_id: Optional[UUID] = None
    is_recurring: bool = False
    recurrence_group_id: Optional[UUID] = None

    class Config:
        from_attributes = True

    @field_validator("start_time")
    @classmethod
    def _check_start(cls, value: str) -> str:
        time_to_minutes(value)
        return value

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def interval(self) -> Interval:
        start = self.start_minutes
        return Interval(start, start + self.duration_minutes)

    @property
    def end_time(self) -> str:
        end = self.interval.end
        if end > MINUTES_PER_DAY:
            raise BookingValidationError(
                f"Booking at {self.start_time} for {self.duration_minutes} minutes crosses midnight"
            )
        return minutes_to_time(end % MINUTES_PER_DAY)

    @property
    def start_datetime(self) -> datetime:
        return datetime.combine(self.appointment_date, datetime.min.time()) + timedelta(
            minutes=self.start_minutes
        )
