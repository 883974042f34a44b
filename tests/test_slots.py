"""Tests for slot generation."""

import uuid
from datetime import date

import pytest

from slotwise.scheduling import (
    AppointmentStatus,
    Booking,
    BookingValidationError,
    BreakTime,
    BusinessHours,
    DaySchedule,
    compute_available_slots,
)

MONDAY = date(2024, 1, 1)
FRIDAY = date(2024, 1, 5)
SATURDAY = date(2024, 1, 6)


def grid(start: int, end: int, step: int) -> list[str]:
    return [f"{m // 60:02d}:{m % 60:02d}" for m in range(start, end + 1, step)]


def booking(start_time: str, duration: int = 60, day: date = MONDAY, **kwargs) -> Booking:
    return Booking(
        id=uuid.uuid4(),
        appointment_date=day,
        start_time=start_time,
        duration_minutes=duration,
        **kwargs,
    )


def test_empty_day_returns_full_grid():
    hours = BusinessHours()
    slots = compute_available_slots(hours, [], MONDAY, 60)
    assert slots == grid(9 * 60, 16 * 60, 30)
    assert slots[0] == "09:00"
    assert slots[-1] == "16:00"


@pytest.mark.parametrize("interval,duration", [(15, 45), (30, 30), (60, 90), (20, 60)])
def test_grid_step_follows_slot_interval(interval, duration):
    hours = BusinessHours(start_hour=8, end_hour=12, slot_interval=interval)
    slots = compute_available_slots(hours, [], MONDAY, duration)
    assert slots == grid(8 * 60, 12 * 60 - duration, interval)


def test_break_hides_lunch_slots():
    hours = BusinessHours(
        working_days=[0, 1, 2, 3, 4],
        break_time=BreakTime(enabled=True, start_hour=12, start_minute=0, end_hour=13, end_minute=0),
    )
    slots = compute_available_slots(hours, [], MONDAY, 30)
    assert slots == grid(9 * 60, 11 * 60 + 30, 30) + grid(13 * 60, 16 * 60 + 30, 30)
    assert "12:00" not in slots
    assert "12:30" not in slots


def test_break_blocks_slots_running_into_it():
    hours = BusinessHours(break_time=BreakTime(enabled=True))
    slots = compute_available_slots(hours, [], MONDAY, 60)
    assert "11:00" in slots
    assert "11:30" not in slots
    assert "13:00" in slots


def test_disabled_break_is_ignored():
    hours = BusinessHours(break_time=BreakTime(enabled=False))
    assert "12:00" in compute_available_slots(hours, [], MONDAY, 30)


def test_existing_booking_blocks_overlapping_slots():
    hours = BusinessHours()
    slots = compute_available_slots(hours, [booking("10:00", 60)], MONDAY, 60)
    assert "09:00" in slots
    assert "09:30" not in slots
    assert "10:00" not in slots
    assert "10:30" not in slots
    # Half-open intervals: back-to-back is fine.
    assert "11:00" in slots


def test_no_returned_slot_overlaps_existing_bookings():
    hours = BusinessHours(slot_interval=15)
    existing = [booking("09:45", 30), booking("13:10", 50), booking("16:00", 60)]
    slots = compute_available_slots(hours, existing, MONDAY, 45)
    for start in slots:
        h, m = map(int, start.split(":"))
        s = h * 60 + m
        for b in existing:
            assert not (s < b.interval.end and b.interval.start < s + 45)


def test_cancelled_bookings_do_not_block():
    hours = BusinessHours()
    existing = [booking("10:00", 60, status=AppointmentStatus.CANCELLED)]
    assert "10:00" in compute_available_slots(hours, existing, MONDAY, 60)


def test_blocked_entries_remove_availability():
    hours = BusinessHours()
    existing = [booking("09:00", 8 * 60, status=AppointmentStatus.BLOCKED)]
    assert compute_available_slots(hours, existing, MONDAY, 30) == []


def test_bookings_on_other_days_are_ignored():
    hours = BusinessHours()
    other_day = booking("10:00", 60, day=date(2024, 1, 2))
    assert "10:00" in compute_available_slots(hours, [other_day], MONDAY, 60)


def test_repeated_calls_are_identical():
    hours = BusinessHours(min_gap_minutes=15, break_time=BreakTime(enabled=True))
    existing = [booking("10:00", 45)]
    first = compute_available_slots(hours, existing, MONDAY, 30)
    assert compute_available_slots(hours, existing, MONDAY, 30) == first


def test_non_working_day_has_no_slots():
    hours = BusinessHours(working_days=[0, 1, 2, 3, 4])
    assert compute_available_slots(hours, [], FRIDAY, 30) == []
    assert compute_available_slots(hours, [], SATURDAY, 30) == []


def test_sunday_is_day_zero():
    hours = BusinessHours(working_days=[0])
    assert compute_available_slots(hours, [], date(2024, 1, 7), 60)
    assert compute_available_slots(hours, [], MONDAY, 60) == []


def test_duration_longer_than_day_returns_empty():
    hours = BusinessHours(start_hour=9, end_hour=12)
    assert compute_available_slots(hours, [], MONDAY, 4 * 60) == []


def test_duration_exactly_the_window_fits_once():
    hours = BusinessHours(start_hour=9, end_hour=12)
    assert compute_available_slots(hours, [], MONDAY, 3 * 60) == ["09:00"]


@pytest.mark.parametrize("duration", [0, -30])
def test_non_positive_duration_rejected(duration):
    with pytest.raises(BookingValidationError):
        compute_available_slots(BusinessHours(), [], MONDAY, duration)


def test_min_gap_skips_slots_leaving_short_gaps():
    hours = BusinessHours(slot_interval=15, min_gap_minutes=30)
    existing = [booking("10:00", 60)]
    slots = compute_available_slots(hours, existing, MONDAY, 30)
    # Ends right at 10:00 (gap 0) or 30+ minutes before it.
    assert "09:00" in slots
    assert "09:30" in slots
    assert "09:15" not in slots
    # Starts right at 11:00 or 30+ minutes after it.
    assert "11:00" in slots
    assert "11:15" not in slots
    assert "11:30" in slots


def test_staff_scoped_availability():
    hours = BusinessHours()
    alice, bob = uuid.uuid4(), uuid.uuid4()
    existing = [booking("10:00", 60, staff_id=alice)]

    assert "10:00" not in compute_available_slots(hours, existing, MONDAY, 60, staff_id=alice)
    assert "10:00" in compute_available_slots(hours, existing, MONDAY, 60, staff_id=bob)
    # Without a staff filter every booking counts.
    assert "10:00" not in compute_available_slots(hours, existing, MONDAY, 60)


def test_unassigned_block_applies_to_every_staff_member():
    hours = BusinessHours()
    existing = [booking("10:00", 60, status=AppointmentStatus.BLOCKED)]
    assert "10:00" not in compute_available_slots(hours, existing, MONDAY, 60, staff_id=uuid.uuid4())


def test_day_schedule_overrides_window():
    hours = BusinessHours(
        working_days=[0, 1, 2, 3, 4],
        day_schedules={1: DaySchedule(start_hour=10, end_hour=12)},
    )
    assert compute_available_slots(hours, [], MONDAY, 60) == ["10:00", "10:30", "11:00"]
    assert compute_available_slots(hours, [], date(2024, 1, 2), 60)[0] == "09:00"


def test_disabled_day_schedule_closes_day():
    hours = BusinessHours(day_schedules={1: DaySchedule(enabled=False, start_hour=9, end_hour=17)})
    assert compute_available_slots(hours, [], MONDAY, 60) == []


def test_not_before_hides_elapsed_slots():
    hours = BusinessHours()
    slots = compute_available_slots(hours, [], MONDAY, 60, not_before=14 * 60 + 10)
    assert slots == ["14:30", "15:00", "15:30", "16:00"]


def test_break_straddling_day_schedule_edge_rejected():
    with pytest.raises(ValueError, match="day schedule for weekday 1"):
        BusinessHours(
            break_time=BreakTime(enabled=True, start_hour=11, start_minute=30, end_hour=12, end_minute=30),
            day_schedules={1: DaySchedule(start_hour=12, end_hour=15)},
        )


def test_break_outside_short_day_schedule_is_ignored():
    hours = BusinessHours(
        break_time=BreakTime(enabled=True),
        day_schedules={1: DaySchedule(start_hour=9, end_hour=12)},
    )
    assert compute_available_slots(hours, [], MONDAY, 60) == ["09:00", "09:30", "10:00", "10:30", "11:00"]
