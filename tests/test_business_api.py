"""Tests for business hours and cancellation policy endpoints."""

import pytest


@pytest.mark.asyncio
async def test_get_my_business(client, auth_headers):
    resp = await client.get("/api/v1/businesses/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["slug"] == "studio-nine"


@pytest.mark.asyncio
async def test_default_business_hours(client, auth_headers):
    resp = await client.get("/api/v1/businesses/me/hours", headers=auth_headers)
    assert resp.status_code == 200
    hours = resp.json()
    assert hours["start_hour"] == 9
    assert hours["end_hour"] == 17
    assert hours["working_days"] == [0, 1, 2, 3, 4]
    assert hours["slot_interval"] == 30
    assert hours["break_time"]["enabled"] is False


@pytest.mark.asyncio
async def test_update_hours_changes_availability(client, auth_headers, monday):
    resp = await client.put("/api/v1/businesses/me/hours", json={
        "start_hour": 10,
        "end_hour": 14,
        "working_days": [1, 2],
        "slot_interval": 60,
        "break_time": {"enabled": True, "start_hour": 12, "start_minute": 0, "end_hour": 13, "end_minute": 0},
        "min_gap_minutes": 0,
    }, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["working_days"] == [1, 2]

    resp = await client.get(
        "/api/v1/appointments/available/studio-nine",
        params={"date": monday.isoformat(), "duration": 60},
    )
    assert resp.json()["times"] == ["10:00", "11:00", "13:00"]


@pytest.mark.asyncio
async def test_day_schedule_override_round_trips(client, auth_headers, monday):
    resp = await client.put("/api/v1/businesses/me/hours", json={
        "start_hour": 9,
        "end_hour": 17,
        "working_days": [0, 1, 2, 3, 4],
        "slot_interval": 60,
        "day_schedules": {"1": {"enabled": True, "start_hour": 9, "end_hour": 12}},
    }, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["day_schedules"]["1"]["end_hour"] == 12

    resp = await client.get(
        "/api/v1/appointments/available/studio-nine",
        params={"date": monday.isoformat(), "duration": 60},
    )
    assert resp.json()["times"] == ["09:00", "10:00", "11:00"]


@pytest.mark.parametrize("hours", [
    {"start_hour": 17, "end_hour": 9},
    {"working_days": [7]},
    {"slot_interval": 0},
    {"break_time": {"enabled": True, "start_hour": 18, "end_hour": 19}},
    {
        "break_time": {"enabled": True, "start_hour": 11, "start_minute": 30, "end_hour": 12, "end_minute": 30},
        "day_schedules": {"1": {"enabled": True, "start_hour": 12, "end_hour": 15}},
    },
])
@pytest.mark.asyncio
async def test_invalid_hours_rejected(client, auth_headers, hours):
    resp = await client.put("/api/v1/businesses/me/hours", json=hours, headers=auth_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_cancellation_policy_round_trip(client, auth_headers):
    resp = await client.get("/api/v1/businesses/me/cancellation-policy", headers=auth_headers)
    assert resp.json() == {"enabled": True, "hours_before": 24}

    resp = await client.put(
        "/api/v1/businesses/me/cancellation-policy",
        json={"enabled": False, "hours_before": 12},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"enabled": False, "hours_before": 12}
