from datetime import datetime, timedelta

import pytest
from freezegun import freeze_time
from httpx import AsyncClient

from conftest import NOW, WARSAW, _banner, _p, create_shift
from worktime.services.dashboard import ClockInState, clock_in_status


@pytest.mark.parametrize(
    "now,expected",
    [
        (datetime(2024, 1, 3, 9, 29, tzinfo=WARSAW), ClockInState.TOO_EARLY),
        (datetime(2024, 1, 3, 9, 30, tzinfo=WARSAW), ClockInState.OK),
        (datetime(2024, 1, 3, 12, 0, tzinfo=WARSAW), ClockInState.OK),
        (datetime(2024, 1, 3, 18, 0, tzinfo=WARSAW), ClockInState.OK),
        (datetime(2024, 1, 3, 18, 1, tzinfo=WARSAW), ClockInState.SHIFT_ENDED),
    ],
)
def test_clock_in_window(now: datetime, expected: ClockInState) -> None:
    interval = (
        datetime(2024, 1, 3, 10, 0, tzinfo=WARSAW),
        datetime(2024, 1, 3, 18, 0, tzinfo=WARSAW),
    )
    status = clock_in_status(now, interval, 30)
    assert status["state"] == expected
    assert status["canClockIn"] is (expected == ClockInState.OK)
    assert status["message"]


def test_clock_in_without_shift() -> None:
    status = clock_in_status(NOW, None, 30)
    assert status["state"] == ClockInState.NO_SHIFT
    assert status["canClockIn"] is False


@pytest.mark.asyncio
async def test_dashboard_summary(client: AsyncClient) -> None:
    _banner("dashboard: next shift, weekly totals, clock-in state")
    # Monday and Wednesday of the current week, plus next Monday
    await create_shift(client, date="2024-01-01", start="08:00", end="14:00", assignedUserId="1")
    today = await create_shift(
        client, date="2024-01-03", start="10:00", end="18:00", assignedUserId="1"
    )
    await create_shift(client, date="2024-01-08", start="10:00", end="18:00", assignedUserId="1")
    await create_shift(client, date="2024-01-03", start="10:00", end="18:00", assignedUserId="2")

    await client.post(
        "/timesheets/clock-in",
        json={"userId": "1", "timestamp": "2024-01-01T08:00:00+01:00"},
    )
    await client.post(
        "/timesheets/clock-out",
        json={"userId": "1", "timestamp": "2024-01-01T14:30:00+01:00"},
    )
    # previous week, not counted
    await client.post(
        "/timesheets/clock-in",
        json={"userId": "1", "timestamp": "2023-12-31T10:00:00+01:00"},
    )
    await client.post(
        "/timesheets/clock-out",
        json={"userId": "1", "timestamp": "2023-12-31T12:00:00+01:00"},
    )

    resp = await client.get("/dashboard/1")
    assert resp.status_code == 200
    body = resp.json()
    _p(f"dashboard: {body}")

    assert body["nextShift"]["id"] == today["id"]
    assert body["nextShift"]["isToday"] is True
    assert body["todayShift"]["id"] == today["id"]
    assert body["clockIn"]["state"] == "ok"
    assert body["clockIn"]["canClockIn"] is True
    assert body["week"]["workedMinutes"] == 6 * 60 + 30
    assert body["week"]["plannedMinutes"] == (6 + 8) * 60
    assert body["week"]["start"].startswith("2024-01-01T00:00:00")
    assert body["monthlyTargetMinutes"] == 160 / 4 * 60
    assert body["activeTimesheet"] is None
    assert "password" not in body["user"]


@pytest.mark.asyncio
async def test_dashboard_too_early_with_frozen_clock(client: AsyncClient, app) -> None:
    _banner("dashboard before the clock-in window opens")
    await create_shift(client, date="2024-01-03", start="10:00", end="18:00", assignedUserId="2")

    # 07:00 UTC == 08:00 in Warsaw
    with freeze_time("2024-01-03 07:00:00", real_asyncio=True):
        app.state.now_fn = lambda: datetime.now(WARSAW)
        resp = await client.get("/dashboard/2")

    body = resp.json()
    _p(f"clockIn: {body['clockIn']}")
    assert body["clockIn"]["state"] == "too_early"
    assert body["clockIn"]["canClockIn"] is False
    assert "09:30" in body["clockIn"]["message"]


@pytest.mark.asyncio
async def test_dashboard_shift_ended_and_next_shift(client: AsyncClient, app) -> None:
    await create_shift(client, date="2024-01-03", start="06:00", end="09:00", assignedUserId="3")
    later = await create_shift(
        client, date="2024-01-05", start="10:00", end="14:00", assignedUserId="3"
    )

    resp = await client.get("/dashboard/3")
    body = resp.json()
    assert body["clockIn"]["state"] == "shift_ended"
    assert body["nextShift"]["id"] == later["id"]
    assert body["nextShift"]["isToday"] is False


@pytest.mark.asyncio
async def test_dashboard_without_shifts(client: AsyncClient) -> None:
    await client.patch("/users/2", json={"monthlyGoalHours": 120})
    resp = await client.get("/dashboard/2")
    body = resp.json()
    assert body["nextShift"] is None
    assert body["clockIn"]["state"] == "no_shift"
    assert body["monthlyTargetMinutes"] == 120 / 4 * 60


@pytest.mark.asyncio
async def test_dashboard_unknown_user(client: AsyncClient) -> None:
    resp = await client.get("/dashboard/404")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_earnings_for_month(client: AsyncClient) -> None:
    await create_shift(client, date="2024-01-10", start="10:00", end="18:00", assignedUserId="1")
    await create_shift(client, date="2024-02-01", start="10:00", end="18:00", assignedUserId="1")
    start = datetime(2024, 1, 10, 10, 0, tzinfo=WARSAW)
    await client.post(
        "/timesheets/clock-in", json={"userId": "1", "timestamp": start.isoformat()}
    )
    await client.post(
        "/timesheets/clock-out",
        json={"userId": "1", "timestamp": (start + timedelta(hours=4)).isoformat()},
    )

    resp = await client.get("/dashboard/1/earnings", params={"month": "2024-01"})
    body = resp.json()
    assert body["workedMinutes"] == 240
    assert body["plannedMinutes"] == 480
    assert body["earned"] == 120.0
    assert body["projected"] == 240.0

    resp = await client.get("/dashboard/1/earnings", params={"month": "styczeń"})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("month", ["9999-12", "0000-01", "2024-13", "2024-01-05"])
async def test_earnings_rejects_out_of_range_month(client: AsyncClient, month: str) -> None:
    resp = await client.get("/dashboard/1/earnings", params={"month": month})
    _p(f"month={month} -> {resp.status_code} {resp.text}")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Miesiąc musi mieć format RRRR-MM"

    resp = await client.get("/dashboard/1/earnings", params={"month": "9998-12"})
    assert resp.status_code == 200
    assert resp.json()["month"] == "9998-12"
