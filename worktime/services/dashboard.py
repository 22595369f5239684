"""
Read-only views computed per request from shifts, timesheets and the user
profile: the employee dashboard and monthly earnings.
"""

from datetime import datetime, timedelta
from enum import StrEnum

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import NotFound
from worktime.models import Shift, Timesheet, User
from worktime.services.shifts import USER_NOT_FOUND, shift_interval, shift_minutes
from worktime.services.timesheets import open_timesheet
from worktime.timeutils import format_hhmm, month_bounds, week_bounds


class ClockInState(StrEnum):
    NO_SHIFT = "no_shift"
    TOO_EARLY = "too_early"
    OK = "ok"
    SHIFT_ENDED = "shift_ended"


def clock_in_status(
    now: datetime, interval: tuple[datetime, datetime] | None, early_minutes: int
) -> dict:
    """
    Where ``now`` falls relative to today's shift. Clock-in is allowed from
    ``early_minutes`` before the start until the end, inclusive.
    """
    if interval is None:
        return {
            "state": ClockInState.NO_SHIFT,
            "message": "Brak zmiany na dziś",
            "canClockIn": False,
        }

    start, end = interval
    opens_at = start - timedelta(minutes=early_minutes)
    tz = now.tzinfo
    if now < opens_at:
        return {
            "state": ClockInState.TOO_EARLY,
            "message": f"Wejście możliwe od {format_hhmm(opens_at, tz)}",
            "canClockIn": False,
        }
    if now > end:
        return {
            "state": ClockInState.SHIFT_ENDED,
            "message": f"Zmiana zakończyła się o {format_hhmm(end, tz)}",
            "canClockIn": False,
        }
    return {
        "state": ClockInState.OK,
        "message": "Możesz rozpocząć pracę",
        "canClockIn": True,
    }


def worked_minutes(timesheets: list[Timesheet], start: datetime, end: datetime) -> int:
    """Closed timesheets whose clock-in falls in [start, end)."""
    total = timedelta()
    for entry in timesheets:
        if entry.clock_out is None:
            continue
        if start <= entry.clock_in < end:
            total += entry.clock_out - entry.clock_in
    return int(total.total_seconds() // 60)


def planned_minutes(shifts: list[Shift], start: datetime, end: datetime, settings: Settings) -> int:
    return sum(
        shift_minutes(s, settings.tz)
        for s in shifts
        if start.date() <= s.date < end.date()
    )


def monthly_target_minutes(user: User, settings: Settings) -> int:
    # weekly share of the monthly goal, not calendar-accurate
    goal_hours = user.monthly_goal_hours or settings.DEFAULT_MONTHLY_GOAL_HOURS
    return int(goal_hours / 4 * 60)


def _today_shift(shifts: list[Shift], now: datetime, settings: Settings):
    today = [
        (shift_interval(s, settings.tz), s) for s in shifts if s.date == now.date()
    ]
    if not today:
        return None
    today.sort(key=lambda pair: pair[0][0])
    # the first one not yet over, else the last one of the day
    for interval, shift in today:
        if interval[1] >= now:
            return interval, shift
    return today[-1]


def build_dashboard(db: Database, user_id: str, *, settings: Settings, now: datetime) -> dict:
    snapshot = db.load()
    user = snapshot.find_user(user_id)
    if user is None:
        raise NotFound(USER_NOT_FOUND)

    now = now.astimezone(settings.tz)
    shifts = [s for s in snapshot.shifts if s.assigned_user_id == user_id]
    timesheets = [t for t in snapshot.timesheets if t.user_id == user_id]

    upcoming = sorted(
        (
            (shift_interval(s, settings.tz), s)
            for s in shifts
            if shift_interval(s, settings.tz)[1] > now
        ),
        key=lambda pair: pair[0][0],
    )
    next_shift = None
    if upcoming:
        _, shift = upcoming[0]
        next_shift = {
            **shift.model_dump(mode="json", by_alias=True),
            "isToday": shift.date == now.date(),
        }

    today = _today_shift(shifts, now, settings)
    week_start, week_end = week_bounds(now)
    active = open_timesheet(snapshot, user_id)

    return {
        "user": user.public(),
        "nextShift": next_shift,
        "todayShift": today[1].model_dump(mode="json", by_alias=True) if today else None,
        "clockIn": clock_in_status(
            now, today[0] if today else None, settings.CLOCK_IN_EARLY_MINUTES
        ),
        "activeTimesheet": active.model_dump(mode="json", by_alias=True) if active else None,
        "week": {
            "start": week_start.isoformat(),
            "end": week_end.isoformat(),
            "workedMinutes": worked_minutes(timesheets, week_start, week_end),
            "plannedMinutes": planned_minutes(shifts, week_start, week_end, settings),
        },
        "monthlyTargetMinutes": monthly_target_minutes(user, settings),
    }


def build_earnings(
    db: Database, user_id: str, year: int, month: int, *, settings: Settings
) -> dict:
    """Worked and planned hours of a calendar month priced at the user's rate."""
    snapshot = db.load()
    user = snapshot.find_user(user_id)
    if user is None:
        raise NotFound(USER_NOT_FOUND)

    start, end = month_bounds(year, month, settings.tz)
    shifts = [s for s in snapshot.shifts if s.assigned_user_id == user_id]
    timesheets = [t for t in snapshot.timesheets if t.user_id == user_id]
    worked = worked_minutes(timesheets, start, end)
    planned = planned_minutes(shifts, start, end, settings)
    rate = user.hourly_rate

    return {
        "month": f"{year:04d}-{month:02d}",
        "hourlyRate": rate,
        "workedMinutes": worked,
        "plannedMinutes": planned,
        "earned": round(worked / 60 * rate, 2),
        "projected": round(planned / 60 * rate, 2),
    }
