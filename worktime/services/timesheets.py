from datetime import datetime

import structlog

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import Forbidden, NotFound, ValidationFailed
from worktime.geo import check_location
from worktime.models import Company, Snapshot, Timesheet, next_id
from worktime.schemas import ClockInRequest, ClockOutRequest
from worktime.services.shifts import SHIFT_NOT_FOUND
from worktime.timeutils import parse_instant

log = structlog.get_logger(__name__)


def open_timesheet(snapshot: Snapshot, user_id: str) -> Timesheet | None:
    """The user's most recent open timesheet, if any."""
    open_ones = [t for t in snapshot.timesheets if t.user_id == user_id and t.is_open]
    return max(open_ones, key=lambda t: t.clock_in, default=None)


def clock_in(
    db: Database,
    payload: ClockInRequest,
    *,
    settings: Settings,
    company: Company,
    now: datetime,
) -> Timesheet:
    clock_in_at = parse_instant(payload.timestamp or now, settings.tz)

    if settings.REQUIRE_GEOFENCE_ON_CLOCK_IN and company.location is not None:
        if payload.location is None:
            raise ValidationFailed("Wymagana jest lokalizacja")
        result = check_location(
            payload.location.latitude, payload.location.longitude, company.location
        )
        if not result["isWithin"]:
            raise Forbidden(
                f"Jesteś poza obszarem pracy ({result['distance']} m od lokalu)"
            )

    with db.transaction() as snapshot:
        if open_timesheet(snapshot, payload.user_id) is not None:
            raise ValidationFailed("Jesteś już w pracy")
        if payload.shift_id and snapshot.find_shift(payload.shift_id) is None:
            raise NotFound(SHIFT_NOT_FOUND)

        entry = Timesheet(
            id=next_id(snapshot.timesheets),
            user_id=payload.user_id,
            shift_id=payload.shift_id or None,
            clock_in=clock_in_at,
            check_in_location=payload.location,
        )
        snapshot.timesheets.append(entry)

    log.info("clocked_in", user_id=entry.user_id, timesheet_id=entry.id)
    return entry


def clock_out(
    db: Database, payload: ClockOutRequest, *, settings: Settings, now: datetime
) -> Timesheet:
    clock_out_at = parse_instant(payload.timestamp or now, settings.tz)

    with db.transaction() as snapshot:
        entry = open_timesheet(snapshot, payload.user_id)
        if entry is None:
            raise ValidationFailed("Nie jesteś w pracy")
        if clock_out_at < entry.clock_in:
            raise ValidationFailed("Czas wyjścia nie może być wcześniejszy niż czas wejścia")
        entry.clock_out = clock_out_at

    log.info("clocked_out", user_id=entry.user_id, timesheet_id=entry.id)
    return entry


def active_timesheet(db: Database, user_id: str) -> Timesheet | None:
    return open_timesheet(db.load(), user_id)


def list_timesheets(
    db: Database,
    *,
    settings: Settings,
    user_id: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> list[Timesheet]:
    tz = settings.tz
    start = parse_instant(date_from, tz) if date_from else None
    end = parse_instant(date_to, tz) if date_to else None
    result = []
    for entry in db.load().timesheets:
        if user_id is not None and entry.user_id != user_id:
            continue
        if start is not None and entry.clock_in < start:
            continue
        if end is not None and entry.clock_in > end:
            continue
        result.append(entry)
    return sorted(result, key=lambda t: t.clock_in)
