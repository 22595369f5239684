from collections import defaultdict
from datetime import date, datetime, tzinfo

import structlog

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import NotFound, ValidationFailed
from worktime.models import Shift, Snapshot, next_id
from worktime.schemas import ShiftCreate, ShiftUpdate
from worktime.timeutils import (
    InvalidTimeRange,
    duration_minutes,
    resolve_interval,
    validate_range,
)

log = structlog.get_logger(__name__)

SHIFT_NOT_FOUND = "Nie znaleziono zmiany"
USER_NOT_FOUND = "Nie znaleziono pracownika"


def check_times(day: date, start: str, end: str, settings: Settings, *, allow_overnight: bool) -> None:
    try:
        validate_range(day, start, end, settings.tz, allow_overnight=allow_overnight)
    except InvalidTimeRange as exc:
        raise ValidationFailed(
            "Godzina zakończenia musi być późniejsza niż godzina rozpoczęcia"
        ) from exc
    except ValueError as exc:
        raise ValidationFailed(
            "Nieprawidłowy format godziny (HH:MM lub ISO 8601)"
        ) from exc


def shift_minutes(shift: Shift, tz: tzinfo) -> int:
    return duration_minutes(shift.date, shift.start, shift.end, tz)


def shift_interval(shift: Shift, tz: tzinfo) -> tuple[datetime, datetime]:
    return resolve_interval(shift.date, shift.start, shift.end, tz)


def _require_user(snapshot: Snapshot, user_id: str | None) -> None:
    if user_id is not None and snapshot.find_user(user_id) is None:
        raise NotFound(USER_NOT_FOUND)


def create_shift(
    db: Database, payload: ShiftCreate, *, settings: Settings, now: datetime
) -> Shift:
    check_times(
        payload.date,
        payload.start,
        payload.end,
        settings,
        allow_overnight=settings.ALLOW_OVERNIGHT_SHIFTS,
    )
    with db.transaction() as snapshot:
        assigned_user_id = payload.assigned_user_id or None
        _require_user(snapshot, assigned_user_id)
        shift = Shift(
            id=next_id(snapshot.shifts),
            date=payload.date,
            start=payload.start,
            end=payload.end,
            role=payload.role or "Zmiana",
            location=payload.location or "Lokal",
            assigned_user_id=assigned_user_id,
            created_at=now,
            updated_at=now,
        )
        snapshot.shifts.append(shift)

    log.info("shift_created", shift_id=shift.id, date=str(shift.date))
    return shift


def update_shift(
    db: Database,
    shift_id: str,
    payload: ShiftUpdate,
    *,
    settings: Settings,
    now: datetime,
) -> Shift:
    changes = payload.model_dump(exclude_unset=True)
    # role/location/date/start/end cannot be cleared
    changes = {
        k: v for k, v in changes.items() if v is not None or k == "assigned_user_id"
    }
    if "assigned_user_id" in changes:
        changes["assigned_user_id"] = changes["assigned_user_id"] or None

    with db.transaction() as snapshot:
        index = next(
            (i for i, s in enumerate(snapshot.shifts) if s.id == shift_id), None
        )
        if index is None:
            raise NotFound(SHIFT_NOT_FOUND)
        _require_user(snapshot, changes.get("assigned_user_id"))

        updated = snapshot.shifts[index].model_copy(
            update={**changes, "updated_at": now}
        )
        check_times(
            updated.date,
            updated.start,
            updated.end,
            settings,
            allow_overnight=settings.ALLOW_OVERNIGHT_SHIFTS,
        )
        snapshot.shifts[index] = updated

    log.info("shift_updated", shift_id=shift_id, fields=sorted(changes))
    return updated


def delete_shift(db: Database, shift_id: str) -> None:
    with db.transaction() as snapshot:
        before = len(snapshot.shifts)
        snapshot.shifts = [s for s in snapshot.shifts if s.id != shift_id]
        if len(snapshot.shifts) == before:
            raise NotFound(SHIFT_NOT_FOUND)
    log.info("shift_deleted", shift_id=shift_id)


def assign_shift(
    db: Database, shift_id: str, user_id: str | None, *, now: datetime
) -> Shift:
    user_id = user_id or None
    with db.transaction() as snapshot:
        shift = snapshot.find_shift(shift_id)
        if shift is None:
            raise NotFound(SHIFT_NOT_FOUND)
        _require_user(snapshot, user_id)
        shift.assigned_user_id = user_id
        shift.updated_at = now

    log.info("shift_assigned", shift_id=shift_id, user_id=user_id)
    return shift


def filter_shifts(
    shifts: list[Shift],
    *,
    date_from: date | None = None,
    date_to: date | None = None,
    user_id: str | None = None,
    role: str | None = None,
    unassigned: bool = False,
) -> list[Shift]:
    result = []
    for shift in shifts:
        if date_from is not None and shift.date < date_from:
            continue
        if date_to is not None and shift.date > date_to:
            continue
        if user_id is not None and shift.assigned_user_id != user_id:
            continue
        if role is not None and shift.role != role:
            continue
        if unassigned and shift.assigned_user_id is not None:
            continue
        result.append(shift)
    return result


def list_shifts(
    db: Database,
    *,
    settings: Settings,
    date_from: date | None = None,
    date_to: date | None = None,
    user_id: str | None = None,
    role: str | None = None,
    unassigned: bool = False,
    group_by_day: bool = False,
    summary: bool = False,
) -> list[Shift] | dict:
    """
    Shifts matching the filters, ordered by start.

    With ``group_by_day`` the result is ``{"days": {date: [shifts]}}``;
    ``summary`` adds ``totalMinutes`` and ``count`` (wrapping a plain list
    under ``shifts``).
    """
    snapshot = db.load()
    tz = settings.tz
    shifts = filter_shifts(
        snapshot.shifts,
        date_from=date_from,
        date_to=date_to,
        user_id=user_id,
        role=role,
        unassigned=unassigned,
    )
    shifts.sort(key=lambda s: shift_interval(s, tz)[0])

    if not group_by_day and not summary:
        return shifts

    result: dict = {}
    if group_by_day:
        days: dict[str, list[Shift]] = defaultdict(list)
        for shift in shifts:
            days[shift.date.isoformat()].append(shift)
        result["days"] = dict(days)
    else:
        result["shifts"] = shifts
    if summary:
        result["totalMinutes"] = sum(shift_minutes(s, tz) for s in shifts)
        result["count"] = len(shifts)
    return result
