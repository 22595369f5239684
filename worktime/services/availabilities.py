from datetime import date, datetime

import structlog

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import Conflict, NotFound
from worktime.models import Availability, Snapshot, next_id
from worktime.schemas import AvailabilityCreate, AvailabilityUpdate
from worktime.services.shifts import USER_NOT_FOUND, check_times

log = structlog.get_logger(__name__)

AVAILABILITY_NOT_FOUND = "Nie znaleziono dostępności"


def _ensure_unique_day(
    snapshot: Snapshot, user_id: str, day: date, exclude_id: str | None = None
) -> None:
    for item in snapshot.availabilities:
        if item.user_id == user_id and item.date == day and item.id != exclude_id:
            raise Conflict("Dostępność na ten dzień już istnieje")


def create_availability(
    db: Database, payload: AvailabilityCreate, *, settings: Settings, now: datetime
) -> Availability:
    check_times(payload.date, payload.start, payload.end, settings, allow_overnight=False)
    with db.transaction() as snapshot:
        if snapshot.find_user(payload.user_id) is None:
            raise NotFound(USER_NOT_FOUND)
        _ensure_unique_day(snapshot, payload.user_id, payload.date)
        item = Availability(
            id=next_id(snapshot.availabilities),
            user_id=payload.user_id,
            date=payload.date,
            start=payload.start,
            end=payload.end,
            notes=payload.notes,
            created_at=now,
            updated_at=now,
        )
        snapshot.availabilities.append(item)

    log.info("availability_created", availability_id=item.id, user_id=item.user_id)
    return item


def update_availability(
    db: Database,
    availability_id: str,
    payload: AvailabilityUpdate,
    *,
    settings: Settings,
    now: datetime,
) -> Availability:
    changes = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None
    }
    with db.transaction() as snapshot:
        index = next(
            (i for i, a in enumerate(snapshot.availabilities) if a.id == availability_id),
            None,
        )
        if index is None:
            raise NotFound(AVAILABILITY_NOT_FOUND)
        updated = snapshot.availabilities[index].model_copy(
            update={**changes, "updated_at": now}
        )
        check_times(updated.date, updated.start, updated.end, settings, allow_overnight=False)
        _ensure_unique_day(snapshot, updated.user_id, updated.date, exclude_id=updated.id)
        snapshot.availabilities[index] = updated

    log.info("availability_updated", availability_id=availability_id)
    return updated


def delete_availability(db: Database, availability_id: str) -> None:
    with db.transaction() as snapshot:
        before = len(snapshot.availabilities)
        snapshot.availabilities = [
            a for a in snapshot.availabilities if a.id != availability_id
        ]
        if len(snapshot.availabilities) == before:
            raise NotFound(AVAILABILITY_NOT_FOUND)
    log.info("availability_deleted", availability_id=availability_id)


def list_availabilities(
    db: Database,
    *,
    user_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    with_names: bool = False,
) -> list[dict]:
    snapshot = db.load()
    rows = []
    for item in sorted(snapshot.availabilities, key=lambda a: (a.date, a.start)):
        if user_id is not None and item.user_id != user_id:
            continue
        if date_from is not None and item.date < date_from:
            continue
        if date_to is not None and item.date > date_to:
            continue
        row = item.model_dump(mode="json", by_alias=True)
        if with_names:
            user = snapshot.find_user(item.user_id)
            row["userName"] = user.name if user else None
        rows.append(row)
    return rows
