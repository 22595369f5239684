from datetime import date, datetime, timedelta

import structlog

from worktime.database import Database
from worktime.models import Shift

log = structlog.get_logger(__name__)

ROLES = ["Kelner", "Barista"]
LOCATIONS = ["Restauracja Centralna", "Kawiarnia A"]
START_OPTIONS = ["08:00", "10:00", "12:00", "14:00"]
DURATION_OPTIONS = [6 * 60, 8 * 60]
DAYS = 28


def _add_minutes(hhmm: str, minutes: int) -> str:
    hours, mins = (int(part) for part in hhmm.split(":"))
    total = hours * 60 + mins + minutes
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"


def demo_shifts(start: date, now: datetime) -> list[Shift]:
    """Four weeks of unassigned shifts: weekdays plus every other Saturday."""
    shifts = []
    for offset in range(DAYS):
        day = start + timedelta(days=offset)
        dow = day.isoweekday() % 7  # Sunday == 0
        if not (1 <= dow <= 5 or (dow == 6 and offset % 2 == 0)):
            continue
        start_time = START_OPTIONS[(offset + dow) % len(START_OPTIONS)]
        duration = DURATION_OPTIONS[(offset + 1) % len(DURATION_OPTIONS)]
        shifts.append(
            Shift(
                id=str(len(shifts) + 1),
                date=day,
                start=start_time,
                end=_add_minutes(start_time, duration),
                role=ROLES[(offset + dow) % len(ROLES)],
                location=LOCATIONS[(offset * 3 + dow) % len(LOCATIONS)],
                created_at=now,
                updated_at=now,
            )
        )
    return shifts


def seed_if_empty(db: Database, now: datetime) -> bool:
    """Seed demo shifts when the store has none. Returns True if it did."""
    with db.transaction() as snapshot:
        if snapshot.shifts:
            return False
        snapshot.shifts = demo_shifts(now.date(), now)
        snapshot.meta.seeded_at = now

    log.info("demo_data_seeded", shifts=len(snapshot.shifts))
    return True
