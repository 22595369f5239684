from datetime import date, datetime

import structlog

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import Conflict, NotFound, Unauthorized, ValidationFailed
from worktime.models import Snapshot, User, next_id
from worktime.schemas import LoginRequest, RegisterRequest, UserUpdate
from worktime.services.shifts import USER_NOT_FOUND

log = structlog.get_logger(__name__)


def _find_by_username(snapshot: Snapshot, username: str) -> User | None:
    username = username.strip().lower()
    return next((u for u in snapshot.users if u.username.lower() == username), None)


def _default_name(username: str) -> str:
    return username.split("@")[0]


def login(db: Database, payload: LoginRequest, *, settings: Settings, now: datetime) -> User:
    """
    Log in by username. Unknown usernames are provisioned on first login;
    a stored password has to match (plain comparison).
    """
    with db.transaction() as snapshot:
        user = _find_by_username(snapshot, payload.username)
        if user is None:
            user = User(
                id=next_id(snapshot.users),
                username=payload.username.strip(),
                password=payload.password or None,
                name=_default_name(payload.username.strip()),
                hourly_rate=settings.MIN_HOURLY_RATE,
                created_at=now,
            )
            snapshot.users.append(user)
            log.info("user_provisioned", user_id=user.id)
        elif user.password and user.password != payload.password:
            raise Unauthorized("Nieprawidłowa nazwa użytkownika lub hasło")

    log.info("user_logged_in", user_id=user.id)
    return user


def register(
    db: Database, payload: RegisterRequest, *, settings: Settings, now: datetime
) -> User:
    with db.transaction() as snapshot:
        if _find_by_username(snapshot, payload.username) is not None:
            raise Conflict("Użytkownik o tej nazwie już istnieje")
        username = payload.username.strip()
        user = User(
            id=next_id(snapshot.users),
            username=username,
            password=payload.password,
            name=payload.name or _default_name(username),
            hourly_rate=settings.MIN_HOURLY_RATE,
            created_at=now,
        )
        snapshot.users.append(user)

    log.info("user_registered", user_id=user.id)
    return user


def get_user(db: Database, user_id: str) -> User:
    user = db.load().find_user(user_id)
    if user is None:
        raise NotFound(USER_NOT_FOUND)
    return user


def list_users(db: Database) -> list[User]:
    return db.load().users


def update_user(
    db: Database, user_id: str, payload: UserUpdate, *, settings: Settings
) -> User:
    changes = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None
    }
    rate = changes.get("hourly_rate")
    if rate is not None and rate < settings.MIN_HOURLY_RATE:
        raise ValidationFailed(
            f"Stawka godzinowa nie może być niższa niż {settings.MIN_HOURLY_RATE:.2f}"
        )
    if "notification_preferences" in changes:
        changes["notification_preferences"] = payload.notification_preferences

    with db.transaction() as snapshot:
        index = next((i for i, u in enumerate(snapshot.users) if u.id == user_id), None)
        if index is None:
            raise NotFound(USER_NOT_FOUND)
        updated = snapshot.users[index].model_copy(update=changes)
        snapshot.users[index] = updated

    log.info("user_updated", user_id=user_id, fields=sorted(changes))
    return updated


def delete_user(db: Database, user_id: str) -> None:
    """Delete a user, their availability and their shift assignments."""
    with db.transaction() as snapshot:
        if snapshot.find_user(user_id) is None:
            raise NotFound(USER_NOT_FOUND)
        snapshot.users = [u for u in snapshot.users if u.id != user_id]
        snapshot.availabilities = [
            a for a in snapshot.availabilities if a.user_id != user_id
        ]
        for shift in snapshot.shifts:
            if shift.assigned_user_id == user_id:
                shift.assigned_user_id = None

    log.info("user_deleted", user_id=user_id)


def filter_users(
    db: Database,
    *,
    day: date | None = None,
    position_ids: list[str] | None = None,
    include_unavailable: bool = False,
) -> list[dict]:
    """
    Employees for assignment decisions: those holding any of
    ``position_ids``, annotated with their availability on ``day`` and
    whether they already have a shift then.
    """
    snapshot = db.load()
    rows = []
    for user in snapshot.users:
        if user.is_employer:
            continue
        if position_ids and not set(position_ids) & set(user.positions):
            continue

        row = user.public()
        if day is not None:
            availability = next(
                (
                    a
                    for a in snapshot.availabilities
                    if a.user_id == user.id and a.date == day
                ),
                None,
            )
            if availability is None and not include_unavailable:
                continue
            row["availability"] = (
                availability.model_dump(mode="json", by_alias=True)
                if availability
                else None
            )
            row["isAvailable"] = availability is not None
            row["hasShift"] = any(
                s.assigned_user_id == user.id and s.date == day
                for s in snapshot.shifts
            )
        rows.append(row)
    return rows
