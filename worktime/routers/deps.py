from datetime import date, datetime, time

from fastapi import Request

from worktime.config import Settings
from worktime.database import Database
from worktime.errors import ValidationFailed
from worktime.models import Company, calendar_day
from worktime.timeutils import parse_instant


def get_db(request: Request) -> Database:
    return request.app.state.database


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_company(request: Request) -> Company:
    return request.app.state.company


def get_now(request: Request) -> datetime:
    return request.app.state.now_fn()


def parse_date_param(value: str | None, name: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(calendar_day(value))
    except ValueError as exc:
        raise ValidationFailed(f"Nieprawidłowa data w parametrze {name}") from exc


def parse_datetime_param(
    value: str | None, name: str, settings: Settings, *, end_of_day: bool = False
) -> datetime | None:
    """
    Timestamp query parameter. A bare date means its first instant, or its
    last one when ``end_of_day`` is set.
    """
    if not value:
        return None
    try:
        if end_of_day and len(value) == 10:
            return datetime.combine(date.fromisoformat(value), time.max, tzinfo=settings.tz)
        return parse_instant(value, settings.tz)
    except ValueError as exc:
        raise ValidationFailed(f"Nieprawidłowa data w parametrze {name}") from exc
