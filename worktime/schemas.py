"""
Request bodies accepted by the API.
"""

import datetime as dt

from pydantic import Field, field_validator

from worktime.models import (
    CamelModel,
    Coordinates,
    NotificationPreferences,
    calendar_day,
)


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str | None = None


class RegisterRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    name: str | None = None


class UserUpdate(CamelModel):
    name: str | None = None
    password: str | None = None
    is_employer: bool | None = None
    phone: str | None = None
    avatar: str | None = None
    hourly_rate: float | None = None
    positions: list[str] | None = None
    notification_preferences: NotificationPreferences | None = None
    monthly_goal_hours: float | None = Field(default=None, gt=0)


class ShiftCreate(CamelModel):
    date: dt.date
    start: str
    end: str
    role: str | None = None
    location: str | None = None
    assigned_user_id: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return calendar_day(value)


class ShiftUpdate(CamelModel):
    date: dt.date | None = None
    start: str | None = None
    end: str | None = None
    role: str | None = None
    location: str | None = None
    assigned_user_id: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return calendar_day(value)


class AssignRequest(CamelModel):
    user_id: str | None = None


class AvailabilityCreate(CamelModel):
    user_id: str = Field(min_length=1)
    date: dt.date
    start: str
    end: str
    notes: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return calendar_day(value)


class AvailabilityUpdate(CamelModel):
    date: dt.date | None = None
    start: str | None = None
    end: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return calendar_day(value)


class SwapCreate(CamelModel):
    shift_id: str = Field(min_length=1)
    requester_id: str = Field(min_length=1)
    target_user_id: str | None = None


class SwapAction(CamelModel):
    actor_user_id: str | None = None


class ClockInRequest(CamelModel):
    user_id: str = Field(min_length=1)
    timestamp: dt.datetime | None = None
    shift_id: str | None = None
    location: Coordinates | None = None


class ClockOutRequest(CamelModel):
    user_id: str = Field(min_length=1)
    timestamp: dt.datetime | None = None


class LocationCheckRequest(CamelModel):
    latitude: float | None = None
    longitude: float | None = None
