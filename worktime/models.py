"""
Persisted WorkTime entities.

Attributes are snake_case in Python and camelCase in the stored document and
on the wire.
"""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def calendar_day(value):
    # "2024-01-01T00:00:00.000Z" is accepted and truncated to its date
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if isinstance(value, datetime):
        return value.date()
    return value


class NotificationPreferences(CamelModel):
    shifts: bool = True
    swaps: bool = True
    reminders: bool = True


class User(CamelModel):
    id: str
    username: str
    password: str | None = None
    name: str
    is_employer: bool = False
    phone: str | None = None
    avatar: str | None = None
    hourly_rate: float = 0.0
    positions: list[str] = Field(default_factory=list)
    notification_preferences: NotificationPreferences = Field(
        default_factory=NotificationPreferences
    )
    monthly_goal_hours: float | None = None
    created_at: datetime | None = None

    def public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude={"password"})


class Shift(CamelModel):
    id: str
    date: date
    start: str
    end: str
    role: str = "Zmiana"
    location: str = "Lokal"
    assigned_user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return calendar_day(value)


class Availability(CamelModel):
    id: str
    user_id: str
    date: date
    start: str
    end: str
    notes: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return calendar_day(value)


class SwapStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self is not SwapStatus.PENDING


class Swap(CamelModel):
    id: str
    shift_id: str
    requester_id: str
    target_user_id: str | None = None  # None: open market
    status: SwapStatus = SwapStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Coordinates(CamelModel):
    latitude: float
    longitude: float
    accuracy: float | None = None


class Timesheet(CamelModel):
    id: str
    user_id: str
    shift_id: str | None = None
    clock_in: datetime
    clock_out: datetime | None = None
    check_in_location: Coordinates | None = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None


class CompanyLocation(CamelModel):
    latitude: float
    longitude: float
    radius: float = 100.0
    address: str = ""
    name: str = ""


class Company(CamelModel):
    name: str = "WorkTime"
    location: CompanyLocation | None = None


class Meta(CamelModel):
    seeded_at: datetime | None = None


class Snapshot(CamelModel):
    """The whole persisted document."""

    users: list[User] = Field(default_factory=list)
    shifts: list[Shift] = Field(default_factory=list)
    availabilities: list[Availability] = Field(default_factory=list)
    swaps: list[Swap] = Field(default_factory=list)
    timesheets: list[Timesheet] = Field(default_factory=list)
    company: Company | None = None
    meta: Meta = Field(default_factory=Meta)

    def find_user(self, user_id: str) -> User | None:
        return next((u for u in self.users if u.id == user_id), None)

    def find_shift(self, shift_id: str) -> Shift | None:
        return next((s for s in self.shifts if s.id == shift_id), None)

    def find_swap(self, swap_id: str) -> Swap | None:
        return next((s for s in self.swaps if s.id == swap_id), None)


def next_id(items: list) -> str:
    """Next free numeric id for a collection."""
    numeric = [int(item.id) for item in items if item.id.isdigit()]
    return str(max(numeric, default=0) + 1)
