"""
Start/end values come in two shapes: a local time of day (``"HH:MM"``) on the
record's service day, or a full ISO timestamp. ``parse_time_value`` turns the
raw string into a ``LocalTime`` or an ``Instant`` and the helpers below build
absolute intervals from them.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")


@dataclass(frozen=True)
class LocalTime:
    hour: int
    minute: int
    second: int = 0

    def on(self, day: date, tz: tzinfo) -> datetime:
        return datetime.combine(day, time(self.hour, self.minute, self.second), tzinfo=tz)

    def as_tuple(self) -> tuple[int, int, int]:
        return self.hour, self.minute, self.second

    def __str__(self) -> str:
        if self.second:
            return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class Instant:
    value: datetime

    def on(self, day: date, tz: tzinfo) -> datetime:
        return self.value


TimeValue = LocalTime | Instant


class InvalidTimeRange(ValueError):
    pass


def parse_time_value(raw: str, tz: tzinfo) -> TimeValue:
    """
    Parse ``"HH:MM"`` (optionally ``"HH:MM:SS"``) or an ISO timestamp.
    Naive timestamps are taken to be in ``tz``.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError(f"invalid time value: {raw!r}")
    match = _HHMM.match(raw)
    if match:
        return LocalTime(
            int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
        )
    try:
        value = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"invalid time value: {raw!r}") from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return Instant(value)


def parse_instant(raw: str | datetime, tz: tzinfo) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    else:
        value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value


def resolve_interval(
    day: date, start: str, end: str, tz: tzinfo
) -> tuple[datetime, datetime]:
    """
    Absolute (start, end) for a record on ``day``. A time-of-day end that is
    not after the start wraps to the next day.
    """
    start_value = parse_time_value(start, tz)
    end_value = parse_time_value(end, tz)
    start_at = start_value.on(day, tz)
    end_at = end_value.on(day, tz)
    if isinstance(end_value, LocalTime) and end_at <= start_at:
        end_at += timedelta(days=1)
    return start_at, end_at


def duration_minutes(day: date, start: str, end: str, tz: tzinfo) -> int:
    start_at, end_at = resolve_interval(day, start, end, tz)
    return int((end_at - start_at).total_seconds() // 60)


def validate_range(
    day: date, start: str, end: str, tz: tzinfo, *, allow_overnight: bool = False
) -> None:
    """
    Raise ``InvalidTimeRange`` unless ``end`` is after ``start``, or
    ``ValueError`` when either value cannot be parsed.

    Two timestamps compare as instants, two times of day compare by
    (hour, minute, second); an earlier time-of-day end only passes when
    ``allow_overnight`` is set. Mixed shapes compare on the service day.
    """
    start_value = parse_time_value(start, tz)
    end_value = parse_time_value(end, tz)

    if isinstance(start_value, Instant) and isinstance(end_value, Instant):
        if end_value.value <= start_value.value:
            raise InvalidTimeRange("end must be after start")
        return

    if isinstance(start_value, LocalTime) and isinstance(end_value, LocalTime):
        if end_value.as_tuple() == start_value.as_tuple():
            raise InvalidTimeRange("end must be after start")
        if end_value.as_tuple() < start_value.as_tuple() and not allow_overnight:
            raise InvalidTimeRange("end must be after start")
        return

    if end_value.on(day, tz) <= start_value.on(day, tz):
        raise InvalidTimeRange("end must be after start")


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """[Monday 00:00, next Monday 00:00) of the week containing ``now``."""
    monday = now.date() - timedelta(days=now.weekday())
    start = datetime.combine(monday, time.min, tzinfo=now.tzinfo)
    return start, start + timedelta(days=7)


def month_bounds(year: int, month: int, tz: tzinfo) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=tz)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month + 1, 1, tzinfo=tz)
    return start, end


def format_hhmm(value: datetime, tz: tzinfo) -> str:
    return value.astimezone(tz).strftime("%H:%M")
