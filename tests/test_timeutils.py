from datetime import date, datetime, timedelta

import pytest

from conftest import WARSAW
from worktime.timeutils import (
    Instant,
    InvalidTimeRange,
    LocalTime,
    duration_minutes,
    parse_time_value,
    resolve_interval,
    validate_range,
    week_bounds,
)

DAY = date(2024, 1, 3)


def test_parse_both_shapes() -> None:
    assert parse_time_value("08:05", WARSAW) == LocalTime(8, 5)
    assert parse_time_value("08:05:30", WARSAW) == LocalTime(8, 5, 30)

    value = parse_time_value("2024-01-03T08:00:00Z", WARSAW)
    assert isinstance(value, Instant)
    assert value.value.utcoffset() == timedelta(0)

    naive = parse_time_value("2024-01-03T08:00:00", WARSAW)
    assert naive.value.tzinfo is WARSAW

    with pytest.raises(ValueError):
        parse_time_value("8 rano", WARSAW)


def test_overnight_wraps_only_time_of_day_end() -> None:
    start, end = resolve_interval(DAY, "22:00", "06:00", WARSAW)
    assert end - start == timedelta(hours=8)
    assert duration_minutes(DAY, "22:00", "06:00", WARSAW) == 480


def test_mixed_shapes() -> None:
    assert duration_minutes(DAY, "2024-01-03T10:00:00+01:00", "18:00", WARSAW) == 480
    validate_range(DAY, "10:00", "2024-01-03T18:00:00+01:00", WARSAW)
    with pytest.raises(InvalidTimeRange):
        validate_range(DAY, "10:00", "2024-01-03T09:00:00+01:00", WARSAW)


def test_validate_time_of_day() -> None:
    validate_range(DAY, "09:00", "17:00", WARSAW)
    with pytest.raises(InvalidTimeRange):
        validate_range(DAY, "09:00", "08:00", WARSAW)
    with pytest.raises(InvalidTimeRange):
        validate_range(DAY, "09:00", "09:00", WARSAW, allow_overnight=True)
    validate_range(DAY, "22:00", "06:00", WARSAW, allow_overnight=True)


def test_validate_time_of_day_keeps_seconds() -> None:
    validate_range(DAY, "09:00:10", "09:00:50", WARSAW)
    assert duration_minutes(DAY, "09:00:00", "09:30:59", WARSAW) == 30
    with pytest.raises(InvalidTimeRange):
        validate_range(DAY, "09:00:50", "09:00:10", WARSAW)
    with pytest.raises(InvalidTimeRange):
        validate_range(DAY, "09:00:00", "09:00", WARSAW)


def test_validate_instants() -> None:
    validate_range(DAY, "2024-01-03T22:00:00+01:00", "2024-01-04T06:00:00+01:00", WARSAW)
    with pytest.raises(InvalidTimeRange):
        validate_range(DAY, "2024-01-03T10:00:00Z", "2024-01-03T10:00:00Z", WARSAW)


def test_week_bounds_start_on_monday() -> None:
    start, end = week_bounds(datetime(2024, 1, 7, 23, 59, tzinfo=WARSAW))
    assert start == datetime(2024, 1, 1, tzinfo=WARSAW)
    assert end == datetime(2024, 1, 8, tzinfo=WARSAW)
