"""Tests for the event model."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta, timezone

import pytest

from models.events import MissingTemporalBoundsError, create_calendar_event, rename_event


def _event(**overrides):
    data = {
        "id": "e1",
        "calendar_id": "fitness",
        "title": "Gym",
        "start": datetime(2025, 1, 5, 9, 0),
        "end": datetime(2025, 1, 5, 10, 30),
    }
    data.update(overrides)
    return create_calendar_event(data)


def test_derived_fields():
    event = _event()
    assert event.duration_minutes == 90
    assert event.day_of_week == 0  # 2025-01-05 is a Sunday
    assert event.day_string == "2025-01-05"
    assert event.is_all_day is False


def test_day_of_week_saturday():
    event = _event(start=datetime(2025, 1, 4, 9, 0), end=datetime(2025, 1, 4, 9, 30))
    assert event.day_of_week == 6


def test_duration_rounds_to_nearest_minute():
    start = datetime(2025, 1, 5, 9, 0)
    event = _event(start=start, end=start + timedelta(minutes=10, seconds=40))
    assert event.duration_minutes == 11


@pytest.mark.parametrize("seconds, minutes", [(30, 1), (90, 2), (150, 3), (29, 0), (-30, 0)])
def test_duration_rounds_halves_up(seconds, minutes):
    start = datetime(2025, 1, 5, 9, 0)
    event = _event(start=start, end=start + timedelta(seconds=seconds))
    assert event.duration_minutes == minutes


def test_zero_and_negative_durations_are_allowed():
    start = datetime(2025, 1, 5, 9, 0)
    assert _event(start=start, end=start).duration_minutes == 0
    assert _event(start=start, end=start - timedelta(minutes=5)).duration_minutes == -5


def test_date_only_values_are_all_day():
    event = _event(start=date(2025, 2, 14), end=date(2025, 2, 15))
    assert event.is_all_day is True
    assert event.start == datetime(2025, 2, 14)
    assert event.duration_minutes == 24 * 60


def test_explicit_all_day_flag_wins():
    event = _event(is_all_day=True)
    assert event.is_all_day is True


def test_aware_datetimes_keep_source_wall_time():
    tz = timezone(timedelta(hours=-5))
    event = _event(
        start=datetime(2025, 1, 5, 23, 30, tzinfo=tz),
        end=datetime(2025, 1, 6, 5, 0, tzinfo=timezone.utc),  # 00:00 at -05:00
    )
    assert event.start == datetime(2025, 1, 5, 23, 30)
    assert event.start.tzinfo is None
    assert event.day_string == "2025-01-05"
    assert event.duration_minutes == 30


@pytest.mark.parametrize("field", ["start", "end"])
def test_missing_bounds_rejected(field):
    with pytest.raises(MissingTemporalBoundsError, match="missing temporal bounds"):
        _event(**{field: None})


def test_unparseable_bounds_rejected():
    with pytest.raises(MissingTemporalBoundsError):
        _event(start="2025-01-05")


def test_events_are_immutable():
    event = _event()
    with pytest.raises(FrozenInstanceError):
        event.title = "Other"


def test_rename_builds_new_event():
    event = _event()
    renamed = rename_event(event, "Weights")
    assert renamed.title == "Weights"
    assert event.title == "Gym"
    assert renamed.duration_minutes == event.duration_minutes
    assert renamed.day_string == event.day_string
