"""Tests for time-range filtering."""

from datetime import date, datetime, time

import pytest

from core.stats import compute_global_stats
from core.time_filter import (
    CustomFilter,
    LifetimeFilter,
    MonthFilter,
    WeekFilter,
    YearFilter,
    filter_by_calendars,
    filter_by_time_range,
    first_monday,
    get_first_event_date,
    get_last_event_date,
    resolve_range,
)


def test_lifetime_range(now):
    date_range = resolve_range(LifetimeFilter(), now)
    assert date_range.from_ == datetime.min
    assert date_range.to == now


def test_past_year_is_not_clamped(now):
    date_range = resolve_range(YearFilter(2024), now)
    assert date_range.from_ == datetime(2024, 1, 1)
    assert date_range.to == datetime.combine(date(2024, 12, 31), time.max)


def test_current_year_clamped_to_now(now):
    date_range = resolve_range(YearFilter(2025), now)
    assert date_range.from_ == datetime(2025, 1, 1)
    assert date_range.to == now


def test_future_year_selects_nothing(now, make_event):
    events = [make_event("Gym", datetime(2026, 3, 1, 7, 0))]
    assert resolve_range(YearFilter(2026), now).is_empty
    assert filter_by_time_range(events, YearFilter(2026), now) == []


def test_month_range_handles_leap_year(now):
    date_range = resolve_range(MonthFilter(2024, 2), now)
    assert date_range.from_ == datetime(2024, 2, 1)
    assert date_range.to.date() == date(2024, 2, 29)

    date_range = resolve_range(MonthFilter(2023, 2), now)
    assert date_range.to.date() == date(2023, 2, 28)


def test_month_boundaries(now, make_event):
    first = make_event("Gym", datetime(2025, 3, 1, 0, 0, 0))
    last = make_event("Gym", datetime(2025, 3, 31, 23, 59, 59))
    next_month = make_event("Gym", datetime(2025, 4, 1, 0, 0, 0))
    previous = make_event("Gym", datetime(2025, 2, 28, 23, 59, 59))

    selected = filter_by_time_range([previous, first, last, next_month], MonthFilter(2025, 3), now)
    assert selected == [first, last]


def test_current_month_clamped_to_now(now, make_event):
    before = make_event("Gym", datetime(2025, 6, 15, 11, 0))
    after = make_event("Gym", datetime(2025, 6, 15, 13, 0))
    assert filter_by_time_range([before, after], MonthFilter(2025, 6), now) == [before]


def test_invalid_month_rejected():
    with pytest.raises(ValueError):
        MonthFilter(2025, 13)
    with pytest.raises(ValueError):
        WeekFilter(2025, 1, 0)


@pytest.mark.parametrize(
    "year, month, expected",
    [
        (2025, 9, date(2025, 9, 1)),  # the 1st is a Monday
        (2025, 6, date(2025, 6, 2)),  # the 1st is a Sunday
        (2025, 1, date(2025, 1, 6)),  # the 1st is a Wednesday
        (2025, 3, date(2025, 3, 3)),  # the 1st is a Saturday
    ],
)
def test_first_monday(year, month, expected):
    assert first_monday(year, month) == expected


def test_week_range(now):
    date_range = resolve_range(WeekFilter(2025, 1, 2), now)
    assert date_range.from_ == datetime(2025, 1, 13)
    assert date_range.to == datetime.combine(date(2025, 1, 19), time.max)


def test_week_can_extend_into_next_month(now):
    date_range = resolve_range(WeekFilter(2025, 1, 4), now)
    assert date_range.from_ == datetime(2025, 1, 27)
    assert date_range.to.date() == date(2025, 2, 2)


def test_current_week_clamped_to_now(now):
    # FIXED_NOW is Sunday 2025-06-15; week 2 of June runs 9th-15th
    date_range = resolve_range(WeekFilter(2025, 6, 2), now)
    assert date_range.from_ == datetime(2025, 6, 9)
    assert date_range.to == now


def test_custom_range_clamped_to_now(now):
    date_range = resolve_range(CustomFilter(datetime(2025, 1, 1), datetime(2030, 1, 1)), now)
    assert date_range.from_ == datetime(2025, 1, 1)
    assert date_range.to == now


def test_min_max_bounds_clamp_inward(now):
    date_range = resolve_range(
        YearFilter(2024), now, min_date=datetime(2024, 3, 5), max_date=datetime(2024, 10, 1)
    )
    assert date_range.from_ == datetime(2024, 3, 5)
    assert date_range.to == datetime(2024, 10, 1)


def test_selection_uses_start_only(now, make_event):
    # Starts on the last evening of the month, ends the next month
    overnight = make_event("Sleep study", datetime(2025, 3, 31, 22, 0), minutes=600)
    assert filter_by_time_range([overnight], MonthFilter(2025, 3), now) == [overnight]
    assert filter_by_time_range([overnight], MonthFilter(2025, 4), now) == []


def test_lifetime_matches_all_non_future_events(now, sample_events):
    lifetime = filter_by_time_range(sample_events, LifetimeFilter(), now)
    expected = [event for event in sample_events if event.start <= now]
    assert compute_global_stats(lifetime) == compute_global_stats(expected)


def test_filter_by_calendars(make_event):
    a = make_event("Gym", datetime(2025, 1, 1), calendar_id="fitness")
    b = make_event("Standup", datetime(2025, 1, 1), calendar_id="work")
    assert filter_by_calendars([a, b], ["work"]) == [b]
    assert filter_by_calendars([a, b], []) == []


def test_first_and_last_event_dates(sample_events):
    assert get_first_event_date(sample_events) == datetime(2024, 12, 30, 7, 0)
    assert get_last_event_date(sample_events) == datetime(2025, 7, 1, 7, 0)
    assert get_first_event_date([]) is None
    assert get_last_event_date([]) is None


def test_filtering_does_not_mutate_input(now, sample_events):
    snapshot = list(sample_events)
    filter_by_time_range(sample_events, YearFilter(2025), now)
    assert sample_events == snapshot
