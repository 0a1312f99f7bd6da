"""Tests for weekday, hour, month and weekly distributions."""

from datetime import date, datetime

from core.distributions import (
    DAY_NAMES,
    busiest,
    compute_distributions,
    contribution_level,
    daily_contributions,
    minutes_by_day_of_week,
    minutes_by_hour,
    minutes_by_month,
    minutes_by_week,
    week_start,
)


def test_day_of_week_buckets(sample_events):
    buckets = minutes_by_day_of_week(sample_events)
    assert [b.day for b in buckets] == DAY_NAMES
    assert sum(b.count for b in buckets) == len(sample_events)

    # 2024-12-30 Mon, 2025-03-10 Mon
    monday = buckets[1]
    assert monday.count == 2
    assert monday.minutes == 100


def test_hour_buckets(sample_events):
    buckets = minutes_by_hour(sample_events)
    assert len(buckets) == 24
    assert buckets[7].count == 4
    assert buckets[18].minutes == 55
    assert buckets[0].count == 0


def test_month_buckets(sample_events):
    buckets = minutes_by_month(sample_events)
    assert buckets[0].month == "Jan"
    assert buckets[0].count == 3
    assert buckets[11].count == 1  # the December 2024 session
    assert sum(b.minutes for b in buckets) == sum(e.duration_minutes for e in sample_events)


def test_week_start():
    assert week_start(date(2025, 1, 1)) == date(2024, 12, 30)
    assert week_start(date(2024, 12, 30)) == date(2024, 12, 30)
    assert week_start(date(2025, 1, 5)) == date(2024, 12, 30)


def test_weekly_buckets_sorted_and_sparse(sample_events):
    weeks = minutes_by_week(sample_events)
    assert [w.week_start for w in weeks] == sorted(w.week_start for w in weeks)
    assert weeks[0].week_start == date(2024, 12, 30)
    assert weeks[0].count == 4  # Dec 30 through Jan 3
    assert len(weeks) == 4


def test_empty_distributions():
    distributions = compute_distributions([])
    assert all(b.minutes == 0 for b in distributions.day_of_week)
    assert all(b.count == 0 for b in distributions.hour_of_day)
    assert distributions.weekly == []
    assert busiest(distributions.day_of_week) is None


def test_busiest(sample_events):
    distributions = compute_distributions(sample_events)
    assert busiest(distributions.day_of_week).day == "Mon"  # Dec 30 + Mar 10 sessions
    assert busiest(distributions.hour_of_day, key="count").hour == 7


def test_contribution_level():
    assert contribution_level(0, 5) == 0
    assert contribution_level(1, 0) == 0
    assert contribution_level(1, 4) == 1
    assert contribution_level(3, 4) == 3
    assert contribution_level(5, 5) == 4


def test_daily_contributions(make_event):
    today = date(2025, 1, 10)
    events = [
        make_event("Gym", datetime(2025, 1, 10, 7, 0)),
        make_event("Gym", datetime(2025, 1, 10, 18, 0)),
        make_event("Run", datetime(2025, 1, 8, 7, 0)),
        make_event("Run", datetime(2025, 1, 11, 7, 0)),  # after today
        make_event("Run", datetime(2024, 1, 1, 7, 0)),  # outside the window
    ]
    days = daily_contributions(events, today=today, days=7)

    assert len(days) == 7
    assert days[0].date == date(2025, 1, 4)
    assert days[-1].date == today
    assert days[-1].count == 2
    assert days[-1].level == 4
    assert days[-3].count == 1
    assert days[-3].level == 2
    assert sum(d.count for d in days) == 3
