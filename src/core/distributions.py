"""
Minute and session distributions over weekday, hour, month and week.
"""

import math
from datetime import date, timedelta

from core.config import CONTRIBUTION_DAYS, CONTRIBUTION_MAX_LEVEL
from models.events import CalendarEvent
from models.stats import (
    ContributionDay,
    DayOfWeekBucket,
    Distributions,
    HourBucket,
    MonthBucket,
    WeekBucket,
)

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def minutes_by_day_of_week(events: list[CalendarEvent]) -> list[DayOfWeekBucket]:
    buckets = [DayOfWeekBucket(day=name, day_index=i) for i, name in enumerate(DAY_NAMES)]
    for event in events:
        bucket = buckets[event.day_of_week]
        bucket.minutes += event.duration_minutes
        bucket.count += 1
    return buckets


def minutes_by_hour(events: list[CalendarEvent]) -> list[HourBucket]:
    buckets = [HourBucket(hour=hour) for hour in range(24)]
    for event in events:
        bucket = buckets[event.start.hour]
        bucket.minutes += event.duration_minutes
        bucket.count += 1
    return buckets


def minutes_by_month(events: list[CalendarEvent]) -> list[MonthBucket]:
    buckets = [MonthBucket(month=name, month_index=i) for i, name in enumerate(MONTH_NAMES)]
    for event in events:
        bucket = buckets[event.start.month - 1]
        bucket.minutes += event.duration_minutes
        bucket.count += 1
    return buckets


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def minutes_by_week(events: list[CalendarEvent]) -> list[WeekBucket]:
    """Weekly totals keyed by Monday, oldest first. Weeks without events are omitted."""
    weeks: dict[date, WeekBucket] = {}
    for event in events:
        key = week_start(event.start.date())
        bucket = weeks.setdefault(key, WeekBucket(week_start=key))
        bucket.minutes += event.duration_minutes
        bucket.count += 1
    return [weeks[key] for key in sorted(weeks)]


def contribution_level(count: int, max_count: int, max_level: int = CONTRIBUTION_MAX_LEVEL) -> int:
    if count == 0 or max_count == 0:
        return 0
    return min(math.ceil(count / max_count * max_level), max_level)


def daily_contributions(
    events: list[CalendarEvent], today: date | None = None, days: int = CONTRIBUTION_DAYS
) -> list[ContributionDay]:
    """
    One entry per day for the `days` days ending today, with event counts
    and an intensity level relative to the busiest day. Events after today
    are ignored.
    """
    if today is None:
        today = date.today()

    counts: dict[str, int] = {}
    for event in events:
        if event.start.date() <= today:
            counts[event.day_string] = counts.get(event.day_string, 0) + 1

    max_count = max(counts.values(), default=0)
    result = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        count = counts.get(day.isoformat(), 0)
        result.append(ContributionDay(date=day, count=count, level=contribution_level(count, max_count)))
    return result


def compute_distributions(events: list[CalendarEvent]) -> Distributions:
    return Distributions(
        day_of_week=minutes_by_day_of_week(events),
        hour_of_day=minutes_by_hour(events),
        month_of_year=minutes_by_month(events),
        weekly=minutes_by_week(events),
    )


def busiest(buckets: list, key: str = "minutes"):
    """Bucket with the highest value for key, or None when every bucket is zero."""
    top = max(buckets, key=lambda b: getattr(b, key), default=None)
    if top is None or getattr(top, key) == 0:
        return None
    return top
