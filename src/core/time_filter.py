"""
Time-range filtering.

A filter resolves to an inclusive [from_, to] range that never extends past
"now". Only an event's start decides membership.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from models.events import CalendarEvent


@dataclass(frozen=True)
class YearFilter:
    year: int


@dataclass(frozen=True)
class MonthFilter:
    year: int
    month: int  # 1-12

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")


@dataclass(frozen=True)
class WeekFilter:
    year: int
    month: int  # 1-12
    week: int  # 1-based, counted from the first Monday of the month

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")
        if self.week < 1:
            raise ValueError(f"Week must be 1 or greater, got {self.week}")


@dataclass(frozen=True)
class LifetimeFilter:
    pass


@dataclass(frozen=True)
class CustomFilter:
    from_: datetime
    to: datetime


TimeFilter = YearFilter | MonthFilter | WeekFilter | LifetimeFilter | CustomFilter


@dataclass(frozen=True)
class DateRange:
    from_: datetime
    to: datetime

    @property
    def is_empty(self) -> bool:
        return self.to < self.from_

    def contains(self, moment: datetime) -> bool:
        return self.from_ <= moment <= self.to


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def first_monday(year: int, month: int) -> date:
    """First Monday on or after the 1st of the month."""
    first = date(year, month, 1)
    return first + timedelta(days=(7 - first.weekday()) % 7)


def _unclamped_range(time_filter: TimeFilter, now: datetime) -> tuple[datetime, datetime]:
    match time_filter:
        case LifetimeFilter():
            return datetime.min, now
        case YearFilter(year=year):
            return start_of_day(date(year, 1, 1)), end_of_day(date(year, 12, 31))
        case MonthFilter(year=year, month=month):
            last_day = calendar.monthrange(year, month)[1]
            return (
                start_of_day(date(year, month, 1)),
                end_of_day(date(year, month, last_day)),
            )
        case WeekFilter(year=year, month=month, week=week):
            week_start = first_monday(year, month) + timedelta(weeks=week - 1)
            return start_of_day(week_start), end_of_day(week_start + timedelta(days=6))
        case CustomFilter(from_=from_, to=to):
            return from_, to
    raise ValueError(f"Unsupported time filter: {time_filter!r}")


def resolve_range(
    time_filter: TimeFilter,
    now: datetime | None = None,
    min_date: datetime | None = None,
    max_date: datetime | None = None,
) -> DateRange:
    """
    Resolve a filter to an inclusive date range.

    Args:
        time_filter: Year, Month, Week, Lifetime or Custom filter
        now: Upper cap for the range. Uses the current time if None.
        min_date: Earliest event in the full collection; clamps from_ inward
        max_date: Latest event in the full collection; clamps to inward

    Returns:
        DateRange, possibly empty (to < from_) for windows entirely in the future
    """
    if now is None:
        now = datetime.now()

    from_, to = _unclamped_range(time_filter, now)

    if min_date is not None and from_ < min_date:
        from_ = min_date
    if max_date is not None and to > max_date:
        to = max_date
    # Always cap at now so future events are never selected
    if to > now:
        to = now

    return DateRange(from_=from_, to=to)


def filter_by_time_range(
    events: list[CalendarEvent],
    time_filter: TimeFilter,
    now: datetime | None = None,
    min_date: datetime | None = None,
    max_date: datetime | None = None,
) -> list[CalendarEvent]:
    """Keep events whose start falls inside the resolved range."""
    date_range = resolve_range(time_filter, now, min_date, max_date)
    if date_range.is_empty:
        return []
    return [event for event in events if date_range.contains(event.start)]


def filter_by_calendars(
    events: list[CalendarEvent], calendar_ids: list[str] | set[str]
) -> list[CalendarEvent]:
    """Keep events from the given calendars."""
    wanted = set(calendar_ids)
    return [event for event in events if event.calendar_id in wanted]


def get_first_event_date(events: list[CalendarEvent]) -> datetime | None:
    if not events:
        return None
    return min(event.start for event in events)


def get_last_event_date(events: list[CalendarEvent]) -> datetime | None:
    if not events:
        return None
    return max(event.start for event in events)
