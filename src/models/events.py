"""
Calendar event model.

Every source (iCalendar files, Google Calendar payloads, MS Graph events)
converges on create_calendar_event, the one place where derived fields are
computed. Events are frozen; renaming builds a new event.
"""

import math
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import NotRequired, TypedDict


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


class MissingTemporalBoundsError(ValueError):
    """Raised when an event is created without a usable start or end."""


class CreateCalendarEventInput(TypedDict):
    """Raw event fields as produced by a source parser."""
    id: str
    calendar_id: str
    title: str
    start: datetime | date
    end: datetime | date
    is_all_day: NotRequired[bool]


@dataclass(frozen=True)
class CalendarEvent:
    """Normalized calendar event."""
    id: str
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    duration_minutes: int
    day_of_week: int  # 0 = Sunday .. 6 = Saturday
    day_string: str  # YYYY-MM-DD of start
    is_all_day: bool = False


def _as_datetime(value, field_name: str, event_id: str) -> tuple[datetime, bool]:
    """Coerce a start/end value to datetime; the flag is True for date-only values."""
    if isinstance(value, datetime):
        return value, False
    if isinstance(value, date):
        return datetime.combine(value, time.min), True
    raise MissingTemporalBoundsError(
        f"Event '{event_id}' is missing temporal bounds: {field_name}={value!r}"
    )


def _wall_time(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """
    Drop timezone info, keeping the wall-clock time the source encoded.

    The end is expressed in the start's zone first so the duration stays
    correct across offset changes.
    """
    if start.tzinfo is not None:
        if end.tzinfo is not None:
            end = end.astimezone(start.tzinfo)
        start = start.replace(tzinfo=None)
    return start, end.replace(tzinfo=None)


def create_calendar_event(data: CreateCalendarEventInput) -> CalendarEvent:
    """
    Build a CalendarEvent and its derived fields.

    Raises:
        MissingTemporalBoundsError: if start or end is missing or not a date/datetime
    """
    event_id = data.get("id", "")
    start, start_is_date = _as_datetime(data.get("start"), "start", event_id)
    end, end_is_date = _as_datetime(data.get("end"), "end", event_id)
    start, end = _wall_time(start, end)

    duration_minutes = round_half_up((end - start).total_seconds() / 60)

    # datetime.weekday() is Monday=0; events use Sunday=0
    day_of_week = (start.weekday() + 1) % 7

    return CalendarEvent(
        id=event_id,
        calendar_id=data.get("calendar_id", ""),
        title=data.get("title", ""),
        start=start,
        end=end,
        duration_minutes=duration_minutes,
        day_of_week=day_of_week,
        day_string=start.date().isoformat(),
        is_all_day=data.get("is_all_day", start_is_date and end_is_date),
    )


def rename_event(event: CalendarEvent, title: str) -> CalendarEvent:
    """Return a copy of event with a new title."""
    return replace(event, title=title)
