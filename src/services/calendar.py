"""
Calendar ingestion: iCalendar files, Google Calendar payloads and MS Graph events.

Each source gets one parser; all of them build events through
create_calendar_event.
"""

import re
from datetime import date, datetime, timedelta
from pathlib import Path

from icalendar import Calendar

from core.config import DEFAULT_EVENT_MINUTES
from models.events import CalendarEvent, create_calendar_event

UNTITLED = "Untitled"

# Graph returns seven fractional digits ("2025-11-01T09:00:00.0000000")
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing 'Z' and long fractions."""
    value = _EXTRA_FRACTION.sub(r"\1", value.strip())
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# =============================================================================
# ICALENDAR
# =============================================================================


def parse_ics_events(ics_text: str, calendar_id: str) -> list[CalendarEvent]:
    """
    Parse iCalendar text into events.

    VEVENTs without DTSTART or marked CANCELLED are skipped. A missing DTEND
    falls back to DURATION, then to one day for date-only events.

    Raises:
        ValueError: if the text is not a valid calendar
    """
    try:
        calendar = Calendar.from_ical(ics_text)
    except ValueError as e:
        raise ValueError(f"Invalid calendar '{calendar_id}': {e}") from e

    events = []
    for index, component in enumerate(calendar.walk("VEVENT")):
        if "DTSTART" not in component:
            continue
        if str(component.get("STATUS", "")).upper() == "CANCELLED":
            continue

        start = component.decoded("DTSTART")
        is_all_day = not isinstance(start, datetime)

        if "DTEND" in component:
            end = component.decoded("DTEND")
        elif "DURATION" in component:
            end = start + component.decoded("DURATION")
        elif is_all_day:
            end = start + timedelta(days=1)
        else:
            end = start

        title = str(component.get("SUMMARY", "")).strip() or UNTITLED
        uid = str(component.get("UID", "")) or "event"

        events.append(
            create_calendar_event(
                {
                    "id": f"{calendar_id}-{uid}-{index}",
                    "calendar_id": calendar_id,
                    "title": title,
                    "start": start,
                    "end": end,
                    "is_all_day": is_all_day,
                }
            )
        )
    return events


def load_calendar_files(paths: list[str | Path]) -> list[CalendarEvent]:
    """Load .ics files; each file's stem becomes its calendar id."""
    events = []
    for path in paths:
        path = Path(path)
        events.extend(parse_ics_events(path.read_text(encoding="utf-8"), path.stem))
    return events


# =============================================================================
# GOOGLE CALENDAR
# =============================================================================


def _google_time(value: dict | None) -> tuple[datetime | date | None, bool]:
    """Return (moment, is_date_only) from a Google start/end object."""
    if not value:
        return None, False
    if value.get("dateTime"):
        return parse_iso_datetime(value["dateTime"]), False
    if value.get("date"):
        return date.fromisoformat(value["date"]), True
    return None, False


def parse_google_calendar_events(payload: dict, calendar_id: str) -> list[CalendarEvent]:
    """
    Convert a Google Calendar events.list response into events.

    Cancelled events and events without a start are skipped. Events without
    an end default to one hour.
    """
    events = []
    for item in payload.get("items") or []:
        if item.get("status") == "cancelled":
            continue

        start, start_is_date = _google_time(item.get("start"))
        if start is None:
            continue
        end, end_is_date = _google_time(item.get("end"))
        if end is None:
            end = start + timedelta(minutes=DEFAULT_EVENT_MINUTES)

        events.append(
            create_calendar_event(
                {
                    "id": f"google-{calendar_id}-{item.get('id', '')}",
                    "calendar_id": f"google-{calendar_id}",
                    "title": item.get("summary") or UNTITLED,
                    "start": start,
                    "end": end,
                    "is_all_day": start_is_date or end_is_date,
                }
            )
        )
    return events


# =============================================================================
# MS GRAPH
# =============================================================================


def parse_graph_event(event, calendar_id: str) -> CalendarEvent | None:
    """
    Convert an MS Graph event object into a CalendarEvent.

    Returns None when the event has no start time.
    """
    start_ts = event.start.date_time if event.start else None
    end_ts = event.end.date_time if event.end else None
    if not start_ts:
        return None

    start = parse_iso_datetime(start_ts)
    end = parse_iso_datetime(end_ts) if end_ts else start + timedelta(minutes=DEFAULT_EVENT_MINUTES)

    return create_calendar_event(
        {
            "id": f"graph-{calendar_id}-{event.id}",
            "calendar_id": f"graph-{calendar_id}",
            "title": event.subject or UNTITLED,
            "start": start,
            "end": end,
            "is_all_day": bool(getattr(event, "is_all_day", False)),
        }
    )


def parse_graph_events(raw_events: list, calendar_id: str) -> list[CalendarEvent]:
    events = []
    for raw in raw_events:
        parsed = parse_graph_event(raw, calendar_id)
        if parsed is not None:
            events.append(parsed)
    return events
