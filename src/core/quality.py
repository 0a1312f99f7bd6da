"""
Data quality checks and hidden-event filtering.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, time

from core.config import (
    BIRTHDAY_KEYWORDS,
    HOLIDAY_KEYWORDS,
    LONG_DURATION_MINUTES,
    RECURRING_MAX_PER_YEAR,
    RECURRING_MIN_YEARS,
)
from core.suggestions import normalize_name
from models.events import CalendarEvent
from models.stats import DataQualityIssue, IssueType, Severity


def format_date_display(moment: datetime) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_datetime_display(moment: datetime) -> str:
    """Format as 'M/D/YYYY HH:MM'."""
    return f"{format_date_display(moment)} {moment:%H:%M}"


def matches_keywords(title: str, keywords: Iterable[str]) -> bool:
    lowered = title.lower()
    return any(keyword in lowered for keyword in keywords)


def is_birthday_event(title: str, keywords: Iterable[str] = BIRTHDAY_KEYWORDS) -> bool:
    return matches_keywords(title, keywords)


def is_holiday_event(title: str, keywords: Iterable[str] = HOLIDAY_KEYWORDS) -> bool:
    return matches_keywords(title, keywords)


def issue_key(issue: DataQualityIssue) -> str:
    """Stable key used by callers to hide an individual issue."""
    return f"{issue.event.id}-{issue.type}"


def detect_data_quality_issues(
    events: list[CalendarEvent],
    now: datetime | None = None,
    *,
    long_duration_minutes: int = LONG_DURATION_MINUTES,
    birthday_keywords: Iterable[str] = BIRTHDAY_KEYWORDS,
    holiday_keywords: Iterable[str] = HOLIDAY_KEYWORDS,
    recurring_min_years: int = RECURRING_MIN_YEARS,
    recurring_max_per_year: float = RECURRING_MAX_PER_YEAR,
) -> list[DataQualityIssue]:
    """
    Flag suspicious events.

    Checks:
    1. Future events (start after the end of today)
    2. Zero/negative or longer-than-a-day durations
    3. Duplicates (same title, start and duration; first occurrence is kept)
    4. Birthday-looking titles
    5. Holidays/birthdays recurring a few times a year across several years

    An event can appear in several issues.
    """
    if now is None:
        now = datetime.now()
    end_of_today = datetime.combine(now.date(), time.max)
    birthday_keywords = tuple(birthday_keywords)
    holiday_keywords = tuple(holiday_keywords)

    issues: list[DataQualityIssue] = []

    # Check 1: Future events
    for event in events:
        if event.start > end_of_today:
            issues.append(
                DataQualityIssue(
                    type=IssueType.FUTURE_EVENT,
                    event=event,
                    message=f"Event scheduled for {format_date_display(event.start)}",
                    severity=Severity.WARNING,
                )
            )

    # Check 2: Suspicious durations
    for event in events:
        if event.duration_minutes <= 0:
            issues.append(
                DataQualityIssue(
                    type=IssueType.ZERO_DURATION,
                    event=event,
                    message="Event has zero or negative duration",
                    severity=Severity.ERROR,
                )
            )
        elif event.duration_minutes > long_duration_minutes:
            hours = event.duration_minutes // 60
            issues.append(
                DataQualityIssue(
                    type=IssueType.LONG_DURATION,
                    event=event,
                    message=f"Event duration is {hours} hours ({event.duration_minutes} minutes)",
                    severity=Severity.WARNING,
                )
            )

    # Check 3: Duplicates
    seen: dict[tuple[str, datetime, int], list[CalendarEvent]] = defaultdict(list)
    for event in events:
        seen[(event.title, event.start, event.duration_minutes)].append(event)

    for duplicates in seen.values():
        for event in duplicates[1:]:
            issues.append(
                DataQualityIssue(
                    type=IssueType.DUPLICATE,
                    event=event,
                    message=f'Duplicate of "{event.title}" at {format_datetime_display(event.start)}',
                    severity=Severity.WARNING,
                )
            )

    # Check 4: Birthdays
    for event in events:
        if is_birthday_event(event.title, birthday_keywords):
            issues.append(
                DataQualityIssue(
                    type=IssueType.BIRTHDAY,
                    event=event,
                    message="This appears to be a birthday event. Consider excluding it from time tracking.",
                    severity=Severity.WARNING,
                )
            )

    # Check 5: Recurring holidays (normalized title -> year -> events)
    titles_by_year: dict[str, dict[int, list[CalendarEvent]]] = defaultdict(
        lambda: defaultdict(list)
    )
    for event in events:
        titles_by_year[normalize_name(event.title)][event.start.year].append(event)

    for year_map in titles_by_year.values():
        year_count = len(year_map)
        if year_count < recurring_min_years:
            continue

        avg_per_year = sum(len(year_events) for year_events in year_map.values()) / year_count
        first_title = next(iter(year_map.values()))[0].title
        is_special_day = is_holiday_event(first_title, holiday_keywords) or is_birthday_event(
            first_title, birthday_keywords
        )
        if avg_per_year > recurring_max_per_year or not is_special_day:
            continue

        for year_events in year_map.values():
            for event in year_events:
                issues.append(
                    DataQualityIssue(
                        type=IssueType.RECURRING_HOLIDAY,
                        event=event,
                        message=(
                            f"This event recurs yearly (appears in {year_count} years). "
                            "Likely a holiday or birthday."
                        ),
                        severity=Severity.WARNING,
                    )
                )

    return issues


def filter_hidden_events(
    events: list[CalendarEvent],
    hidden_titles: Iterable[str] = (),
    hidden_issue_keys: Iterable[str] = (),
    now: datetime | None = None,
) -> list[CalendarEvent]:
    """
    Drop events with a hidden title or carrying a hidden issue.

    Issues are detected over the whole supplied collection so duplicate and
    recurrence checks see every event.
    """
    hidden_titles = set(hidden_titles)
    hidden_issue_keys = set(hidden_issue_keys)
    if not hidden_titles and not hidden_issue_keys:
        return list(events)

    hidden_event_ids: set[str] = set()
    if hidden_issue_keys:
        for issue in detect_data_quality_issues(events, now):
            if issue_key(issue) in hidden_issue_keys:
                hidden_event_ids.add(issue.event.id)

    return [
        event
        for event in events
        if event.title not in hidden_titles and event.id not in hidden_event_ids
    ]
