"""
Global, per-activity and top-activity statistics.

All functions take an already filtered event list and return fresh result
records; inputs are never modified.
"""

from datetime import date

from core.config import ACTIVITY_SEARCH_LIMIT, DEFAULT_TOP_LIMIT
from models.events import CalendarEvent, round_half_up
from models.stats import (
    ActivityOption,
    ActivityStats,
    DateSpan,
    GlobalStats,
    SessionRecord,
    TimeBreakdown,
    TopActivity,
)

SECONDS_PER_DAY = 24 * 60 * 60
SORT_KEYS = {"count", "time"}


def sort_events_by_date(
    events: list[CalendarEvent], descending: bool = False
) -> list[CalendarEvent]:
    """Sort events by start (stable)."""
    return sorted(events, key=lambda e: e.start, reverse=descending)


def compute_global_stats(events: list[CalendarEvent]) -> GlobalStats:
    """Totals over the given events. No filtering is done here."""
    return GlobalStats(
        total_count=len(events),
        unique_activities=len({event.title for event in events}),
        total_minutes=sum(event.duration_minutes for event in events),
    )


# =============================================================================
# ACTIVITY STATS
# =============================================================================


def _longest_streak(day_strings: list[str]) -> DateSpan | None:
    """
    Longest run of consecutive calendar days.

    The earliest run wins when two runs have the same length.
    """
    days = sorted({date.fromisoformat(d) for d in day_strings})
    if not days:
        return None

    best: DateSpan | None = None
    run_start = 0
    for i in range(1, len(days)):
        if (days[i] - days[i - 1]).days == 1:
            continue
        run_length = i - run_start
        if best is None or run_length > best.days:
            best = DateSpan(days=run_length, from_date=days[run_start], to_date=days[i - 1])
        run_start = i

    # Trailing run up to the last day
    run_length = len(days) - run_start
    if best is None or run_length > best.days:
        best = DateSpan(days=run_length, from_date=days[run_start], to_date=days[-1])
    return best


def _biggest_break(sorted_events: list[CalendarEvent]) -> DateSpan | None:
    """Largest gap in whole days between consecutive event starts."""
    best: DateSpan | None = None
    for previous, current in zip(sorted_events, sorted_events[1:]):
        gap_seconds = (current.start - previous.start).total_seconds()
        gap_days = round_half_up(gap_seconds / SECONDS_PER_DAY)
        if best is None or gap_days > best.days:
            best = DateSpan(days=gap_days, from_date=previous.start, to_date=current.start)
    return best


def compute_activity_stats(events: list[CalendarEvent], search: str) -> ActivityStats:
    """
    Statistics for events whose title contains search (case-insensitive).

    Returns zeroed stats with None dates when nothing matches.
    """
    needle = search.lower()
    matched = [event for event in events if needle in event.title.lower()]
    if not matched:
        return ActivityStats(name=search)

    total_count = len(matched)
    total_minutes = sum(event.duration_minutes for event in matched)
    by_date = sort_events_by_date(matched)

    # max() keeps the first event among equal durations
    longest = max(matched, key=lambda e: e.duration_minutes)

    return ActivityStats(
        name=search,
        total_count=total_count,
        total_minutes=total_minutes,
        first_session=by_date[0].start,
        last_session=by_date[-1].start,
        average_session_minutes=round_half_up(total_minutes / total_count),
        longest_session=SessionRecord(minutes=longest.duration_minutes, date=longest.start),
        longest_streak=_longest_streak([event.day_string for event in by_date]),
        biggest_break=_biggest_break(by_date),
    )


# =============================================================================
# TOP ACTIVITIES
# =============================================================================


def compute_top_activities(
    events: list[CalendarEvent], sort_by: str = "count", limit: int = DEFAULT_TOP_LIMIT
) -> list[TopActivity]:
    """
    Rank activities (exact titles) by session count or total minutes.

    Ties keep the order in which activities first appear.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {sorted(SORT_KEYS)}, got '{sort_by}'")

    groups: dict[str, list[int]] = {}
    for event in events:
        groups.setdefault(event.title, []).append(event.duration_minutes)

    activities = []
    for name, durations in groups.items():
        total_minutes = sum(durations)
        activities.append(
            TopActivity(
                name=name,
                count=len(durations),
                total_minutes=total_minutes,
                longest_session_minutes=max(durations),
                average_session_minutes=round_half_up(total_minutes / len(durations)),
            )
        )

    if sort_by == "count":
        activities.sort(key=lambda a: a.count, reverse=True)
    else:
        activities.sort(key=lambda a: a.total_minutes, reverse=True)

    return activities[: max(limit, 0)]


def get_unique_activities(events: list[CalendarEvent]) -> list[ActivityOption]:
    """Distinct titles with their event counts, most frequent first."""
    counts: dict[str, int] = {}
    for event in events:
        counts[event.title] = counts.get(event.title, 0) + 1
    options = [ActivityOption(name=name, count=count) for name, count in counts.items()]
    options.sort(key=lambda o: o.count, reverse=True)
    return options


def filter_activities_by_search(
    activities: list[ActivityOption], term: str, limit: int = ACTIVITY_SEARCH_LIMIT
) -> list[ActivityOption]:
    """Substring search over activity names; a blank term returns the top entries."""
    needle = (term or "").strip().lower()
    if not needle:
        return activities[:limit]
    return [a for a in activities if needle in a.name.lower()][:limit]


# =============================================================================
# TIME FORMATTING
# =============================================================================


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}{'' if value == 1 else 's'}"


def breakdown_minutes(total_minutes: int) -> TimeBreakdown:
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    return TimeBreakdown(days=days, hours=hours, minutes=minutes)


def format_as_days_hours_minutes(total_minutes: int) -> str:
    """e.g. '1 Day, 2 Hours, 5 Minutes'"""
    parts = breakdown_minutes(total_minutes)
    return ", ".join(
        [_plural(parts.days, "Day"), _plural(parts.hours, "Hour"), _plural(parts.minutes, "Minute")]
    )


def format_as_hours_minutes(total_minutes: int) -> str:
    """e.g. '26 Hours, 5 Minutes'"""
    parts = breakdown_minutes(total_minutes)
    total_hours = parts.days * 24 + parts.hours
    return f"{_plural(total_hours, 'Hour')}, {_plural(parts.minutes, 'Minute')}"


def format_as_minutes(total_minutes: int) -> str:
    return _plural(total_minutes, "Minute")


def format_as_compact_hours_minutes(total_minutes: int) -> str:
    """e.g. '2h 5m', '45m', '3h'"""
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"
