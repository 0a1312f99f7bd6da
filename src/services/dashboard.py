"""
Dashboard computation.

Exclusion state (hidden titles, hidden issue keys, removed ids, title
mappings) is passed in explicitly; nothing here reads or writes storage.
"""

from dataclasses import dataclass, field
from datetime import datetime

from core.config import DEFAULT_TOP_LIMIT
from core.distributions import compute_distributions, daily_contributions
from core.quality import filter_hidden_events
from core.stats import compute_activity_stats, compute_global_stats, compute_top_activities
from core.suggestions import apply_title_mappings, remove_events
from core.time_filter import (
    DateRange,
    TimeFilter,
    filter_by_calendars,
    filter_by_time_range,
    get_first_event_date,
    get_last_event_date,
    resolve_range,
)
from models.events import CalendarEvent
from models.stats import (
    ActivityStats,
    ContributionDay,
    Distributions,
    GlobalStats,
    TopActivity,
)


@dataclass
class DashboardOptions:
    hidden_titles: set[str] = field(default_factory=set)
    hidden_issue_keys: set[str] = field(default_factory=set)
    removed_event_ids: set[str] = field(default_factory=set)
    title_mappings: dict[str, str] = field(default_factory=dict)
    calendar_ids: set[str] | None = None  # None keeps every calendar
    sort_by: str = "count"
    top_limit: int = DEFAULT_TOP_LIMIT


@dataclass
class DashboardSnapshot:
    range: DateRange
    event_count: int  # events before time filtering
    global_stats: GlobalStats
    top_activities: list[TopActivity]
    distributions: Distributions


@dataclass
class ActivityReport:
    range: DateRange
    stats: ActivityStats
    distributions: Distributions
    contributions: list[ContributionDay]  # daily activity for the year ending today


def prepare_events(
    events: list[CalendarEvent],
    options: DashboardOptions,
    now: datetime | None = None,
) -> list[CalendarEvent]:
    """Apply merges, removals, calendar selection and hidden filtering, in that order."""
    prepared = apply_title_mappings(events, options.title_mappings)
    prepared = remove_events(prepared, options.removed_event_ids)
    if options.calendar_ids is not None:
        prepared = filter_by_calendars(prepared, options.calendar_ids)
    return filter_hidden_events(
        prepared, options.hidden_titles, options.hidden_issue_keys, now
    )


def _select(
    events: list[CalendarEvent], time_filter: TimeFilter, now: datetime | None
) -> tuple[DateRange, list[CalendarEvent]]:
    min_date = get_first_event_date(events)
    max_date = get_last_event_date(events)
    date_range = resolve_range(time_filter, now, min_date, max_date)
    selected = filter_by_time_range(events, time_filter, now, min_date, max_date)
    return date_range, selected


def build_dashboard(
    events: list[CalendarEvent],
    time_filter: TimeFilter,
    options: DashboardOptions | None = None,
    now: datetime | None = None,
) -> DashboardSnapshot:
    """Global stats, top activities and distributions for one time window."""
    if options is None:
        options = DashboardOptions()
    if now is None:
        now = datetime.now()

    prepared = prepare_events(events, options, now)
    date_range, selected = _select(prepared, time_filter, now)

    return DashboardSnapshot(
        range=date_range,
        event_count=len(prepared),
        global_stats=compute_global_stats(selected),
        top_activities=compute_top_activities(selected, options.sort_by, options.top_limit),
        distributions=compute_distributions(selected),
    )


def build_activity_report(
    events: list[CalendarEvent],
    time_filter: TimeFilter,
    search: str,
    options: DashboardOptions | None = None,
    now: datetime | None = None,
) -> ActivityReport:
    """
    Stats, distributions and daily contributions for activities matching
    search within one time window.
    """
    if options is None:
        options = DashboardOptions()
    if now is None:
        now = datetime.now()

    prepared = prepare_events(events, options, now)
    date_range, selected = _select(prepared, time_filter, now)
    needle = search.lower()
    matched = [event for event in selected if needle in event.title.lower()]

    return ActivityReport(
        range=date_range,
        stats=compute_activity_stats(selected, search),
        distributions=compute_distributions(matched),
        contributions=daily_contributions(matched, today=now.date()),
    )
