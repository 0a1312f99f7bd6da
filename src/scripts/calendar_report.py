#!/usr/bin/env python3
"""
Print calendar statistics for one or more .ics files.

Loads calendars, applies the selected time window, and prints global stats,
top activities, optional per-activity stats, data quality issues and merge
suggestions. Optionally writes an Excel workbook.

Usage:
    uv run python src/scripts/calendar_report.py fitness.ics career.ics
    uv run python src/scripts/calendar_report.py fitness.ics --year 2025 --activity run
    uv run python src/scripts/calendar_report.py fitness.ics --month 2025-07 --sort time
    uv run python src/scripts/calendar_report.py fitness.ics --week 2025-07-2 --xlsx report.xlsx
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_SIMILARITY_THRESHOLD, DEFAULT_TOP_LIMIT, OUTPUT_DIR
from core.distributions import busiest
from core.quality import detect_data_quality_issues, format_date_display
from core.stats import (
    format_as_compact_hours_minutes,
    format_as_days_hours_minutes,
    format_as_hours_minutes,
)
from core.suggestions import generate_merge_suggestions
from core.time_filter import (
    CustomFilter,
    LifetimeFilter,
    MonthFilter,
    TimeFilter,
    WeekFilter,
    YearFilter,
    end_of_day,
)
from services.calendar import load_calendar_files
from services.dashboard import DashboardOptions, build_activity_report, build_dashboard
from services.reports import format_range_bound, save_stats_workbook


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def parse_time_filter(args: argparse.Namespace) -> TimeFilter:
    """Build the time filter from --year/--month/--week/--from/--to."""
    if args.week:
        year, month, week = (int(part) for part in args.week.split("-"))
        return WeekFilter(year, month, week)
    if args.month:
        year, month = (int(part) for part in args.month.split("-"))
        return MonthFilter(year, month)
    if args.year:
        return YearFilter(args.year)
    if args.date_from or args.date_to:
        date_from = datetime.strptime(args.date_from, "%Y-%m-%d") if args.date_from else datetime.min
        date_to = (
            end_of_day(datetime.strptime(args.date_to, "%Y-%m-%d").date())
            if args.date_to
            else datetime.max
        )
        return CustomFilter(date_from, date_to)
    return LifetimeFilter()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calendar statistics report")
    parser.add_argument("files", nargs="+", help="iCalendar (.ics) files")

    window = parser.add_mutually_exclusive_group()
    window.add_argument("--year", type=int, help="Calendar year, e.g. 2025")
    window.add_argument("--month", help="Month as YYYY-MM")
    window.add_argument("--week", help="Week as YYYY-MM-N (N-th Monday-aligned week of the month)")
    parser.add_argument("--from", dest="date_from", help="Custom range start (YYYY-MM-DD)")
    parser.add_argument("--to", dest="date_to", help="Custom range end (YYYY-MM-DD)")

    parser.add_argument("--activity", help="Show stats for titles containing this text")
    parser.add_argument("--sort", choices=["count", "time"], default="count")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_LIMIT)
    parser.add_argument("--hide", action="append", default=[], help="Activity title to exclude")
    parser.add_argument("--quality", action="store_true", help="List data quality issues")
    parser.add_argument("--suggest", action="store_true", help="List merge suggestions")
    parser.add_argument("--threshold", type=float, default=DEFAULT_SIMILARITY_THRESHOLD)
    parser.add_argument(
        "--xlsx",
        nargs="?",
        const=str(OUTPUT_DIR / "calendar_stats.xlsx"),
        help="Write an Excel report (default path under output/)",
    )
    return parser


# =============================================================================
# PRINTING
# =============================================================================


def print_dashboard(snapshot):
    stats = snapshot.global_stats
    print(f"Range: {format_range_bound(snapshot.range.from_)} - {format_range_bound(snapshot.range.to)}")
    print(f"Sessions: {stats.total_count}")
    print(f"Activities: {stats.unique_activities}")
    print(f"Time: {format_as_days_hours_minutes(stats.total_minutes)}")
    print(f"      {format_as_hours_minutes(stats.total_minutes)}")

    peak_day = busiest(snapshot.distributions.day_of_week)
    peak_month = busiest(snapshot.distributions.month_of_year)
    if peak_day:
        print(f"Busiest day: {peak_day.day} ({format_as_compact_hours_minutes(peak_day.minutes)})")
    if peak_month:
        print(f"Busiest month: {peak_month.month} ({format_as_compact_hours_minutes(peak_month.minutes)})")

    print("\nTop activities:")
    if not snapshot.top_activities:
        print("  (none)")
    for rank, activity in enumerate(snapshot.top_activities, start=1):
        print(
            f"  {rank}. {activity.name}: {activity.count} sessions, "
            f"{format_as_compact_hours_minutes(activity.total_minutes)} total, "
            f"avg {activity.average_session_minutes}m, longest {activity.longest_session_minutes}m"
        )


def print_activity(report):
    stats = report.stats
    print(f"\nActivity '{stats.name}':")
    if stats.total_count == 0:
        print("  No matching events")
        return
    print(f"  Sessions: {stats.total_count}")
    print(f"  Time: {format_as_hours_minutes(stats.total_minutes)}")
    print(f"  First: {format_date_display(stats.first_session)}")
    print(f"  Last: {format_date_display(stats.last_session)}")
    print(f"  Average session: {stats.average_session_minutes}m")
    print(
        f"  Longest session: {stats.longest_session.minutes}m "
        f"on {format_date_display(stats.longest_session.date)}"
    )
    streak = stats.longest_streak
    print(
        f"  Longest streak: {streak.days} days "
        f"({format_date_display(streak.from_date)} - {format_date_display(streak.to_date)})"
    )
    if stats.biggest_break:
        gap = stats.biggest_break
        print(
            f"  Biggest break: {gap.days} days "
            f"({format_date_display(gap.from_date)} - {format_date_display(gap.to_date)})"
        )
    active_days = sum(1 for day in report.contributions if day.count)
    print(f"  Active days (last {len(report.contributions)}): {active_days}")


def print_issues(issues):
    print(f"\nData quality issues: {len(issues)}")
    for issue in issues:
        print(f"  [{issue.severity}] {issue.type}: {issue.event.title} - {issue.message}")


def print_suggestions(suggestions):
    print(f"\nMerge suggestions: {len(suggestions)}")
    for suggestion in suggestions:
        names = ", ".join(f'"{name}"' for name in suggestion.activities)
        print(
            f"  {names} -> \"{suggestion.suggested_name}\" "
            f"({suggestion.confidence:.0%}, {suggestion.event_count} events)"
        )


# =============================================================================
# MAIN
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        time_filter = parse_time_filter(args)
        events = load_calendar_files(args.files)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Loaded {len(events)} events from {len(args.files)} calendar(s)\n")

    now = datetime.now()
    options = DashboardOptions(hidden_titles=set(args.hide), sort_by=args.sort, top_limit=args.top)
    snapshot = build_dashboard(events, time_filter, options, now)
    print_dashboard(snapshot)

    if args.activity:
        report = build_activity_report(events, time_filter, args.activity, options, now)
        print_activity(report)

    issues = detect_data_quality_issues(events, now) if args.quality or args.xlsx else []
    suggestions = generate_merge_suggestions(events, args.threshold) if args.suggest or args.xlsx else []
    if args.quality:
        print_issues(issues)
    if args.suggest:
        print_suggestions(suggestions)

    if args.xlsx:
        save_stats_workbook(Path(args.xlsx), snapshot, issues, suggestions)

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
