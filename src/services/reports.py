"""
Excel export of dashboard statistics.
"""

from datetime import datetime
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import (
    DAY_OF_WEEK_HEADERS,
    ISSUE_HEADERS,
    SUGGESTION_HEADERS,
    SUMMARY_HEADERS,
    TOP_ACTIVITY_HEADERS,
)
from core.quality import format_date_display
from core.stats import format_as_hours_minutes
from models.stats import DataQualityIssue, MergeSuggestion
from services.dashboard import DashboardSnapshot


def format_range_bound(moment: datetime) -> str:
    if moment == datetime.min:
        return "Beginning"
    return format_date_display(moment)


def write_header_row(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_rows(ws, rows: list[list], start_row: int = 2):
    for row_idx, row_data in enumerate(rows, start=start_row):
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def autosize_columns(ws, min_width: int = 10, max_width: int = 60):
    """Set column widths from the longest value in each column."""
    for col_idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
        longest = max((len(str(value)) for value in column if value is not None), default=0)
        width = min(max(longest + 2, min_width), max_width)
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def write_summary_sheet(ws, snapshot: DashboardSnapshot):
    """Sheet 1 - Summary: range and global totals."""
    stats = snapshot.global_stats
    write_header_row(ws, SUMMARY_HEADERS)
    write_rows(
        ws,
        [
            ["From", format_range_bound(snapshot.range.from_)],
            ["To", format_range_bound(snapshot.range.to)],
            ["Sessions", stats.total_count],
            ["Activities", stats.unique_activities],
            ["Total Minutes", stats.total_minutes],
            ["Total Time", format_as_hours_minutes(stats.total_minutes)],
        ],
    )


def write_top_activities_sheet(ws, snapshot: DashboardSnapshot):
    """Sheet 2 - Top Activities."""
    write_header_row(ws, TOP_ACTIVITY_HEADERS)
    write_rows(
        ws,
        [
            [
                activity.name,
                activity.count,
                activity.total_minutes,
                activity.longest_session_minutes,
                activity.average_session_minutes,
            ]
            for activity in snapshot.top_activities
        ],
    )


def write_day_of_week_sheet(ws, snapshot: DashboardSnapshot):
    """Sheet 3 - Day of Week distribution."""
    write_header_row(ws, DAY_OF_WEEK_HEADERS)
    write_rows(
        ws,
        [[bucket.day, bucket.count, bucket.minutes] for bucket in snapshot.distributions.day_of_week],
    )


def write_issues_sheet(ws, issues: list[DataQualityIssue]):
    """Sheet 4 - Data Quality."""
    write_header_row(ws, ISSUE_HEADERS)
    write_rows(
        ws,
        [
            [
                str(issue.type),
                str(issue.severity),
                issue.event.title,
                format_date_display(issue.event.start),
                issue.message,
            ]
            for issue in issues
        ],
    )


def write_suggestions_sheet(ws, suggestions: list[MergeSuggestion]):
    """Sheet 5 - Merge Suggestions."""
    write_header_row(ws, SUGGESTION_HEADERS)
    write_rows(
        ws,
        [
            [
                suggestion.suggested_name,
                ", ".join(suggestion.activities),
                round(suggestion.confidence, 2),
                suggestion.event_count,
                suggestion.total_minutes,
            ]
            for suggestion in suggestions
        ],
    )


def create_stats_workbook(
    snapshot: DashboardSnapshot,
    issues: list[DataQualityIssue] = (),
    suggestions: list[MergeSuggestion] = (),
) -> Workbook:
    """
    Build the statistics workbook.

    Sheets: Summary, Top Activities, Day of Week, Data Quality, Merge Suggestions.
    """
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Summary"
    write_summary_sheet(ws_summary, snapshot)

    write_top_activities_sheet(wb.create_sheet(title="Top Activities"), snapshot)
    write_day_of_week_sheet(wb.create_sheet(title="Day of Week"), snapshot)
    write_issues_sheet(wb.create_sheet(title="Data Quality"), list(issues))
    write_suggestions_sheet(wb.create_sheet(title="Merge Suggestions"), list(suggestions))

    for ws in wb.worksheets:
        autosize_columns(ws)
    return wb


def stats_workbook_to_bytes(
    snapshot: DashboardSnapshot,
    issues: list[DataQualityIssue] = (),
    suggestions: list[MergeSuggestion] = (),
) -> bytes:
    """Build the workbook and return it as .xlsx bytes (for API usage)."""
    buffer = BytesIO()
    create_stats_workbook(snapshot, issues, suggestions).save(buffer)
    return buffer.getvalue()


def save_stats_workbook(
    output_path: Path,
    snapshot: DashboardSnapshot,
    issues: list[DataQualityIssue] = (),
    suggestions: list[MergeSuggestion] = (),
):
    output_path.parent.mkdir(parents=True, exist_ok=True)
    create_stats_workbook(snapshot, issues, suggestions).save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
