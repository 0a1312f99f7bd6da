"""Pydantic response models for API endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from core.quality import issue_key
from models.stats import DataQualityIssue


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CALENDAR = "INVALID_CALENDAR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# RESULT MODELS (validated from the core dataclasses)
# =============================================================================


class ResultModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class EventOut(ResultModel):
    id: str
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    duration_minutes: int
    day_of_week: int
    day_string: str
    is_all_day: bool


class RangeOut(ResultModel):
    from_: datetime = Field(serialization_alias="from")
    to: datetime


class GlobalStatsOut(ResultModel):
    total_count: int
    unique_activities: int
    total_minutes: int


class TopActivityOut(ResultModel):
    name: str
    count: int
    total_minutes: int
    longest_session_minutes: int
    average_session_minutes: int


class SessionOut(ResultModel):
    minutes: int
    date: datetime


class SpanOut(ResultModel):
    days: int
    from_date: date | datetime
    to_date: date | datetime


class ActivityStatsOut(ResultModel):
    name: str
    total_count: int
    total_minutes: int
    first_session: datetime | None
    last_session: datetime | None
    average_session_minutes: int
    longest_session: SessionOut | None
    longest_streak: SpanOut | None
    biggest_break: SpanOut | None


class DayOfWeekOut(ResultModel):
    day: str
    day_index: int
    minutes: int
    count: int


class HourOut(ResultModel):
    hour: int
    minutes: int
    count: int


class MonthOut(ResultModel):
    month: str
    month_index: int
    minutes: int
    count: int


class WeekOut(ResultModel):
    week_start: date
    minutes: int
    count: int


class ContributionOut(ResultModel):
    date: date
    count: int
    level: int


class DistributionsOut(ResultModel):
    day_of_week: list[DayOfWeekOut]
    hour_of_day: list[HourOut]
    month_of_year: list[MonthOut]
    weekly: list[WeekOut]


class DashboardResponse(ResultModel):
    range: RangeOut
    event_count: int
    global_stats: GlobalStatsOut
    top_activities: list[TopActivityOut]
    distributions: DistributionsOut


class ActivityResponse(ResultModel):
    range: RangeOut
    stats: ActivityStatsOut
    distributions: DistributionsOut
    contributions: list[ContributionOut]


class IssueOut(BaseModel):
    key: str
    type: str
    severity: str
    message: str
    event: EventOut

    @classmethod
    def from_issue(cls, issue: DataQualityIssue) -> "IssueOut":
        return cls(
            key=issue_key(issue),
            type=str(issue.type),
            severity=str(issue.severity),
            message=issue.message,
            event=EventOut.model_validate(issue.event),
        )


class IssuesResponse(BaseModel):
    count: int
    issues: list[IssueOut]


class SuggestionOut(ResultModel):
    activities: list[str]
    suggested_name: str
    confidence: float
    event_count: int
    total_minutes: int


class SuggestionsResponse(BaseModel):
    count: int
    suggestions: list[SuggestionOut]


class CalendarSummary(BaseModel):
    calendar_id: str
    file_name: str
    event_count: int


class ImportResponse(BaseModel):
    calendars: list[CalendarSummary]
    events: list[EventOut]
