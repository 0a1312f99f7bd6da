"""
Result records returned by the statistics, quality and suggestion modules.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from models.events import CalendarEvent


class IssueType(StrEnum):
    LONG_DURATION = "long_duration"
    ZERO_DURATION = "zero_duration"
    DUPLICATE = "duplicate"
    FUTURE_EVENT = "future_event"
    BIRTHDAY = "birthday"
    RECURRING_HOLIDAY = "recurring_holiday"


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


@dataclass
class GlobalStats:
    total_count: int
    unique_activities: int
    total_minutes: int


@dataclass
class SessionRecord:
    """A single session: its length and when it started."""
    minutes: int
    date: datetime


@dataclass
class DateSpan:
    """A run of days (streak) or the gap between two sessions (break)."""
    days: int
    from_date: date | datetime
    to_date: date | datetime


@dataclass
class ActivityStats:
    name: str  # search string used
    total_count: int = 0
    total_minutes: int = 0
    first_session: datetime | None = None
    last_session: datetime | None = None
    average_session_minutes: int = 0
    longest_session: SessionRecord | None = None
    longest_streak: DateSpan | None = None
    biggest_break: DateSpan | None = None


@dataclass
class TopActivity:
    name: str
    count: int
    total_minutes: int
    longest_session_minutes: int
    average_session_minutes: int


@dataclass
class ActivityOption:
    name: str
    count: int


@dataclass
class TimeBreakdown:
    days: int
    hours: int
    minutes: int


@dataclass
class MergeSuggestion:
    activities: list[str]
    suggested_name: str
    confidence: float  # 0-1
    event_count: int
    total_minutes: int


@dataclass
class DataQualityIssue:
    type: IssueType
    event: CalendarEvent
    message: str
    severity: Severity


# =============================================================================
# DISTRIBUTIONS
# =============================================================================


@dataclass
class DayOfWeekBucket:
    day: str
    day_index: int  # 0 = Sunday
    minutes: int = 0
    count: int = 0


@dataclass
class HourBucket:
    hour: int
    minutes: int = 0
    count: int = 0


@dataclass
class MonthBucket:
    month: str
    month_index: int  # 0 = January
    minutes: int = 0
    count: int = 0


@dataclass
class WeekBucket:
    week_start: date  # Monday
    minutes: int = 0
    count: int = 0


@dataclass
class ContributionDay:
    date: date
    count: int
    level: int  # 0..CONTRIBUTION_MAX_LEVEL


@dataclass
class Distributions:
    day_of_week: list[DayOfWeekBucket] = field(default_factory=list)
    hour_of_day: list[HourBucket] = field(default_factory=list)
    month_of_year: list[MonthBucket] = field(default_factory=list)
    weekly: list[WeekBucket] = field(default_factory=list)
