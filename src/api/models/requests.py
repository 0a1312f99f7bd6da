"""Pydantic request models for API endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from core.config import DEFAULT_SIMILARITY_THRESHOLD, DEFAULT_TOP_LIMIT
from core.time_filter import (
    CustomFilter,
    LifetimeFilter,
    MonthFilter,
    TimeFilter,
    WeekFilter,
    YearFilter,
)
from models.events import CalendarEvent, create_calendar_event
from services.dashboard import DashboardOptions


def naive(moment: datetime | None) -> datetime | None:
    """Drop timezone info, keeping wall-clock time (events are stored naive)."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.replace(tzinfo=None)


class EventIn(BaseModel):
    """Event as supplied by a client."""

    id: str
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    is_all_day: bool = False

    def to_event(self) -> CalendarEvent:
        return create_calendar_event(self.model_dump())


class FilterIn(BaseModel):
    """Time filter. Fields required depend on type."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["year", "month", "week", "lifetime", "custom"] = "lifetime"
    year: int | None = None
    month: int | None = Field(default=None, ge=1, le=12)
    week: int | None = Field(default=None, ge=1)
    from_: datetime | None = Field(default=None, alias="from")
    to: datetime | None = None

    def to_time_filter(self) -> TimeFilter:
        """
        Raises:
            ValueError: if a field required by the filter type is missing
        """
        required = {
            "year": ["year"],
            "month": ["year", "month"],
            "week": ["year", "month", "week"],
            "custom": ["from_", "to"],
        }.get(self.type, [])
        missing = [name.rstrip("_") for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(f"Filter '{self.type}' requires: {', '.join(missing)}")

        if self.type == "year":
            return YearFilter(self.year)
        if self.type == "month":
            return MonthFilter(self.year, self.month)
        if self.type == "week":
            return WeekFilter(self.year, self.month, self.week)
        if self.type == "custom":
            return CustomFilter(naive(self.from_), naive(self.to))
        return LifetimeFilter()


class ExclusionsIn(BaseModel):
    """User-maintained exclusion state, supplied on every call."""

    hidden_titles: list[str] = []
    hidden_issue_keys: list[str] = []
    removed_event_ids: list[str] = []
    title_mappings: dict[str, str] = {}
    calendar_ids: list[str] | None = None


class EventsRequest(BaseModel):
    events: list[EventIn]
    now: datetime | None = None  # defaults to server time

    def to_events(self) -> list[CalendarEvent]:
        return [event.to_event() for event in self.events]

    def current_time(self) -> datetime:
        return naive(self.now) or datetime.now()


class DashboardRequest(EventsRequest):
    filter: FilterIn = FilterIn()
    exclusions: ExclusionsIn = ExclusionsIn()
    sort_by: Literal["count", "time"] = "count"
    limit: int = Field(default=DEFAULT_TOP_LIMIT, ge=0)

    def to_options(self) -> DashboardOptions:
        return DashboardOptions(
            hidden_titles=set(self.exclusions.hidden_titles),
            hidden_issue_keys=set(self.exclusions.hidden_issue_keys),
            removed_event_ids=set(self.exclusions.removed_event_ids),
            title_mappings=dict(self.exclusions.title_mappings),
            calendar_ids=(
                set(self.exclusions.calendar_ids)
                if self.exclusions.calendar_ids is not None
                else None
            ),
            sort_by=self.sort_by,
            top_limit=self.limit,
        )


class ActivityRequest(DashboardRequest):
    activity: str = Field(min_length=1)


class SuggestionsRequest(EventsRequest):
    threshold: float = Field(default=DEFAULT_SIMILARITY_THRESHOLD, ge=0, le=1)


class ExportRequest(DashboardRequest):
    include_issues: bool = True
    include_suggestions: bool = True
    threshold: float = Field(default=DEFAULT_SIMILARITY_THRESHOLD, ge=0, le=1)
