"""API Pydantic models."""

from .requests import (
    ActivityRequest,
    DashboardRequest,
    EventsRequest,
    ExportRequest,
    SuggestionsRequest,
)
from .responses import (
    ActivityResponse,
    DashboardResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    ImportResponse,
    IssueOut,
    IssuesResponse,
    SuggestionsResponse,
)

__all__ = [
    "ActivityRequest",
    "ActivityResponse",
    "DashboardRequest",
    "DashboardResponse",
    "ErrorCodes",
    "ErrorResponse",
    "EventsRequest",
    "ExportRequest",
    "HealthResponse",
    "ImportResponse",
    "IssueOut",
    "IssuesResponse",
    "SuggestionsRequest",
    "SuggestionsResponse",
]
