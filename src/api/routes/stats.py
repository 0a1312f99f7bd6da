"""Statistics, data quality and merge suggestion endpoints."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import verify_api_key
from api.logging import run_logged
from api.models.requests import (
    ActivityRequest,
    DashboardRequest,
    EventsRequest,
    SuggestionsRequest,
)
from api.models.responses import (
    ActivityResponse,
    DashboardResponse,
    IssueOut,
    IssuesResponse,
    SuggestionOut,
    SuggestionsResponse,
)
from core.quality import detect_data_quality_issues
from core.suggestions import generate_merge_suggestions
from services.dashboard import build_activity_report, build_dashboard

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.post("/stats/dashboard", response_model=DashboardResponse)
def dashboard_endpoint(request: Request, body: DashboardRequest):
    """Global stats, top activities and distributions for the selected window."""

    def compute():
        snapshot = build_dashboard(
            body.to_events(),
            body.filter.to_time_filter(),
            body.to_options(),
            body.current_time(),
        )
        return DashboardResponse.model_validate(snapshot)

    return run_logged(request, "/v1/stats/dashboard", len(body.events), compute)


@router.post("/stats/activity", response_model=ActivityResponse)
def activity_endpoint(request: Request, body: ActivityRequest):
    """Stats for activities whose title contains the search string."""

    def compute():
        report = build_activity_report(
            body.to_events(),
            body.filter.to_time_filter(),
            body.activity,
            body.to_options(),
            body.current_time(),
        )
        return ActivityResponse.model_validate(report)

    return run_logged(request, "/v1/stats/activity", len(body.events), compute)


@router.post("/quality/issues", response_model=IssuesResponse)
def quality_endpoint(request: Request, body: EventsRequest):
    """Data quality issues over the full (unfiltered) collection."""

    def compute():
        issues = detect_data_quality_issues(body.to_events(), body.current_time())
        return IssuesResponse(
            count=len(issues), issues=[IssueOut.from_issue(issue) for issue in issues]
        )

    return run_logged(request, "/v1/quality/issues", len(body.events), compute)


@router.post("/suggestions/merge", response_model=SuggestionsResponse)
def suggestions_endpoint(request: Request, body: SuggestionsRequest):
    """Groups of similarly named activities that could be merged."""

    def compute():
        suggestions = generate_merge_suggestions(body.to_events(), body.threshold)
        return SuggestionsResponse(
            count=len(suggestions),
            suggestions=[SuggestionOut.model_validate(s) for s in suggestions],
        )

    return run_logged(request, "/v1/suggestions/merge", len(body.events), compute)
