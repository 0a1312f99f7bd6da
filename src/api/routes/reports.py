"""Excel export endpoint."""

from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from api.dependencies import verify_api_key
from api.logging import run_logged
from api.models.requests import ExportRequest
from core.quality import detect_data_quality_issues
from core.suggestions import generate_merge_suggestions
from services.dashboard import build_dashboard
from services.reports import stats_workbook_to_bytes

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/reports/export")
def export_endpoint(request: Request, body: ExportRequest):
    """
    Export dashboard statistics as an Excel workbook.

    Issues and suggestions are computed over all supplied events, before any
    time filtering.
    """

    def compute():
        events = body.to_events()
        now = body.current_time()
        snapshot = build_dashboard(events, body.filter.to_time_filter(), body.to_options(), now)
        issues = detect_data_quality_issues(events, now) if body.include_issues else []
        suggestions = (
            generate_merge_suggestions(events, body.threshold) if body.include_suggestions else []
        )
        return stats_workbook_to_bytes(snapshot, issues, suggestions)

    excel_bytes = run_logged(request, "/v1/reports/export", len(body.events), compute)
    filename = f"calendar_stats_{date.today():%Y_%m_%d}.xlsx"

    return Response(
        content=excel_bytes,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
