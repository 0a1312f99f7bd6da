"""Calendar import endpoint."""

import asyncio
import time
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from api.dependencies import error_detail, verify_api_key
from api.logging import RequestLog, get_client_ip, save_request_log
from api.models.responses import CalendarSummary, ErrorCodes, EventOut, ImportResponse
from core.config import MAX_UPLOAD_SIZE_BYTES
from services.calendar import parse_ics_events

router = APIRouter(prefix="/v1")


def calendar_id_for(file_name: str) -> str:
    """Calendar id from an upload's file name ('fitness.ics' -> 'fitness')."""
    return file_name.rsplit("/", 1)[-1].removesuffix(".ics")


def _parse_uploads(uploads: list[tuple[str, bytes]]) -> ImportResponse:
    """Parse uploaded calendars (runs in a worker thread)."""
    calendars = []
    events = []
    for file_name, content in uploads:
        calendar_id = calendar_id_for(file_name)
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ValueError(f"{file_name}: not UTF-8 text ({e.reason})") from e
        parsed = parse_ics_events(text, calendar_id)
        calendars.append(
            CalendarSummary(calendar_id=calendar_id, file_name=file_name, event_count=len(parsed))
        )
        events.extend(EventOut.model_validate(event) for event in parsed)
    return ImportResponse(calendars=calendars, events=events)


@router.post("/events/import", response_model=ImportResponse)
async def import_calendars_endpoint(
    request: Request,
    files: Annotated[list[UploadFile], File(description="iCalendar (.ics) files")],
    _api_key: str = Depends(verify_api_key),
):
    """
    Parse one or more uploaded .ics files into normalized events.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/events/import",
        method="POST",
        client_ip=get_client_ip(request),
        file_name=", ".join(f.filename or "" for f in files),
    )

    try:
        uploads = []
        total_size = 0
        for upload in files:
            if not upload.filename or not upload.filename.lower().endswith(".ics"):
                raise HTTPException(
                    status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                    detail=error_detail(
                        "File is not an iCalendar document",
                        ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                        [f"Received: {upload.filename}"],
                    ),
                )

            content = await upload.read()
            total_size += len(content)
            if total_size > MAX_UPLOAD_SIZE_BYTES:
                max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail=error_detail(
                        f"Upload exceeds maximum size of {max_mb} MB",
                        ErrorCodes.FILE_TOO_LARGE,
                        [f"Upload size: {total_size / (1024 * 1024):.1f} MB"],
                    ),
                )
            uploads.append((upload.filename, content))

        request_log.file_size_bytes = total_size

        # Parsing is CPU-bound; keep it off the event loop
        result = await asyncio.to_thread(_parse_uploads, uploads)

        request_log.status_code = 200
        request_log.event_count = len(result.events)
        for calendar in result.calendars:
            request_log.details.append(
                ("calendar_processed", f"{calendar.file_name}: {calendar.event_count} events")
            )
        return result

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                request_log.details.append(("validation_error", detail))
        else:
            request_log.error_message = str(e.detail)
        raise

    except ValueError as e:
        # Unparseable calendars and events without start/end
        request_log.status_code = 422
        request_log.error_code = ErrorCodes.INVALID_CALENDAR
        request_log.error_message = str(e)
        request_log.details.append(("validation_error", str(e)))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=error_detail("Calendar file could not be parsed", ErrorCodes.INVALID_CALENDAR, [str(e)]),
        )

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Internal server error", ErrorCodes.INTERNAL_ERROR),
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        save_request_log(request_log)
