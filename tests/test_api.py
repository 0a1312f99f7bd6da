"""Tests for the HTTP API."""

import sqlite3
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from api import dependencies
from api import logging as request_logging
from api.main import app
from api.routes.events import calendar_id_for
from core.database import create_database, fetch_recent_requests
from fixtures.generate_events import events_to_ics, generate_events

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}
NOW = "2025-06-15T12:00:00"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = create_database(tmp_path / "requests.db")
    monkeypatch.setattr(request_logging, "DB_PATH", path)
    return path


@pytest.fixture
def client(db_path, monkeypatch):
    monkeypatch.setattr(dependencies, "CALSTATS_API_KEY", API_KEY)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def events_payload(sample_events):
    return [
        {
            "id": event.id,
            "calendar_id": event.calendar_id,
            "title": event.title,
            "start": event.start.isoformat(),
            "end": event.end.isoformat(),
        }
        for event in sample_events
    ]


def _recent(db_path):
    conn = sqlite3.connect(db_path)
    try:
        return fetch_recent_requests(conn)
    finally:
        conn.close()


def test_calendar_id_for():
    assert calendar_id_for("fitness.ics") == "fitness"
    assert calendar_id_for("exports/work.ics") == "work"


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_database(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr(request_logging, "DB_PATH", tmp_path / "missing.db")
        response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["database_available"] is False


class TestAuth:
    def test_missing_key(self, client, events_payload):
        response = client.post("/v1/stats/dashboard", json={"events": events_payload})
        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"

    def test_wrong_key(self, client, events_payload):
        response = client.post(
            "/v1/stats/dashboard",
            json={"events": events_payload},
            headers={"X-API-Key": "nope"},
        )
        assert response.status_code == 401

    def test_unconfigured_key(self, client, monkeypatch, events_payload):
        monkeypatch.setattr(dependencies, "CALSTATS_API_KEY", None)
        response = client.post(
            "/v1/stats/dashboard", json={"events": events_payload}, headers=HEADERS
        )
        assert response.status_code == 500


class TestDashboard:
    def test_lifetime(self, client, events_payload):
        response = client.post(
            "/v1/stats/dashboard",
            json={"events": events_payload, "now": NOW},
            headers=HEADERS,
        )
        assert response.status_code == 200
        body = response.json()

        assert body["range"]["from"] == "2024-12-30T07:00:00"
        assert body["range"]["to"] == NOW
        assert body["event_count"] == 7
        assert body["global_stats"]["total_count"] == 6
        assert body["top_activities"][0]["name"] == "Gym"
        assert len(body["distributions"]["day_of_week"]) == 7

    def test_month_filter_with_exclusions(self, client, events_payload):
        response = client.post(
            "/v1/stats/dashboard",
            json={
                "events": events_payload,
                "now": NOW,
                "filter": {"type": "month", "year": 2025, "month": 1},
                "exclusions": {"hidden_titles": ["Running"]},
                "sort_by": "time",
            },
            headers=HEADERS,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["global_stats"]["total_count"] == 2
        assert [a["name"] for a in body["top_activities"]] == ["Gym"]

    def test_incomplete_filter_is_logged_as_validation_error(self, client, db_path, events_payload):
        response = client.post(
            "/v1/stats/dashboard",
            json={"events": events_payload, "filter": {"type": "week", "year": 2025}},
            headers=HEADERS,
        )
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == "VALIDATION_ERROR"
        assert "month, week" in detail["details"][0]

        (row,) = _recent(db_path)
        assert row["status_code"] == 422
        assert row["error_code"] == "VALIDATION_ERROR"

    def test_malformed_body(self, client):
        response = client.post(
            "/v1/stats/dashboard", json={"events": [{"id": "x"}]}, headers=HEADERS
        )
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_REQUEST"

    def test_successful_request_is_logged(self, client, db_path, events_payload):
        client.post("/v1/stats/dashboard", json={"events": events_payload}, headers=HEADERS)
        (row,) = _recent(db_path)
        assert row["endpoint"] == "/v1/stats/dashboard"
        assert row["status_code"] == 200
        assert row["event_count"] == 7


def test_activity(client, events_payload):
    response = client.post(
        "/v1/stats/activity",
        json={"events": events_payload, "now": NOW, "activity": "run"},
        headers=HEADERS,
    )
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["total_count"] == 2
    assert stats["total_minutes"] == 55
    assert stats["longest_streak"]["days"] == 1

    contributions = response.json()["contributions"]
    assert len(contributions) == 365
    assert contributions[-1] == {"date": "2025-06-15", "count": 0, "level": 0}
    assert sum(day["count"] for day in contributions) == 2


def test_activity_no_match(client, events_payload):
    response = client.post(
        "/v1/stats/activity",
        json={"events": events_payload, "now": NOW, "activity": "Swimming"},
        headers=HEADERS,
    )
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["total_count"] == 0
    assert stats["longest_streak"] is None


def test_quality_issues(client, events_payload):
    response = client.post(
        "/v1/quality/issues", json={"events": events_payload, "now": NOW}, headers=HEADERS
    )
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    issue = body["issues"][0]
    assert issue["type"] == "future_event"
    assert issue["severity"] == "warning"
    assert issue["key"] == f"{issue['event']['id']}-future_event"


def test_merge_suggestions(client, events_payload):
    response = client.post(
        "/v1/suggestions/merge", json={"events": events_payload}, headers=HEADERS
    )
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["suggestions"][0]["suggested_name"] == "Running"
    assert body["suggestions"][0]["activities"] == ["Running", "running"]


def test_suggestion_threshold_out_of_range(client, events_payload):
    response = client.post(
        "/v1/suggestions/merge",
        json={"events": events_payload, "threshold": 1.5},
        headers=HEADERS,
    )
    assert response.status_code == 422


class TestImport:
    def test_import_ics(self, client, db_path):
        ics = events_to_ics(generate_events(count=12, seed=5))
        response = client.post(
            "/v1/events/import",
            files=[("files", ("fitness.ics", ics.encode("utf-8"), "text/calendar"))],
            headers=HEADERS,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["calendars"] == [
            {"calendar_id": "fitness", "file_name": "fitness.ics", "event_count": 12}
        ]
        assert len(body["events"]) == 12
        assert all(e["calendar_id"] == "fitness" for e in body["events"])

        (row,) = _recent(db_path)
        assert row["status_code"] == 200
        assert row["event_count"] == 12

    def test_rejects_non_ics(self, client):
        response = client.post(
            "/v1/events/import",
            files=[("files", ("notes.txt", b"hello", "text/plain"))],
            headers=HEADERS,
        )
        assert response.status_code == 415
        assert response.json()["detail"]["code"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_invalid_calendar(self, client, db_path):
        response = client.post(
            "/v1/events/import",
            files=[("files", ("broken.ics", b"this is not a calendar", "text/calendar"))],
            headers=HEADERS,
        )
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_CALENDAR"

        (row,) = _recent(db_path)
        assert row["error_code"] == "INVALID_CALENDAR"

    def test_too_large(self, client, monkeypatch):
        monkeypatch.setattr("api.routes.events.MAX_UPLOAD_SIZE_BYTES", 10)
        response = client.post(
            "/v1/events/import",
            files=[("files", ("big.ics", b"x" * 100, "text/calendar"))],
            headers=HEADERS,
        )
        assert response.status_code == 413
        assert response.json()["detail"]["code"] == "FILE_TOO_LARGE"


def test_export(client, events_payload):
    response = client.post(
        "/v1/reports/export",
        json={"events": events_payload, "now": NOW, "filter": {"type": "year", "year": 2025}},
        headers=HEADERS,
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "calendar_stats_" in response.headers["content-disposition"]

    wb = load_workbook(BytesIO(response.content))
    assert wb.sheetnames == [
        "Summary",
        "Top Activities",
        "Day of Week",
        "Data Quality",
        "Merge Suggestions",
    ]
