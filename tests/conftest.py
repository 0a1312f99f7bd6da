"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
# Make tests/fixtures importable
sys.path.insert(0, str(Path(__file__).parent))

from models.events import create_calendar_event

FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def now():
    """Fixed 'current time' so range clamping is deterministic."""
    return FIXED_NOW


@pytest.fixture
def make_event():
    """Factory for events: make_event("Gym", datetime(...), minutes=60)."""
    counter = {"n": 0}

    def _make(
        title: str,
        start: datetime,
        minutes: int = 60,
        calendar_id: str = "personal",
        event_id: str | None = None,
    ):
        counter["n"] += 1
        return create_calendar_event(
            {
                "id": event_id or f"evt-{counter['n']}",
                "calendar_id": calendar_id,
                "title": title,
                "start": start,
                "end": start + timedelta(minutes=minutes),
            }
        )

    return _make


@pytest.fixture
def sample_events(make_event):
    """A small, mixed collection spanning two years."""
    return [
        make_event("Gym", datetime(2024, 12, 30, 7, 0), 60),
        make_event("Gym", datetime(2025, 1, 1, 7, 0), 45),
        make_event("Running", datetime(2025, 1, 2, 18, 0), 30),
        make_event("Gym", datetime(2025, 1, 3, 7, 0), 90),
        make_event("Reading", datetime(2025, 3, 10, 21, 0), 40),
        make_event("running", datetime(2025, 6, 1, 18, 0), 25),
        make_event("Gym", datetime(2025, 7, 1, 7, 0), 60),  # after FIXED_NOW
    ]


@pytest.fixture
def generated_events():
    from fixtures.generate_events import generate_events

    return generate_events(count=150, seed=7)
