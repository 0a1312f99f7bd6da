"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("CALSTATS_DB_PATH", PROJECT_ROOT / "data" / "db" / "calendar-stats.db")
)
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# DATA QUALITY HEURISTICS
# =============================================================================

LONG_DURATION_MINUTES = 24 * 60

# A title recurring in at least this many distinct years, averaging no more
# than RECURRING_MAX_PER_YEAR occurrences per year, is a holiday candidate.
RECURRING_MIN_YEARS = 2
RECURRING_MAX_PER_YEAR = 3

BIRTHDAY_KEYWORDS = (
    "birthday",
    "bday",
    "b-day",
    "born",
    "birth day",
    "'s birthday",
    "cumpleaños",
    "aniversário",
    "geburtstag",
)

HOLIDAY_KEYWORDS = (
    "holiday",
    "christmas",
    "thanksgiving",
    "easter",
    "new year",
    "independence day",
    "memorial day",
    "labor day",
    "halloween",
    "valentine",
    "mother's day",
    "father's day",
    "anniversary",
)

# =============================================================================
# STATISTICS DEFAULTS
# =============================================================================

DEFAULT_SIMILARITY_THRESHOLD = 0.7
DEFAULT_TOP_LIMIT = 5
ACTIVITY_SEARCH_LIMIT = 10
CONTRIBUTION_DAYS = 365
CONTRIBUTION_MAX_LEVEL = 4

# Google events without an end time are assumed to last this long
DEFAULT_EVENT_MINUTES = 60

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

SUMMARY_HEADERS = ["Metric", "Value"]
TOP_ACTIVITY_HEADERS = [
    "Activity", "Sessions", "Total Minutes",
    "Longest Session (min)", "Average Session (min)",
]
DAY_OF_WEEK_HEADERS = ["Day", "Sessions", "Minutes"]
ISSUE_HEADERS = ["Type", "Severity", "Activity", "Date", "Message"]
SUGGESTION_HEADERS = ["Suggested Name", "Activities", "Confidence", "Events", "Minutes"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

CALSTATS_API_KEY = os.environ.get("CALSTATS_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "20"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
API_VERSION = "1.0.0"
