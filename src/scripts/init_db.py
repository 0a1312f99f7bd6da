#!/usr/bin/env python3
"""Create the calendar-stats SQLite3 database with the API request log tables."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import create_database


if __name__ == "__main__":
    db_path = create_database()
    print(f"Database created successfully at: {db_path}")
