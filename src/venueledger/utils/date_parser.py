"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2025-01-10", "January 10, 2025", etc.
    - Relative dates: "today", "yesterday", "3 days ago"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "N days ago"
    parts = date_str.split()
    if len(parts) == 3 and parts[1] in ("day", "days") and parts[2] == "ago":
        try:
            return today - timedelta(days=int(parts[0]))
        except ValueError:
            raise ValueError(f"Could not parse date '{date_str}'")

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
