"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "01/15/2024", "January 15, 2024",
    ISO timestamps as written by spreadsheets) and the relative words
    "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    normalized = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if normalized in relative_dates:
        return relative_dates[normalized]

    try:
        return date_parser.parse(date_str.strip()).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_optional_date(value: str | date | datetime | None) -> Optional[date]:
    """Parse a possibly blank date value; blank means no date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not str(value).strip():
        return None
    return parse_date(str(value))


def format_date(value: Optional[date]) -> str:
    """Format a date as YYYY-MM-DD, or an empty string when unset."""
    return value.isoformat() if value is not None else ""
