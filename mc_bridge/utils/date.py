"""
Date parsing and formatting utilities.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Handles the trailing ``Z`` PostgREST and JavaScript clients emit, and
    treats naive values as UTC.

    Args:
        value: Timestamp string to parse

    Returns:
        Aware datetime or None if invalid
    """
    if not value:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except (AttributeError, ValueError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_after(candidate: Optional[str], reference: Optional[str]) -> bool:
    """True if ``candidate`` is strictly later than ``reference``.

    Unparseable candidates are never later; an unparseable reference is
    always earlier.
    """
    candidate_dt = parse_timestamp(candidate)
    if candidate_dt is None:
        return False
    reference_dt = parse_timestamp(reference)
    if reference_dt is None:
        return True
    return candidate_dt > reference_dt


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a date string into a date object.

    Handles various formats:
    - ISO format (YYYY-MM-DD)
    - ISO datetime (YYYY-MM-DDTHH:MM:SS)

    Args:
        date_str: Date string to parse

    Returns:
        Parsed date object or None if invalid
    """
    if not date_str:
        return None

    # Take only date part if it's a datetime string
    if 'T' in date_str:
        date_str = date_str.split('T')[0]

    try:
        return datetime.strptime(date_str[:10], '%Y-%m-%d').date()
    except ValueError:
        return None


def format_date(d: Optional[date]) -> Optional[str]:
    """Format a date object as ISO string (YYYY-MM-DD)."""
    if not d:
        return None

    return d.strftime('%Y-%m-%d')
