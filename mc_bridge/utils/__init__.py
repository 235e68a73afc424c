"""
Utility functions for mc-bridge.
"""

from .date import utc_now_iso, parse_timestamp, is_after, parse_date, format_date

__all__ = [
    'utc_now_iso',
    'parse_timestamp',
    'is_after',
    'parse_date',
    'format_date',
]
