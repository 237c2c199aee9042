"""
Date parser for movement and checkpoint dates.

Only calendar dates matter for reconciliation: any time-of-day component in
an ISO-8601 date-time string is dropped so that timezones never move a
movement across a period boundary.
"""
from datetime import date, datetime
from typing import Optional, Union

from dateutil.parser import isoparse

from config import DATE_FORMATS, get_config


def parse_date(value: Union[str, datetime, date, None]) -> Optional[date]:
    """
    Parse a date value into a Python date object.

    Args:
        value: An ISO-8601 date or date-time string, or a datetime/date object

    Returns:
        A date object if parsing succeeds, None otherwise
    """
    if value is None:
        return None

    # If already a date or datetime object
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    value_str = value.strip()

    if not value_str:
        return None

    try:
        return isoparse(value_str).date()
    except (ValueError, OverflowError):
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value_str, fmt).date()
        except ValueError:
            continue

    return None


def is_valid_date(value: Union[str, datetime, date, None]) -> bool:
    """
    Check if a value can be parsed as a valid date.

    Args:
        value: A value to check

    Returns:
        True if the value is a valid date, False otherwise
    """
    return parse_date(value) is not None


def format_date(dt: Optional[date], fmt: Optional[str] = None) -> str:
    """
    Format a date for human-readable messages.

    Args:
        dt: Date object to format
        fmt: Output format string (default: configured display format)

    Returns:
        Formatted date string, or empty string if date is None
    """
    if dt is None:
        return ""
    return dt.strftime(fmt or get_config().display_date_format)
