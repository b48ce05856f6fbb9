"""
Input validation helper functions.
Provides validation for reservation dates, times and statuses.

Validators return a (is_valid, value, error_message) triple so callers can
raise the error type that fits their operation.
"""

import re
from datetime import date, datetime

from utils.datetime_helpers import to_local_naive
from utils.messages import get_message

TIME_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):([0-5][0-9])$')
DATE_ONLY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def is_date_only(value) -> bool:
    """
    Check whether a value carries a calendar date without a time of day.

    Args:
        value: date, datetime or string

    Returns:
        True for date objects and YYYY-MM-DD strings
    """
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and bool(DATE_ONLY_PATTERN.match(value.strip()))


def validate_datetime_value(value, field: str) -> tuple:
    """
    Parse a date/datetime input into a naive hotel-local datetime.

    Accepts datetime, date (midnight), and ISO 8601 strings, with or without
    time and offset ('2025-01-10', '2025-01-10T14:00:00', '2025-01-10T19:00:00Z').
    Fractions of a second are dropped, as in storage.

    Args:
        value: Raw input
        field: Field name for the error message

    Returns:
        Tuple of (is_valid, datetime or None, error_message)
    """
    if value is None or value == '':
        return False, None, get_message('field_required', field=field)

    if isinstance(value, datetime):
        return True, to_local_naive(value).replace(microsecond=0), ''

    if isinstance(value, date):
        return True, datetime(value.year, value.month, value.day), ''

    if isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return False, None, get_message('invalid_date', field=field)
        return True, to_local_naive(parsed).replace(microsecond=0), ''

    return False, None, get_message('invalid_date', field=field)


def validate_date_range(check_in: datetime, check_out: datetime) -> bool:
    """
    Validate that check-in is strictly before check-out.

    Args:
        check_in: Check-in datetime
        check_out: Check-out datetime

    Returns:
        True if valid date range
    """
    return check_in < check_out


def validate_time_string(value: str) -> tuple:
    """
    Validate a HH:mm time string.

    Args:
        value: Time string (e.g. '14:30')

    Returns:
        Tuple of (is_valid, (hours, minutes) or None, error_message)
    """
    if not isinstance(value, str):
        return False, None, get_message('invalid_time_format')

    match = TIME_PATTERN.match(value.strip())
    if not match:
        return False, None, get_message('invalid_time_format')

    return True, (int(match.group(1)), int(match.group(2))), ''


def validate_id_list(ids) -> tuple:
    """
    Validate a list of reservation ids for batch operations.

    Duplicates are dropped keeping the first occurrence.

    Args:
        ids: List of ids

    Returns:
        Tuple of (is_valid, list of ids, error_message)
    """
    if not ids or not isinstance(ids, (list, tuple)):
        return False, [], get_message('empty_ids')

    seen = set()
    cleaned = []
    for item in ids:
        if item is None or item == '':
            continue
        item = str(item)
        if item not in seen:
            seen.add(item)
            cleaned.append(item)

    if not cleaned:
        return False, [], get_message('empty_ids')

    return True, cleaned, ''


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = text.strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
