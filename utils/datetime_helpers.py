"""Timezone-aware date/time helpers for the hotel reservations core."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app

# Storage format for reservation timestamps (hotel local time, no offset)
DB_DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'America/Lima')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive hotel-local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(get_timezone()).replace(tzinfo=None)


def to_db_datetime(value: datetime) -> str:
    """Format a datetime for storage."""
    return to_local_naive(value).strftime(DB_DATETIME_FORMAT)


def from_db_datetime(value: str):
    """Parse a stored timestamp back into a naive datetime (None passes through)."""
    if value is None:
        return None
    return datetime.fromisoformat(value)


def format_date_es(value: datetime) -> str:
    """Format as dd/mm/YYYY, the way dates are shown to hotel staff."""
    return value.strftime('%d/%m/%Y')


def format_time_es(value: datetime) -> str:
    """Format as HH:MM."""
    return value.strftime('%H:%M')
