# distribution_dashboard/utils/date_utils.py
from datetime import date, datetime
from typing import Optional, Union

WEEKDAY_LABELS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']


def parse_timestamp(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """Parse a provider timestamp.

    Args:
        value: ISO-8601 string (a trailing 'Z' is accepted), datetime, date or None

    Returns:
        datetime or None if value is empty

    Raises:
        ValueError if the string is not a valid ISO-8601 timestamp
    """
    if value is None or value == '':
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    return datetime.fromisoformat(text)


def parse_date(value: Union[str, datetime, date, None]) -> Optional[date]:
    """Parse a provider date (YYYY-MM-DD or a full timestamp).

    Args:
        value: Date string, datetime, date or None

    Returns:
        date or None if value is empty
    """
    if value is None or value == '':
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    return parse_timestamp(value).date()


def is_same_day(value: Optional[datetime], day: date) -> bool:
    """Check whether a timestamp falls on the given calendar day."""
    if value is None:
        return False
    return value.date() == day


def weekday_label(day: date) -> str:
    """Get the short weekday label (Mon..Sun) for a date."""
    return WEEKDAY_LABELS[day.weekday()]
