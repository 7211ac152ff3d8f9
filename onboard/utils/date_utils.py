"""
Date helpers for the onboarding service.
"""
from datetime import date, datetime
from typing import Optional, Union
import pytz
from onboard.config import settings

# Timezone
TZ = pytz.timezone(settings.TIMEZONE)

# Earliest joining date accepted by the wizard
MIN_JOINING_DATE = date(1900, 1, 1)


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a calendar date in YYYY-MM-DD format.
    A full ISO timestamp is accepted and truncated to its date part.
    Returns None when the value is empty or not a valid date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        if len(text) > 10:
            # Only a full timestamp may follow the date
            if text[10] not in "T ":
                return None
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except ValueError:
        return None


def to_iso(value: Union[str, date, None]) -> str:
    """Normalize a date-like value to its ISO string, or '' when invalid."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else ""


def get_now() -> datetime:
    """Get current datetime in configured timezone."""
    return datetime.now(TZ)


def get_today() -> date:
    """Get today's date in configured timezone."""
    return get_now().date()


def format_date(value: Union[str, date, None]) -> str:
    """Format a calendar date for display."""
    parsed = parse_date(value)
    if not parsed:
        return "-"
    return parsed.strftime("%d.%m.%Y")

