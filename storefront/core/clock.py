"""Time helpers. Timestamps are stored in UTC; naive client input is store-local time."""

from datetime import datetime, timezone
from typing import Optional

import pytz

from storefront.config import get_settings


def store_timezone():
    return pytz.timezone(get_settings().TIMEZONE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a stored timestamp. Some backends (SQLite) hand back naive UTC values."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def localize_input(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret a client-supplied timestamp and convert it to UTC.

    Naive values come from the admin UI's date pickers and are in the
    store's local time.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = store_timezone().localize(value)
    return value.astimezone(timezone.utc)
