"""Manages all datetime-related operations."""

from datetime import datetime, timezone

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

def get_timestamp():
    """Returns the current UTC timestamp."""

    return datetime.now(timezone.utc)

def to_rfc3339(date=None):
    """Formats a datetime the way the external metrics API expects timestamps, now if none is given."""

    date = date or get_timestamp()
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc).strftime(RFC3339_FORMAT)
