"""Datetime helpers for the API layer.

All datetime fields in responses are UTC (ISO 8601).
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get the current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Render a datetime as ISO 8601 UTC, treating naive values as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
