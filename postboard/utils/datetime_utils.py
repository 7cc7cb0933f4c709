"""
Datetime utilities for Postboard
Timezone-aware helpers used by the in-memory backend and the board renderer
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time (replacement for deprecated datetime.utcnow())

    Returns:
        datetime: Current UTC time with timezone awareness
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def humanize_since(dt: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago ``dt`` was, e.g. "5 minutes ago".

    Unknown timestamps, future timestamps and anything under a minute read "Just now".

    Example:
        >>> from datetime import timedelta
        >>> now = utc_now()
        >>> humanize_since(now - timedelta(hours=2), now)
        '2 hours ago'
    """
    dt = ensure_utc(dt)
    if dt is None:
        return "Just now"
    now = ensure_utc(now) or utc_now()

    seconds = int((now - dt).total_seconds())
    if seconds < 60:
        return "Just now"

    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"

    return "Just now"
