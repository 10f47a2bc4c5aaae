"""Pure formatting functions for display output."""

from datetime import datetime, timezone, tzinfo
from urllib.parse import urlsplit

from tzlocal import get_localzone


def format_relative_time(dt: datetime, now: datetime | None = None) -> str:
    """Format datetime as relative time.

    Args:
        dt: Datetime to format.
        now: Reference time (defaults to current UTC time).

    Returns:
        Formatted time string (e.g., "just now", "2h ago", "3d ago").
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    now = now or datetime.now(timezone.utc)
    time_diff = now - dt

    if time_diff.days < 0:
        return "in the future"
    if time_diff.days == 0:
        if time_diff.seconds < 60:
            return "just now"
        if time_diff.seconds < 3600:
            return f"{time_diff.seconds // 60}m ago"
        return f"{time_diff.seconds // 3600}h ago"
    if time_diff.days < 7:
        return f"{time_diff.days}d ago"
    return f"{time_diff.days // 7}w ago"


def format_datetime(
    dt: datetime | None,
    include_relative: bool = True,
    tz: tzinfo | None = None,
) -> str:
    """Format an instant in local time with optional relative suffix.

    Returns:
        Formatted string, or "N/A" if dt is None.
    """
    if dt is None:
        return "N/A"

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    date_str = dt.astimezone(tz or get_localzone()).strftime("%Y-%m-%d %H:%M")
    if include_relative:
        return f"{date_str} ({format_relative_time(dt)})"
    return date_str


def mask_url(url: str) -> str:
    """Hide the path and query of a feed URL, which usually carry a secret token.

    Example: https://calendar.example.com/••••.ics
    """
    parts = urlsplit(url)
    suffix = ".ics" if parts.path.endswith(".ics") else ""
    return f"{parts.scheme}://{parts.netloc}/••••{suffix}"
