"""Week-based event filtering (weeks start on Sunday)."""

from datetime import datetime, time, timedelta, timezone, tzinfo

from tzlocal import get_localzone

from busical.models.event import CalendarEvent


def week_range(
    week_offset: int, now: datetime | None = None, tz: tzinfo | None = None
) -> tuple[datetime, datetime]:
    """Return [start, end) of the week ``week_offset`` weeks from now.

    0 is the current week, 1 next week, negative values past weeks.
    """
    tz = tz or get_localzone()
    now = (now or datetime.now(timezone.utc)).astimezone(tz)

    days_since_sunday = (now.weekday() + 1) % 7
    sunday = now.date() - timedelta(days=days_since_sunday) + timedelta(weeks=week_offset)

    start = datetime.combine(sunday, time.min, tzinfo=tz)
    end = datetime.combine(sunday + timedelta(days=7), time.min, tzinfo=tz)
    return start, end


def filter_events_by_week(
    events: list[CalendarEvent],
    week_offset: int,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[CalendarEvent]:
    """Keep events that start within the given week."""
    start, end = week_range(week_offset, now, tz)
    return [event for event in events if start <= event.start_date < end]
