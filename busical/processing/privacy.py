"""Privacy transform: strip everything but the time slot from an event."""

from busical.constants import BUSY_STATUS, SYNCED_EVENT_TITLE
from busical.models.event import CalendarEvent, SyncEventData


def sanitize(event: CalendarEvent) -> SyncEventData:
    """Convert a CalendarEvent to a privacy-protected SyncEventData.

    Title, description and location of the source event are never read;
    only the start and end instants carry over.
    """
    return SyncEventData(
        title=SYNCED_EVENT_TITLE,
        start_date=event.start_date,
        end_date=event.end_date,
        busy_status=BUSY_STATUS,
        description="",
        location="",
    )
