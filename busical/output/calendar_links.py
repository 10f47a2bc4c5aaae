"""Provider deep links for adding a sanitized event to a web calendar."""

from datetime import datetime, timezone, tzinfo
from enum import Enum
from urllib.parse import urlencode

from tzlocal import get_localzone

from busical.models.event import SyncEventData
from busical.output.ics_writer import format_ics_date

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
GOOGLE_ACCOUNT_CHOOSER_URL = "https://accounts.google.com/AccountChooser"
OUTLOOK_COMPOSE_URL = "https://outlook.live.com/calendar/0/deeplink/compose"


class CalendarPlatform(str, Enum):
    """Sync targets offered for an event."""

    GOOGLE = "google"
    OUTLOOK = "outlook"


def build_url(base_url: str, params: dict[str, str | None]) -> str:
    """Build a URL, dropping parameters whose value is None or empty."""
    query = urlencode(
        [(key, value) for key, value in params.items() if value is not None and value != ""]
    )
    if not query:
        return base_url
    return f"{base_url}?{query}"


def format_outlook_date(value: datetime, tz: tzinfo | None = None) -> str:
    """Format an instant as local wall-clock time with explicit offset.

    Example: 2025-01-15T11:00:00+01:00
    """
    tz = tz or get_localzone()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(tz)

    offset_minutes = int(local.utcoffset().total_seconds() // 60)
    sign = "+" if offset_minutes >= 0 else "-"
    hours, minutes = divmod(abs(offset_minutes), 60)

    return f"{local.strftime('%Y-%m-%dT%H:%M:%S')}{sign}{hours:02d}:{minutes:02d}"


def google_link(event: SyncEventData, email: str | None = None) -> str:
    """Generate a Google Calendar event-template link.

    When ``email`` is given the link goes through the account chooser so the
    browser switches to that account before opening the template.
    """
    dates = f"{format_ics_date(event.start_date)}/{format_ics_date(event.end_date)}"

    calendar_url = build_url(
        GOOGLE_CALENDAR_URL,
        {
            "action": "TEMPLATE",
            "text": event.title,
            "dates": dates,
            "details": event.description,
            "location": event.location,
            "crm": "BUSY",  # Show as busy
            "trp": "true",
        },
    )

    if email:
        return build_url(
            GOOGLE_ACCOUNT_CHOOSER_URL,
            {"Email": email, "continue": calendar_url},
        )

    return calendar_url


def outlook_link(
    event: SyncEventData, email: str | None = None, tz: tzinfo | None = None
) -> str:
    """Generate an Outlook compose deep link.

    ``email`` becomes a login hint for account pre-selection, never an attendee.
    """
    return build_url(
        OUTLOOK_COMPOSE_URL,
        {
            "path": "/calendar/action/compose",
            "rru": "addevent",
            "subject": event.title,
            "body": event.description,
            "location": event.location,
            "startdt": format_outlook_date(event.start_date, tz),
            "enddt": format_outlook_date(event.end_date, tz),
            "allday": "false",
            "login_hint": email,
        },
    )


def calendar_link(
    platform: CalendarPlatform | str,
    event: SyncEventData,
    email: str | None = None,
    tz: tzinfo | None = None,
) -> str:
    """Generate the deep link for a provider platform.

    Raises:
        ValueError: For unknown platform names
    """
    if CalendarPlatform(platform) is CalendarPlatform.OUTLOOK:
        return outlook_link(event, email, tz)
    return google_link(event, email)
