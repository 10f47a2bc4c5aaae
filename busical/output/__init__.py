"""Output layer: ICS documents and provider deep links."""

from busical.output.calendar_links import (
    CalendarPlatform,
    build_url,
    calendar_link,
    google_link,
    outlook_link,
)
from busical.output.ics_writer import ICSWriter, IcsDownload

__all__ = [
    "CalendarPlatform",
    "ICSWriter",
    "IcsDownload",
    "build_url",
    "calendar_link",
    "google_link",
    "outlook_link",
]
