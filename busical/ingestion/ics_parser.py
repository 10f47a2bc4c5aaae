"""ICS feed parser producing calendar events."""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from icalendar import Calendar
from tzlocal import get_localzone

from busical.constants import UNTITLED_EVENT_TITLE
from busical.exceptions import ParseError
from busical.models.cache import ParseResult
from busical.models.event import CalendarEvent

logger = logging.getLogger(__name__)


class ICSParser:
    """Parser for ICS calendar feeds.

    Floating date-times and all-day dates are interpreted in ``tz`` (the
    system local zone by default) and normalized to UTC.
    """

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz or get_localzone()

    def parse(self, ics_text: str) -> ParseResult:
        """Parse ICS text into events sorted by start date.

        Raises:
            ParseError: If the text cannot be interpreted as a calendar document
        """
        if not ics_text or not ics_text.strip():
            raise ParseError("Failed to parse ICS: document is empty")

        try:
            cal = Calendar.from_ical(ics_text)
        except Exception as e:
            raise ParseError("Failed to parse ICS: not a valid calendar document") from e

        if cal.name != "VCALENDAR":
            raise ParseError("Failed to parse ICS: root component is not VCALENDAR")

        events = []
        last_updated = None

        for vevent in cal.walk("VEVENT"):
            events.append(self._vevent_to_event(vevent))

            stamp = self._read_dtstamp(vevent)
            if stamp is not None and (last_updated is None or stamp > last_updated):
                last_updated = stamp

        # sorted() is stable: ties keep encounter order
        events = sorted(events, key=lambda e: e.start_date)

        logger.info(f"Parsed {len(events)} events from ICS feed")
        return ParseResult(events=events, calendar_last_updated=last_updated)

    def _vevent_to_event(self, vevent) -> CalendarEvent:
        """Convert an ICS VEVENT component to a CalendarEvent."""
        title = str(vevent.get("summary", "")) or UNTITLED_EVENT_TITLE
        description = str(vevent.get("description", ""))
        location = str(vevent.get("location", ""))

        dtstart = vevent.get("dtstart")
        if dtstart is None:
            raise ParseError("Failed to parse ICS: event has no DTSTART")

        try:
            start_value = dtstart.dt
        except AttributeError as e:
            raise ParseError("Failed to parse ICS: unreadable DTSTART") from e

        is_all_day = not isinstance(start_value, datetime)
        start_date = self._to_instant(start_value)
        end_date = self._read_end(vevent, start_value, start_date, is_all_day)

        if end_date < start_date:
            logger.debug("Event ends before it starts, clamping end to start")
            end_date = start_date

        uid = vevent.get("uid")
        event_id = str(uid) if uid else f"{int(start_date.timestamp() * 1000)}-{title}"

        try:
            return CalendarEvent(
                id=event_id,
                title=title,
                description=description,
                location=location,
                start_date=start_date,
                end_date=end_date,
                is_all_day=is_all_day,
            )
        except ValueError as e:
            raise ParseError(
                f"Failed to create event from ICS component ({type(e).__name__})"
            ) from e

    def _read_end(
        self,
        vevent,
        start_value: date | datetime,
        start_date: datetime,
        is_all_day: bool,
    ) -> datetime:
        """Resolve the end instant from DTEND, DURATION, or the RFC 5545 defaults."""
        dtend = vevent.get("dtend")
        if dtend is not None:
            try:
                return self._to_instant(dtend.dt)
            except AttributeError as e:
                raise ParseError("Failed to parse ICS: unreadable DTEND") from e

        duration = vevent.get("duration")
        if duration is not None and isinstance(getattr(duration, "dt", None), timedelta):
            if is_all_day:
                return self._to_instant(start_value + duration.dt)
            return start_date + duration.dt

        if is_all_day:
            return self._to_instant(start_value + timedelta(days=1))
        return start_date

    def _to_instant(self, value: date | datetime) -> datetime:
        """Convert an ICS date or date-time value to an aware UTC datetime."""
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=self.tz)
            return value.astimezone(timezone.utc)
        # Date-only: midnight of that day in the local zone
        return datetime.combine(value, time.min, tzinfo=self.tz).astimezone(timezone.utc)

    def _read_dtstamp(self, vevent) -> datetime | None:
        """Read DTSTAMP; a missing or unreadable value contributes nothing."""
        dtstamp = vevent.get("dtstamp")
        if dtstamp is None:
            return None
        try:
            return self._to_instant(dtstamp.dt)
        except (AttributeError, TypeError, ValueError, OverflowError):
            logger.debug("Skipping unreadable DTSTAMP")
            return None


def parse_ics(ics_text: str, tz: tzinfo | None = None) -> ParseResult:
    """Parse ICS text with a default parser."""
    return ICSParser(tz).parse(ics_text)
