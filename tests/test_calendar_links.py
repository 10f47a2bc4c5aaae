"""Tests for provider deep links."""

from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit
from zoneinfo import ZoneInfo

import pytest

from busical.ingestion.ics_parser import ICSParser
from busical.models.event import SyncEventData
from busical.output.calendar_links import (
    CalendarPlatform,
    build_url,
    calendar_link,
    format_outlook_date,
    google_link,
    outlook_link,
)
from busical.processing.privacy import sanitize

BERLIN = ZoneInfo("Europe/Berlin")


@pytest.fixture
def synced_event():
    return SyncEventData(
        start_date=datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc),
        end_date=datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc),
    )


def query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


def test_build_url_drops_empty_values():
    url = build_url("https://example.com/x", {"a": "1", "b": "", "c": None, "d": "two words"})
    assert url == "https://example.com/x?a=1&d=two+words"


def test_build_url_without_params():
    assert build_url("https://example.com/x", {"a": None}) == "https://example.com/x"


def test_google_link_params(synced_event):
    url = google_link(synced_event)
    params = query(url)

    assert url.startswith("https://calendar.google.com/calendar/render?")
    assert params == {
        "action": ["TEMPLATE"],
        "text": ["Synced Event"],
        "dates": ["20250115T100000Z/20250115T110000Z"],
        "crm": ["BUSY"],
        "trp": ["true"],
    }


def test_google_link_with_email_goes_through_account_chooser(synced_event):
    url = google_link(synced_event, "me@example.com")
    params = query(url)

    assert url.startswith("https://accounts.google.com/AccountChooser?")
    assert params["Email"] == ["me@example.com"]
    assert params["continue"] == [google_link(synced_event)]


def test_format_outlook_date_has_explicit_offset():
    value = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
    assert format_outlook_date(value, BERLIN) == "2025-01-15T11:00:00+01:00"
    assert format_outlook_date(value, ZoneInfo("America/New_York")) == "2025-01-15T05:00:00-05:00"


def test_outlook_link_params(synced_event):
    url = outlook_link(synced_event, tz=BERLIN)
    params = query(url)

    assert url.startswith("https://outlook.live.com/calendar/0/deeplink/compose?")
    assert params == {
        "path": ["/calendar/action/compose"],
        "rru": ["addevent"],
        "subject": ["Synced Event"],
        "startdt": ["2025-01-15T11:00:00+01:00"],
        "enddt": ["2025-01-15T12:00:00+01:00"],
        "allday": ["false"],
    }


def test_outlook_link_email_is_login_hint(synced_event):
    params = query(outlook_link(synced_event, "me@example.com", tz=BERLIN))

    assert params["login_hint"] == ["me@example.com"]
    assert "to" not in params
    assert "attendees" not in params


def test_calendar_link_dispatch(synced_event):
    assert calendar_link("google", synced_event) == google_link(synced_event)
    assert calendar_link(CalendarPlatform.OUTLOOK, synced_event, tz=BERLIN) == outlook_link(
        synced_event, tz=BERLIN
    )


@pytest.mark.parametrize("platform", ["system", "yahoo"])
def test_calendar_link_rejects_platforms_without_web_link(synced_event, platform):
    with pytest.raises(ValueError):
        calendar_link(platform, synced_event)


def test_parsed_event_link_leaks_nothing():
    """Test parse -> sanitize -> Google link keeps the slot and drops the title."""
    ics = "\r\n".join(
        [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "BEGIN:VEVENT",
            "UID:x",
            "DTSTART:20250115T100000Z",
            "DTEND:20250115T110000Z",
            "SUMMARY:Doctor",
            "LOCATION:Clinic",
            "END:VEVENT",
            "END:VCALENDAR",
        ]
    )
    event = ICSParser(tz=timezone.utc).parse(ics).events[0]

    url = google_link(sanitize(event))

    assert query(url)["dates"] == ["20250115T100000Z/20250115T110000Z"]
    assert "Doctor" not in url
    assert "Clinic" not in url
