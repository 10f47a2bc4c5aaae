"""Tests for the privacy transform."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from busical.models.event import CalendarEvent, SyncEventData
from busical.processing.privacy import sanitize


@pytest.mark.parametrize(
    "title,description,location",
    [
        ("Doctor", "Annual checkup", "Clinic"),
        ("Synced Event", "busy", ""),
        ("", None, None),
        ("Therapy; room 4, floor 2\nbring forms", "Line 1\nLine 2", "Room \\ 4"),
    ],
)
def test_sanitize_strips_sensitive_fields(title, description, location):
    event = CalendarEvent(
        id="x",
        title=title,
        description=description,
        location=location,
        start_date=datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc),
        end_date=datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc),
    )

    synced = sanitize(event)

    assert synced.title == "Synced Event"
    assert synced.description == ""
    assert synced.location == ""
    assert synced.busy_status == "busy"


def test_sanitize_copies_instants_verbatim(doctor_event):
    synced = sanitize(doctor_event)

    assert synced.start_date == doctor_event.start_date
    assert synced.end_date == doctor_event.end_date
    assert synced.start_date.tzinfo is not None


def test_sync_event_data_rejects_source_content():
    """Test the sanitized model cannot carry anything but the literals."""
    with pytest.raises(ValidationError):
        SyncEventData(
            title="Doctor",
            start_date=datetime(2025, 1, 15, tzinfo=timezone.utc),
            end_date=datetime(2025, 1, 15, tzinfo=timezone.utc),
        )
    with pytest.raises(ValidationError):
        SyncEventData(
            location="Clinic",
            start_date=datetime(2025, 1, 15, tzinfo=timezone.utc),
            end_date=datetime(2025, 1, 15, tzinfo=timezone.utc),
        )
