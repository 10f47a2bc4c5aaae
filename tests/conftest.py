from datetime import datetime, timezone

import pytest

from busical.crypto.capability import CryptographyBackend
from busical.crypto.fingerprint import DeviceCharacteristics, StaticDeviceProfile
from busical.models.event import CalendarEvent
from busical.storage.key_value import InMemoryKeyValueStore
from busical.storage.url_store import EncryptedUrlStore, StoreConfig

FEED_URL = "https://calendar.example.com/private-abc123/basic.ics"

SAMPLE_ICS = "\r\n".join(
    [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Example//Test//EN",
        "BEGIN:VEVENT",
        "UID:doctor-1@example.com",
        "DTSTAMP:20250110T080000Z",
        "DTSTART:20250115T100000Z",
        "DTEND:20250115T110000Z",
        "SUMMARY:Doctor",
        "DESCRIPTION:Annual checkup",
        "LOCATION:Clinic\\, Main St",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "UID:standup-1@example.com",
        "DTSTAMP:20250112T090000Z",
        "DTSTART:20250114T090000Z",
        "DTEND:20250114T091500Z",
        "SUMMARY:Standup",
        "END:VEVENT",
        "END:VCALENDAR",
        "",
    ]
)


@pytest.fixture
def kv():
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def device_characteristics():
    return DeviceCharacteristics(
        user_agent="Mozilla/5.0 (X11; Linux x86_64)",
        language="en-US",
        screen_width=1920,
        screen_height=1080,
        color_depth=24,
        timezone_offset=-60,
        timezone_name="Europe/Berlin",
    )


@pytest.fixture
def device(device_characteristics):
    return StaticDeviceProfile(device_characteristics)


@pytest.fixture
def store_config():
    """Low iteration count keeps key derivation fast in tests."""
    return StoreConfig(iterations=1_000)


@pytest.fixture
def url_store(kv, device, store_config):
    return EncryptedUrlStore(kv, crypto=CryptographyBackend(), device=device, config=store_config)


@pytest.fixture
def sample_ics():
    return SAMPLE_ICS


@pytest.fixture
def doctor_event():
    return CalendarEvent(
        id="doctor-1@example.com",
        title="Doctor",
        description="Annual checkup",
        location="Clinic, Main St",
        start_date=datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc),
        end_date=datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc),
    )


class StubFeedClient:
    """Feed client returning canned text (or raising) and recording URLs."""

    def __init__(self, text: str = SAMPLE_ICS, error: Exception | None = None):
        self.text = text
        self.error = error
        self.urls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.text
