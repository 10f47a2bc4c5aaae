"""Event models with Pydantic v2 validation."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator


def _ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC instant (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CalendarEvent(BaseModel):
    """One event extracted from a calendar feed.

    Instants are aware UTC datetimes. All-day events start at midnight of
    their date and carry no time-of-day information from the source.
    """

    id: str
    title: str
    description: str | None = None
    location: str | None = None
    start_date: datetime
    end_date: datetime
    is_all_day: bool = False

    class Config:
        """Pydantic config."""

        frozen = True

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_instant(cls, v: datetime) -> datetime:
        """Store every instant in UTC."""
        return _ensure_utc(v)

    @model_validator(mode="after")
    def validate_dates(self):
        """Validate that the event does not end before it starts."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        return self


class SyncEventData(BaseModel):
    """Sanitized event payload handed to the link generator and ICS writer.

    Only the two instants come from the source event; every other field is
    pinned to a literal and rejects any other value.
    """

    title: Literal["Synced Event"] = "Synced Event"
    start_date: datetime
    end_date: datetime
    busy_status: Literal["busy"] = "busy"
    description: Literal[""] = ""
    location: Literal[""] = ""

    class Config:
        """Pydantic config."""

        frozen = True

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_instant(cls, v: datetime) -> datetime:
        """Store every instant in UTC."""
        return _ensure_utc(v)
