"""Parse result and cache record models."""

from datetime import datetime

from pydantic import BaseModel, Field

from busical.models.event import CalendarEvent


class ParseResult(BaseModel):
    """Events parsed from one feed plus the feed-side freshness timestamp."""

    events: list[CalendarEvent] = Field(default_factory=list)
    calendar_last_updated: datetime | None = None


class CacheRecord(BaseModel):
    """Cached events from the last successful fetch.

    last_fetch is client-side freshness (when we fetched);
    calendar_last_updated is feed-side freshness (max DTSTAMP).
    """

    events: list[CalendarEvent] = Field(default_factory=list)
    last_fetch: datetime
    calendar_last_updated: datetime | None = None
