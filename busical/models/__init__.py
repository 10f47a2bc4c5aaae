"""Pydantic models for BusiCal."""

from busical.models.cache import CacheRecord, ParseResult
from busical.models.encrypted import EncryptedBlob
from busical.models.event import CalendarEvent, SyncEventData
from busical.models.feed import FeedResponse

__all__ = [
    "CalendarEvent",
    "SyncEventData",
    "ParseResult",
    "CacheRecord",
    "EncryptedBlob",
    "FeedResponse",
]
