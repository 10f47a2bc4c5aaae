"""Calendar service: fetch, parse and cache the configured feed."""

import logging
from datetime import datetime, timezone, tzinfo

from busical.ingestion.feed_client import ProxyFeedClient
from busical.ingestion.ics_parser import ICSParser
from busical.models.cache import CacheRecord
from busical.models.event import CalendarEvent
from busical.processing.weeks import filter_events_by_week
from busical.storage.event_cache import EventCache
from busical.storage.url_store import EncryptedUrlStore
from busical.urls import normalize_ics_url, validate_ics_url

logger = logging.getLogger(__name__)


class CalendarService:
    """Coordinates the encrypted URL, the feed client, the parser and the cache."""

    def __init__(
        self,
        url_store: EncryptedUrlStore,
        feed_client: ProxyFeedClient,
        cache: EventCache,
        parser: ICSParser | None = None,
    ):
        """
        Initialize the service.

        Args:
            url_store: Encrypted storage for the feed URL
            feed_client: Fetches raw ICS text
            cache: Event cache (replaced on each successful fetch)
            parser: ICS parser (defaults to local-timezone parser)
        """
        self.url_store = url_store
        self.feed_client = feed_client
        self.cache = cache
        self.parser = parser or ICSParser()

    async def set_url(self, url: str) -> CacheRecord:
        """Store a new feed URL (encrypted) and fetch it.

        Raises:
            ValidationError: If the URL is malformed; nothing is stored
        """
        url = validate_ics_url(normalize_ics_url(url))
        await self.url_store.save_url(url)
        return await self._refresh_from(url)

    async def load_url(self) -> str | None:
        return await self.url_store.load_url()

    async def refresh(self) -> CacheRecord:
        """Re-fetch the configured feed and replace the cache.

        Raises:
            ValidationError: If no URL is configured
            DecryptionError: If the stored URL cannot be decrypted on this device
            FetchError: If fetching fails (cache untouched)
            ParseError: If the feed is not a calendar (cache untouched)
        """
        url = await self.url_store.require_url()
        return await self._refresh_from(url)

    async def _refresh_from(self, url: str) -> CacheRecord:
        ics_text = await self.feed_client.fetch(url)
        result = self.parser.parse(ics_text)
        return self.cache.save_result(result, now=datetime.now(timezone.utc))

    def cached(self) -> CacheRecord | None:
        return self.cache.load()

    def is_stale(self, now: datetime | None = None) -> bool:
        return self.cache.is_stale(self.cache.load(), now)

    def find_event(self, event_id: str) -> CalendarEvent | None:
        """Look up a cached event by id."""
        record = self.cache.load()
        if record is None:
            return None
        for event in record.events:
            if event.id == event_id:
                return event
        return None

    def events_for_week(
        self,
        week_offset: int = 0,
        now: datetime | None = None,
        tz: tzinfo | None = None,
    ) -> list[CalendarEvent]:
        record = self.cache.load()
        if record is None:
            return []
        return filter_events_by_week(record.events, week_offset, now, tz)

    def clear(self) -> None:
        """Forget the feed URL and the cached events."""
        self.url_store.clear_url()
        self.cache.clear()
        logger.info("Cleared feed URL and cached events")
