"""Cache of the last successfully fetched events."""

import logging
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError as PydanticValidationError

from busical.constants import CACHE_KEY, STALE_AFTER_HOURS
from busical.models.cache import CacheRecord, ParseResult
from busical.storage.key_value import KeyValueStore

logger = logging.getLogger(__name__)


class EventCache:
    """Stores one CacheRecord, replaced wholesale on every successful fetch."""

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = CACHE_KEY,
        stale_after: timedelta = timedelta(hours=STALE_AFTER_HOURS),
    ):
        self.kv = kv
        self.key = key
        self.stale_after = stale_after

    def save(self, record: CacheRecord) -> None:
        """Persist a record (dates as ISO-8601 strings)."""
        self.kv.set(self.key, record.model_dump_json())
        logger.info(f"Cached {len(record.events)} events")

    def save_result(self, result: ParseResult, now: datetime | None = None) -> CacheRecord:
        """Build a record from a parse result and persist it."""
        record = CacheRecord(
            events=result.events,
            last_fetch=now or datetime.now(timezone.utc),
            calendar_last_updated=result.calendar_last_updated,
        )
        self.save(record)
        return record

    def load(self) -> CacheRecord | None:
        """Load the cached record, or None if absent or unreadable."""
        raw = self.kv.get(self.key)
        if not raw:
            return None
        try:
            return CacheRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Cached events unreadable ({e.error_count()} errors), ignoring cache")
            return None

    def clear(self) -> None:
        self.kv.remove(self.key)

    def is_stale(self, record: CacheRecord | None, now: datetime | None = None) -> bool:
        """True if the feed itself has not been updated within the stale window.

        Display-only: staleness never changes fetch behaviour.
        """
        if record is None or record.calendar_last_updated is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now - record.calendar_last_updated > self.stale_after
