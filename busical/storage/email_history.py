"""Recently used account e-mails per calendar platform."""

import json
import logging
import re

from busical.constants import GOOGLE_EMAILS_KEY, OUTLOOK_EMAILS_KEY
from busical.output.calendar_links import CalendarPlatform
from busical.storage.key_value import KeyValueStore

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_STORAGE_KEYS = {
    CalendarPlatform.GOOGLE: GOOGLE_EMAILS_KEY,
    CalendarPlatform.OUTLOOK: OUTLOOK_EMAILS_KEY,
}


def is_valid_email(email: str) -> bool:
    """Basic e-mail shape check."""
    return bool(EMAIL_RE.match(email.strip()))


class EmailHistory:
    """Most-recent-first list of e-mails used for each provider."""

    def __init__(self, kv: KeyValueStore, limit: int = 5):
        self.kv = kv
        self.limit = limit

    @staticmethod
    def _key(platform: CalendarPlatform | str) -> str:
        platform = CalendarPlatform(platform)
        if platform not in _STORAGE_KEYS:
            raise ValueError(f"No e-mail history for platform: {platform.value}")
        return _STORAGE_KEYS[platform]

    def get(self, platform: CalendarPlatform | str) -> list[str]:
        raw = self.kv.get(self._key(platform))
        if not raw:
            return []
        try:
            history = json.loads(raw)
        except ValueError:
            logger.warning("E-mail history unreadable, ignoring it")
            return []
        return [str(e) for e in history] if isinstance(history, list) else []

    def add(self, platform: CalendarPlatform | str, email: str) -> list[str]:
        """Move an e-mail to the front of the history (invalid e-mails are ignored)."""
        if not is_valid_email(email):
            logger.warning("Invalid e-mail format, not saving to history")
            return self.get(platform)

        normalized = email.strip().lower()
        history = [e for e in self.get(platform) if e.lower() != normalized]
        updated = [normalized, *history][: self.limit]

        self.kv.set(self._key(platform), json.dumps(updated))
        return updated

    def remove(self, platform: CalendarPlatform | str, email: str) -> list[str]:
        normalized = email.strip().lower()
        updated = [e for e in self.get(platform) if e.lower() != normalized]
        self.kv.set(self._key(platform), json.dumps(updated))
        return updated
