"""Storage layer: key-value persistence, encrypted URL, event cache."""

from busical.storage.email_history import EmailHistory
from busical.storage.event_cache import EventCache
from busical.storage.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from busical.storage.url_store import EncryptedUrlStore, StoreConfig

__all__ = [
    "EmailHistory",
    "EncryptedUrlStore",
    "EventCache",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StoreConfig",
]
