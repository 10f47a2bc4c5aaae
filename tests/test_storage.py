"""Tests for key-value storage, the event cache and e-mail history."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from busical.models.cache import CacheRecord, ParseResult
from busical.storage.email_history import EmailHistory, is_valid_email
from busical.storage.event_cache import EventCache
from busical.storage.key_value import InMemoryKeyValueStore, JsonFileKeyValueStore

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Key-value stores
# ─────────────────────────────────────────────────────────────────────────────


def test_in_memory_store():
    kv = InMemoryKeyValueStore({"a": "1"})
    kv.set("b", "2")
    kv.remove("a")
    kv.remove("missing")

    assert kv.get("a") is None
    assert kv.get("b") == "2"
    assert kv.keys() == ["b"]


def test_json_file_store_persists(tmp_path):
    path = tmp_path / "data" / "storage.json"
    kv = JsonFileKeyValueStore(path)
    kv.set("key", "value")

    reopened = JsonFileKeyValueStore(path)

    assert reopened.get("key") == "value"
    assert json.loads(path.read_text()) == {"key": "value"}


def test_json_file_store_remove(tmp_path):
    path = tmp_path / "storage.json"
    kv = JsonFileKeyValueStore(path)
    kv.set("a", "1")
    kv.set("b", "2")

    kv.remove("a")

    assert JsonFileKeyValueStore(path).get("a") is None
    assert JsonFileKeyValueStore(path).get("b") == "2"


def test_json_file_store_unreadable_file_starts_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json")

    kv = JsonFileKeyValueStore(path)

    assert kv.get("anything") is None
    kv.set("a", "1")
    assert json.loads(path.read_text()) == {"a": "1"}


def test_json_file_store_leaves_no_temp_files(tmp_path):
    kv = JsonFileKeyValueStore(tmp_path / "storage.json")
    kv.set("a", "1")
    kv.set("a", "2")

    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


# ─────────────────────────────────────────────────────────────────────────────
# Event cache
# ─────────────────────────────────────────────────────────────────────────────


def test_cache_round_trip(kv, doctor_event):
    cache = EventCache(kv)
    result = ParseResult(events=[doctor_event], calendar_last_updated=NOW - timedelta(hours=1))

    saved = cache.save_result(result, now=NOW)
    loaded = cache.load()

    assert loaded == saved
    assert loaded.events[0] == doctor_event
    assert loaded.last_fetch == NOW


def test_cache_serializes_dates_as_iso_strings(kv, doctor_event):
    cache = EventCache(kv)
    cache.save(CacheRecord(events=[doctor_event], last_fetch=NOW))

    record = json.loads(kv.get(cache.key))

    assert record["last_fetch"].startswith("2025-01-15T12:00:00")
    assert record["events"][0]["start_date"].startswith("2025-01-15T10:00:00")
    assert record["calendar_last_updated"] is None


def test_cache_replaced_wholesale(kv, doctor_event):
    cache = EventCache(kv)
    cache.save_result(ParseResult(events=[doctor_event]), now=NOW)

    cache.save_result(ParseResult(events=[]), now=NOW + timedelta(minutes=5))

    assert cache.load().events == []


def test_cache_unreadable_returns_none(kv):
    cache = EventCache(kv)
    kv.set(cache.key, '{"events": "nope"}')

    assert cache.load() is None


def test_cache_clear(kv, doctor_event):
    cache = EventCache(kv)
    cache.save_result(ParseResult(events=[doctor_event]), now=NOW)

    cache.clear()

    assert cache.load() is None


@pytest.mark.parametrize(
    "updated_hours_ago,expected",
    [(1, False), (23, False), (25, True), (24 * 7, True)],
)
def test_cache_staleness(kv, updated_hours_ago, expected):
    cache = EventCache(kv)
    record = CacheRecord(
        last_fetch=NOW,
        calendar_last_updated=NOW - timedelta(hours=updated_hours_ago),
    )

    assert cache.is_stale(record, now=NOW) is expected


def test_cache_staleness_without_timestamp(kv):
    cache = EventCache(kv)

    assert cache.is_stale(None, now=NOW) is False
    assert cache.is_stale(CacheRecord(last_fetch=NOW - timedelta(days=30)), now=NOW) is False


def test_cache_custom_stale_window(kv):
    cache = EventCache(kv, stale_after=timedelta(hours=2))
    record = CacheRecord(last_fetch=NOW, calendar_last_updated=NOW - timedelta(hours=3))

    assert cache.is_stale(record, now=NOW) is True


# ─────────────────────────────────────────────────────────────────────────────
# E-mail history
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "email,valid",
    [
        ("me@example.com", True),
        ("  Me@Example.org ", True),
        ("me@example", False),
        ("not an email", False),
        ("", False),
    ],
)
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


def test_email_history_most_recent_first(kv):
    history = EmailHistory(kv)
    history.add("google", "a@example.com")
    history.add("google", "b@example.com")

    assert history.add("google", "A@Example.com") == ["a@example.com", "b@example.com"]
    assert history.get("google") == ["a@example.com", "b@example.com"]


def test_email_history_limit(kv):
    history = EmailHistory(kv, limit=3)
    for i in range(5):
        history.add("outlook", f"user{i}@example.com")

    assert history.get("outlook") == [
        "user4@example.com",
        "user3@example.com",
        "user2@example.com",
    ]


def test_email_history_per_platform(kv):
    history = EmailHistory(kv)
    history.add("google", "g@example.com")

    assert history.get("outlook") == []


def test_email_history_ignores_invalid(kv):
    history = EmailHistory(kv)

    assert history.add("google", "nope") == []


def test_email_history_remove(kv):
    history = EmailHistory(kv)
    history.add("google", "a@example.com")
    history.add("google", "b@example.com")

    assert history.remove("google", "A@example.com") == ["b@example.com"]


def test_email_history_unreadable_value(kv):
    history = EmailHistory(kv)
    kv.set("busical_google_emails", "{broken")

    assert history.get("google") == []


@pytest.mark.parametrize("platform", ["system", "yahoo"])
def test_email_history_rejects_other_platforms(kv, platform):
    with pytest.raises(ValueError):
        EmailHistory(kv).get(platform)
