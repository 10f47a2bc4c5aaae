"""Tests for the device-bound encrypted URL store."""

import asyncio
import json

import pytest

from busical.config import BusiCalConfig
from busical.crypto.capability import CryptographyBackend
from busical.crypto.fingerprint import (
    DeviceCharacteristics,
    LocalDeviceProfile,
    StaticDeviceProfile,
)
from busical.exceptions import CryptoUnsupportedError, DecryptionError, ValidationError
from busical.models.encrypted import EncryptedBlob
from busical.storage.url_store import EncryptedUrlStore

from conftest import FEED_URL


class UnsupportedBackend(CryptographyBackend):
    def is_supported(self) -> bool:
        return False


class FlakyBackend(CryptographyBackend):
    """Backend whose support disappears after construction."""

    supported = True

    def is_supported(self) -> bool:
        return self.supported


@pytest.fixture
def other_device(device_characteristics):
    return StaticDeviceProfile(
        device_characteristics.model_copy(update={"timezone_name": "America/New_York"})
    )


@pytest.mark.asyncio
async def test_encrypt_decrypt_round_trip(url_store):
    blob = await url_store.encrypt_url(FEED_URL)
    assert await url_store.decrypt_url(blob) == FEED_URL


@pytest.mark.asyncio
async def test_decrypt_on_other_device_returns_none(kv, url_store, other_device, store_config):
    blob = await url_store.encrypt_url(FEED_URL)

    other = EncryptedUrlStore(kv, device=other_device, config=store_config)

    assert await other.decrypt_url(blob) is None


@pytest.mark.asyncio
async def test_encrypt_uses_fresh_iv_and_shared_salt(url_store):
    first = await url_store.encrypt_url(FEED_URL)
    second = await url_store.encrypt_url(FEED_URL)

    assert first.iv != second.iv
    assert first.ciphertext != second.ciphertext
    assert first.salt == second.salt
    assert len(first.iv) == 12
    assert len(first.salt) == 16


@pytest.mark.asyncio
async def test_tampered_ciphertext_returns_none(url_store):
    blob = await url_store.encrypt_url(FEED_URL)
    flipped = bytes([blob.ciphertext[0] ^ 0x01]) + blob.ciphertext[1:]

    tampered = EncryptedBlob(ciphertext=flipped, iv=blob.iv, salt=blob.salt)

    assert await url_store.decrypt_url(tampered) is None


def test_salt_get_or_create_is_idempotent(kv, url_store):
    first = url_store.get_or_create_salt()
    second = url_store.get_or_create_salt()

    assert first == second
    assert kv.get(url_store.config.salt_key) == first.hex()


def test_malformed_salt_is_replaced(kv, url_store):
    kv.set(url_store.config.salt_key, "not-hex")

    salt = url_store.get_or_create_salt()

    assert len(salt) == 16
    assert kv.get(url_store.config.salt_key) == salt.hex()


@pytest.mark.asyncio
async def test_concurrent_encrypts_share_one_salt(kv, url_store):
    blobs = await asyncio.gather(*(url_store.encrypt_url(FEED_URL) for _ in range(5)))

    assert len({blob.salt for blob in blobs}) == 1
    assert kv.get(url_store.config.salt_key) == blobs[0].salt.hex()


@pytest.mark.asyncio
async def test_save_url_persists_only_the_blob(kv, url_store):
    await url_store.save_url(FEED_URL)

    raw = kv.get(url_store.config.url_key)
    record = json.loads(raw)

    assert set(record) == {"encrypted", "iv", "salt"}
    assert "calendar.example.com" not in raw
    assert all(bytes.fromhex(value) for value in record.values())


@pytest.mark.asyncio
async def test_save_url_rejects_invalid_url(kv, url_store):
    with pytest.raises(ValidationError):
        await url_store.save_url("ftp://calendar.example.com/feed.ics")

    assert kv.get(url_store.config.url_key) is None


@pytest.mark.asyncio
async def test_load_url_round_trip(url_store):
    await url_store.save_url(FEED_URL)
    assert await url_store.load_url() == FEED_URL


@pytest.mark.asyncio
async def test_load_url_empty_store(url_store):
    assert await url_store.load_url() is None
    assert url_store.has_url() is False


@pytest.mark.asyncio
async def test_load_url_migrates_plaintext(kv, url_store):
    kv.set(url_store.config.url_key, FEED_URL)

    assert await url_store.load_url() == FEED_URL
    assert EncryptedBlob.looks_encrypted(kv.get(url_store.config.url_key))
    assert await url_store.load_url() == FEED_URL


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        '{"encrypted": "zz", "iv": "00", "salt": "00"}',
        '{"encrypted": "00", "iv": "0011", "salt": "0011"}',
        "not a url or a blob",
    ],
)
async def test_load_url_corrupted_value_returns_none(kv, url_store, raw):
    kv.set(url_store.config.url_key, raw)
    assert await url_store.load_url() is None


@pytest.mark.asyncio
async def test_require_url_without_url(url_store):
    with pytest.raises(ValidationError):
        await url_store.require_url()


@pytest.mark.asyncio
async def test_require_url_on_other_device(kv, url_store, other_device, store_config):
    await url_store.save_url(FEED_URL)
    other = EncryptedUrlStore(kv, device=other_device, config=store_config)

    with pytest.raises(DecryptionError):
        await other.require_url()


@pytest.mark.asyncio
async def test_clear_url_keeps_salt(kv, url_store):
    await url_store.save_url(FEED_URL)
    salt = kv.get(url_store.config.salt_key)

    url_store.clear_url()

    assert url_store.has_url() is False
    assert kv.get(url_store.config.salt_key) == salt


def test_unsupported_crypto_is_fatal(kv, device):
    with pytest.raises(CryptoUnsupportedError):
        EncryptedUrlStore(kv, crypto=UnsupportedBackend(), device=device)


@pytest.mark.asyncio
async def test_crypto_lost_after_startup(kv, device, store_config):
    backend = FlakyBackend()
    store = EncryptedUrlStore(kv, crypto=backend, device=device, config=store_config)
    blob = await store.encrypt_url(FEED_URL)

    backend.supported = False

    with pytest.raises(CryptoUnsupportedError):
        await store.encrypt_url(FEED_URL)
    with pytest.raises(CryptoUnsupportedError):
        await store.decrypt_url(blob)


def test_fingerprint_is_deterministic(device_characteristics):
    assert device_characteristics.fingerprint() == (
        "Mozilla/5.0 (X11; Linux x86_64)|en-US|1920|1080|24|-60|Europe/Berlin"
    )


def test_fingerprint_changes_with_characteristics(device_characteristics):
    changed = DeviceCharacteristics(**{**device_characteristics.model_dump(), "language": "de-DE"})
    assert changed.fingerprint() != device_characteristics.fingerprint()


def test_local_device_profile_uses_configured_screen():
    config = BusiCalConfig(screen_width=1920, screen_height=1080, color_depth=24)

    characteristics = LocalDeviceProfile(config).characteristics()

    assert (characteristics.screen_width, characteristics.screen_height) == (1920, 1080)
    assert characteristics.timezone_name
    assert len(characteristics.fingerprint().split("|")) == 7
