"""Device-bound encrypted storage for the calendar feed URL."""

import logging
from dataclasses import dataclass

from busical.constants import (
    ENCRYPTION_SALT_KEY,
    ICS_URL_KEY,
    IV_BYTES,
    PBKDF2_ITERATIONS,
    SALT_BYTES,
)
from busical.crypto.capability import CryptoCapability, CryptographyBackend
from busical.crypto.fingerprint import DeviceProfile, LocalDeviceProfile
from busical.exceptions import (
    CryptoUnsupportedError,
    DecryptionError,
    ValidationError,
)
from busical.models.encrypted import EncryptedBlob
from busical.storage.key_value import KeyValueStore
from busical.urls import validate_ics_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreConfig:
    """Storage keys and key-derivation parameters, fixed for the process."""

    url_key: str = ICS_URL_KEY
    salt_key: str = ENCRYPTION_SALT_KEY
    iterations: int = PBKDF2_ITERATIONS
    salt_bytes: int = SALT_BYTES
    iv_bytes: int = IV_BYTES


class EncryptedUrlStore:
    """Encrypts the feed URL with a key derived from the device fingerprint.

    The key is PBKDF2(fingerprint, salt) and is never stored; only the
    {ciphertext, iv, salt} blob is persisted. A blob moved to another device
    (or read after the device characteristics change) cannot be decrypted.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        crypto: CryptoCapability | None = None,
        device: DeviceProfile | None = None,
        config: StoreConfig | None = None,
    ):
        """
        Initialize the store.

        Args:
            kv: Key-value storage for the blob and salt
            crypto: Encryption primitives (defaults to CryptographyBackend)
            device: Source of device characteristics (defaults to LocalDeviceProfile)
            config: Storage keys and KDF parameters

        Raises:
            CryptoUnsupportedError: If the encryption primitives are unavailable
        """
        self.kv = kv
        self.crypto = crypto or CryptographyBackend()
        self.device = device or LocalDeviceProfile()
        self.config = config or StoreConfig()
        self._require_supported()

    def _require_supported(self) -> None:
        if not self.crypto.is_supported():
            raise CryptoUnsupportedError(
                "This platform does not support the encryption features required "
                "to store the calendar URL securely."
            )

    def get_or_create_salt(self) -> bytes:
        """Return the device salt, creating and persisting it on first use.

        Check and write happen synchronously with no suspension in between,
        so concurrent callers in one event loop always see the same salt.
        """
        stored = self.kv.get(self.config.salt_key)
        if stored:
            try:
                salt = bytes.fromhex(stored)
            except ValueError:
                salt = b""
            if len(salt) == self.config.salt_bytes:
                return salt
            logger.warning("Stored encryption salt is malformed, generating a new one")

        salt = self.crypto.random_bytes(self.config.salt_bytes)
        self.kv.set(self.config.salt_key, salt.hex())
        logger.info("Generated new encryption salt")
        return salt

    async def _derive_key(self, salt: bytes) -> bytes:
        fingerprint = self.device.characteristics().fingerprint()
        return await self.crypto.derive_key(fingerprint, salt, self.config.iterations)

    async def encrypt_url(self, plaintext: str) -> EncryptedBlob:
        """Encrypt a URL with a fresh random IV.

        Raises:
            CryptoUnsupportedError: If the encryption primitives are unavailable
        """
        self._require_supported()
        salt = self.get_or_create_salt()
        key = await self._derive_key(salt)
        iv = self.crypto.random_bytes(self.config.iv_bytes)
        ciphertext = await self.crypto.encrypt(key, iv, plaintext.encode("utf-8"))
        logger.debug("URL encrypted")
        return EncryptedBlob(ciphertext=ciphertext, iv=iv, salt=salt)

    async def decrypt_url(self, blob: EncryptedBlob) -> str | None:
        """Decrypt a blob; any failure yields None, never partial plaintext.

        Raises:
            CryptoUnsupportedError: If the encryption primitives are unavailable
        """
        self._require_supported()
        try:
            key = await self._derive_key(blob.salt)
            plaintext = await self.crypto.decrypt(key, blob.iv, blob.ciphertext)
            return plaintext.decode("utf-8")
        except Exception as e:
            # Fail closed: fingerprint mismatch, tampering and backend errors alike
            logger.warning(f"Decryption failed: {type(e).__name__}")
            return None

    async def save_url(self, url: str) -> EncryptedBlob:
        """Validate, encrypt and persist the feed URL."""
        validate_ics_url(url)
        blob = await self.encrypt_url(url)
        self.kv.set(self.config.url_key, blob.to_json())
        logger.info("Saved encrypted feed URL")
        return blob

    async def load_url(self) -> str | None:
        """Load and decrypt the stored feed URL.

        Returns None when nothing is stored or the stored blob cannot be
        decrypted on this device. A legacy plaintext URL is re-saved in
        encrypted form.
        """
        raw = self.kv.get(self.config.url_key)
        if not raw:
            return None

        if not EncryptedBlob.looks_encrypted(raw):
            try:
                validate_ics_url(raw)
            except ValidationError:
                logger.warning("Stored feed URL is neither encrypted nor a valid URL")
                return None
            logger.info("Migrating plaintext feed URL to encrypted storage")
            await self.save_url(raw)
            return raw

        try:
            blob = EncryptedBlob.from_json(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Stored feed URL blob is corrupted: {type(e).__name__}")
            return None

        return await self.decrypt_url(blob)

    async def require_url(self) -> str:
        """Load the stored feed URL or raise.

        Raises:
            ValidationError: If no URL is configured
            DecryptionError: If a URL is stored but cannot be decrypted here
        """
        if not self.has_url():
            raise ValidationError("No ICS URL configured")
        url = await self.load_url()
        if url is None:
            raise DecryptionError(
                "Stored calendar URL could not be decrypted on this device. "
                "Please enter it again."
            )
        return url

    def has_url(self) -> bool:
        return bool(self.kv.get(self.config.url_key))

    def clear_url(self) -> None:
        """Remove the stored feed URL (the device salt is kept)."""
        self.kv.remove(self.config.url_key)
        logger.info("Cleared stored feed URL")
