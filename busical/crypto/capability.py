"""Authenticated-encryption and key-derivation capability."""

import asyncio
import logging
import secrets
from typing import Protocol

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from busical.constants import KEY_BYTES
from busical.exceptions import DecryptionError

logger = logging.getLogger(__name__)


class CryptoCapability(Protocol):
    """Protocol for the platform encryption primitives."""

    def is_supported(self) -> bool:
        """True if AES-GCM and PBKDF2 are available."""
        ...

    def random_bytes(self, length: int) -> bytes:
        """Cryptographically secure random bytes."""
        ...

    async def derive_key(self, password: str, salt: bytes, iterations: int) -> bytes:
        """Derive a 256-bit key with PBKDF2-HMAC-SHA256."""
        ...

    async def encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        """Encrypt with AES-GCM, returning ciphertext with the tag appended."""
        ...

    async def decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        """Decrypt and authenticate; raises DecryptionError on tag mismatch."""
        ...


class CryptographyBackend:
    """CryptoCapability backed by the cryptography package.

    PBKDF2 and AES-GCM run in a worker thread so the event loop is only
    suspended, never blocked.
    """

    def is_supported(self) -> bool:
        try:
            AESGCM(bytes(KEY_BYTES))
        except UnsupportedAlgorithm:
            logger.error("AES-GCM is not supported by the installed OpenSSL")
            return False
        return True

    def random_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)

    async def derive_key(self, password: str, salt: bytes, iterations: int) -> bytes:
        def _derive() -> bytes:
            kdf = PBKDF2HMAC(
                algorithm=hashes.SHA256(),
                length=KEY_BYTES,
                salt=salt,
                iterations=iterations,
            )
            return kdf.derive(password.encode("utf-8"))

        return await asyncio.to_thread(_derive)

    async def encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> bytes:
        return await asyncio.to_thread(AESGCM(key).encrypt, iv, plaintext, None)

    async def decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        try:
            return await asyncio.to_thread(AESGCM(key).decrypt, iv, ciphertext, None)
        except InvalidTag as e:
            raise DecryptionError("Authentication tag mismatch") from e
