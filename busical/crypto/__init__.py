"""Encryption capability and device fingerprinting."""

from busical.crypto.capability import CryptoCapability, CryptographyBackend
from busical.crypto.fingerprint import (
    DeviceCharacteristics,
    DeviceProfile,
    LocalDeviceProfile,
    StaticDeviceProfile,
)

__all__ = [
    "CryptoCapability",
    "CryptographyBackend",
    "DeviceCharacteristics",
    "DeviceProfile",
    "LocalDeviceProfile",
    "StaticDeviceProfile",
]
