"""At-rest representation of the encrypted feed URL."""

import json

from pydantic import BaseModel, field_validator

from busical.constants import IV_BYTES, SALT_BYTES


class EncryptedBlob(BaseModel):
    """AES-GCM ciphertext (with tag) plus the IV and salt needed to decrypt it."""

    ciphertext: bytes
    iv: bytes
    salt: bytes

    @field_validator("iv")
    @classmethod
    def validate_iv(cls, v: bytes) -> bytes:
        if len(v) != IV_BYTES:
            raise ValueError(f"iv must be {IV_BYTES} bytes")
        return v

    @field_validator("salt")
    @classmethod
    def validate_salt(cls, v: bytes) -> bytes:
        if len(v) != SALT_BYTES:
            raise ValueError(f"salt must be {SALT_BYTES} bytes")
        return v

    def to_dict(self) -> dict[str, str]:
        """Convert to the persisted record of hex strings."""
        return {
            "encrypted": self.ciphertext.hex(),
            "iv": self.iv.hex(),
            "salt": self.salt.hex(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "EncryptedBlob":
        """Create from the persisted record of hex strings."""
        return cls(
            ciphertext=bytes.fromhex(data["encrypted"]),
            iv=bytes.fromhex(data["iv"]),
            salt=bytes.fromhex(data["salt"]),
        )

    @classmethod
    def from_json(cls, raw: str) -> "EncryptedBlob":
        return cls.from_dict(json.loads(raw))

    @staticmethod
    def looks_encrypted(raw: str) -> bool:
        """Check if a stored value is in the encrypted record format."""
        try:
            data = json.loads(raw)
        except ValueError:
            return False
        return isinstance(data, dict) and all(
            data.get(key) for key in ("encrypted", "iv", "salt")
        )
