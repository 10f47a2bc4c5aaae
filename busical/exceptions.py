"""Exception hierarchy for calendar sync operations."""


class BusiCalError(Exception):
    """Base exception for BusiCal operations."""

    pass


class ValidationError(BusiCalError):
    """Malformed or disallowed feed URL."""

    pass


class FetchError(BusiCalError):
    """Network or proxy failure while fetching a calendar feed."""

    def __init__(
        self,
        message: str,
        details: str | None = None,
        upstream_status: int | None = None,
    ):
        super().__init__(message)
        self.details = details
        self.upstream_status = upstream_status


class ParseError(BusiCalError):
    """ICS text could not be interpreted as a calendar document."""

    pass


class CryptoUnsupportedError(BusiCalError):
    """Required encryption primitives are unavailable on this platform."""

    pass


class DecryptionError(BusiCalError):
    """Stored URL could not be decrypted (fingerprint mismatch or corrupted blob)."""

    pass


class ExportError(BusiCalError):
    """Error while exporting a sanitized event."""

    pass
