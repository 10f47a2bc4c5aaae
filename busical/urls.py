"""Feed URL normalization and validation."""

from urllib.parse import urlparse

from busical.exceptions import ValidationError

ALLOWED_SCHEMES = ("http", "https")


def normalize_ics_url(url: str) -> str:
    """Convert a webcal:// URL to https://."""
    url = url.strip()
    if url.lower().startswith("webcal://"):
        return "https://" + url[len("webcal://"):]
    return url


def validate_ics_url(url: str) -> str:
    """Validate a feed URL before any network call.

    Returns:
        The URL unchanged

    Raises:
        ValidationError: If the URL is malformed or uses a disallowed scheme
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValidationError(f"Invalid URL format: {e}") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise ValidationError(
            "Invalid URL protocol. Only http and https are allowed."
        )
    if not parsed.netloc:
        raise ValidationError("Invalid URL format: missing host")
    return url


def is_valid_ics_url(url: str) -> bool:
    """Check if a URL looks like a calendar feed (http/https, .ics or calendar-ish path)."""
    try:
        validate_ics_url(url)
    except ValidationError:
        return False

    path = urlparse(url).path.lower()
    return path.endswith(".ics") or "ical" in path or "calendar" in path
