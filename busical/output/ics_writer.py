"""ICS writer for sanitized events."""

import logging
import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from busical.constants import ICS_LINE_LIMIT, ICS_MIME_TYPE, ICS_PRODID, ICS_UID_DOMAIN
from busical.exceptions import ExportError
from busical.models.event import SyncEventData

logger = logging.getLogger(__name__)

CRLF = "\r\n"
UID_RANDOM_LENGTH = 13
UID_ALPHABET = string.ascii_lowercase + string.digits

_UNESCAPE_RE = re.compile(r"\\([\\;,nN])")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


def format_ics_date(value: datetime) -> str:
    """Format an instant in UTC basic format (YYYYMMDDTHHMMSSZ)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def escape_text(text: str) -> str:
    """Escape special characters in an ICS text value."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def unescape_text(text: str) -> str:
    """Reverse escape_text."""
    return _UNESCAPE_RE.sub(
        lambda m: "\n" if m.group(1) in "nN" else m.group(1), text
    )


def fold_line(line: str, limit: int = ICS_LINE_LIMIT) -> str:
    """Fold a content line to at most ``limit`` octets per physical line.

    The first physical line holds up to ``limit`` octets, each continuation a
    single space plus up to ``limit - 1`` octets. Multi-byte UTF-8 sequences
    are never split.
    """
    if len(line.encode("utf-8")) <= limit:
        return line

    chunks = []
    current = []
    current_len = 0
    chunk_limit = limit

    for char in line:
        char_len = len(char.encode("utf-8"))
        if current_len + char_len > chunk_limit:
            chunks.append("".join(current))
            current = []
            current_len = 0
            chunk_limit = limit - 1  # leading space takes one octet
        current.append(char)
        current_len += char_len

    if current:
        chunks.append("".join(current))

    return (CRLF + " ").join(chunks)


def unfold_line(folded: str) -> str:
    """Reverse fold_line."""
    return folded.replace(CRLF + " ", "")


def generate_uid(now: datetime | None = None) -> str:
    """Generate a unique ID of the form <unix-millis>-<random>@<domain>."""
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    random_part = "".join(secrets.choice(UID_ALPHABET) for _ in range(UID_RANDOM_LENGTH))
    return f"{millis}-{random_part}@{ICS_UID_DOMAIN}"


def default_filename(now: datetime | None = None) -> str:
    """Default download name: synced-event-<epoch-millis>.ics."""
    now = now or datetime.now(timezone.utc)
    return f"synced-event-{int(now.timestamp() * 1000)}.ics"


def ensure_ics_suffix(filename: str) -> str:
    """Append .ics to a filename that lacks it."""
    if not filename.endswith(".ics"):
        return filename + ".ics"
    return filename


def safe_filename(filename: str) -> str | None:
    """Reduce a user-supplied name to a bare .ics file name.

    Directory parts and control characters are dropped. Returns None when
    nothing usable is left.
    """
    name = _CONTROL_CHARS_RE.sub("", filename).replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in ("", ".", ".."):
        return None
    return ensure_ics_suffix(name)


@dataclass(frozen=True)
class IcsDownload:
    """A generated ICS document ready to be offered as a file download."""

    filename: str
    content: str
    mime_type: str = ICS_MIME_TYPE

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")

    def save(self, directory: Path) -> Path:
        """Write the document into ``directory`` and return its path.

        Raises:
            ExportError: If the file could not be written
        """
        if safe_filename(self.filename) != self.filename:
            raise ExportError("Failed to write ICS file: invalid file name")

        path = directory / self.filename
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(self.to_bytes())

            # Verify file was written
            if path.stat().st_size == 0:
                raise OSError(f"File was created but is empty: {path}")
        except OSError as e:
            # Remove empty file if it was created
            if path.exists() and path.stat().st_size == 0:
                path.unlink(missing_ok=True)
            raise ExportError(f"Failed to write ICS file: {e}") from e

        logger.info(f"Wrote ICS download to {path.name}")
        return path


class ICSWriter:
    """Writer for single-event RFC 5545 documents."""

    def write(self, event: SyncEventData, now: datetime | None = None) -> str:
        """Render a complete VCALENDAR document for one sanitized event.

        Args:
            event: Sanitized event payload
            now: Override for the DTSTAMP/UID clock (defaults to current UTC time)

        Returns:
            CRLF-delimited ICS text
        """
        now = now or datetime.now(timezone.utc)

        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{ICS_PRODID}",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            "BEGIN:VEVENT",
            f"UID:{generate_uid(now)}",
            f"DTSTAMP:{format_ics_date(now)}",
            f"DTSTART:{format_ics_date(event.start_date)}",
            f"DTEND:{format_ics_date(event.end_date)}",
            fold_line(f"SUMMARY:{escape_text(event.title)}"),
            "TRANSP:OPAQUE",
            "STATUS:CONFIRMED",
            "SEQUENCE:0",
        ]

        if event.description:
            lines.append(fold_line(f"DESCRIPTION:{escape_text(event.description)}"))

        if event.location:
            lines.append(fold_line(f"LOCATION:{escape_text(event.location)}"))

        lines.append("END:VEVENT")
        lines.append("END:VCALENDAR")

        return CRLF.join(lines)

    def build_download(
        self,
        event: SyncEventData,
        filename: str | None = None,
        now: datetime | None = None,
    ) -> IcsDownload:
        """Build the downloadable ICS artifact for an event."""
        now = now or datetime.now(timezone.utc)
        name = (safe_filename(filename) if filename else None) or default_filename(now)
        return IcsDownload(filename=name, content=self.write(event, now))
