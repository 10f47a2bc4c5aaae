"""Ingestion layer: feed fetching, ICS parsing, orchestration."""

from busical.ingestion.feed_client import ProxyFeedClient
from busical.ingestion.ics_parser import ICSParser, parse_ics
from busical.ingestion.service import CalendarService

__all__ = [
    "CalendarService",
    "ICSParser",
    "ProxyFeedClient",
    "parse_ics",
]
