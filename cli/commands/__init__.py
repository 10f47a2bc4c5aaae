"""CLI commands package."""

from cli.commands.config import config
from cli.commands.download import download
from cli.commands.emails import emails
from cli.commands.events import events
from cli.commands.link import link
from cli.commands.refresh import refresh
from cli.commands.url import url_app

__all__ = [
    "config",
    "download",
    "emails",
    "events",
    "link",
    "refresh",
    "url_app",
]
