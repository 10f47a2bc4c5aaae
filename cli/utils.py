"""CLI utilities shared by commands."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer

from busical.exceptions import BusiCalError
from busical.models.event import CalendarEvent
from busical.ingestion.service import CalendarService
from cli.display import console

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a service coroutine, turning BusiCal errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except BusiCalError as e:
        logger.error(f"Command failed: {type(e).__name__}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def require_event(service: CalendarService, event_id: str) -> CalendarEvent:
    """Look up a cached event or exit with an error."""
    event = service.find_event(event_id)
    if event is None:
        console.print(f"[red]Event '{event_id}' not found in cached events[/red]")
        console.print("Run 'busical refresh' to fetch the latest events.")
        raise typer.Exit(1)
    return event


def confirm_or_exit(message: str, force: bool = False) -> None:
    """Ask for confirmation unless forced; exit quietly on 'no'."""
    if force:
        return
    if not typer.confirm(message, default=False):
        console.print("Cancelled.")
        raise typer.Exit(0)
