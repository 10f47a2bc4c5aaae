"""List cached calendar events."""

import logging
from datetime import timedelta

import typer
from typing_extensions import Annotated

from busical.processing.weeks import week_range
from cli.context import get_context
from cli.display import EventRenderer, console, format_datetime

logger = logging.getLogger(__name__)


def events(
    week: Annotated[
        int,
        typer.Option(
            "--week", "-w", help="Week offset from the current week (0 = this week, -1 = last week)"
        ),
    ] = 0,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Show every cached event, ignoring --week"),
    ] = False,
) -> None:
    """List cached events for a week (weeks start on Sunday)."""
    ctx = get_context()
    service = ctx.service

    record = service.cached()
    if record is None:
        console.print("[dim]No cached events. Run 'busical refresh' first.[/dim]")
        raise typer.Exit(1)

    renderer = EventRenderer()
    if show_all:
        renderer.render_agenda(record.events, title="All events")
    else:
        start, end = week_range(week)
        last_day = end - timedelta(days=1)
        renderer.render_agenda(
            service.events_for_week(week),
            title="Week of " + start.strftime("%b %d"),
            subtitle=f"{start.strftime('%a %b %d')} – {last_day.strftime('%a %b %d')}",
        )

    console.print(f"[dim]Last fetched: {format_datetime(record.last_fetch)}[/dim]")
    if service.cache.is_stale(record):
        console.print(
            "[yellow]⚠ The calendar feed has not been updated recently; "
            "events may be out of date.[/yellow]"
        )
