"""Write a sanitized event to an ICS file."""

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from busical.exceptions import ExportError
from busical.output.ics_writer import ICSWriter
from busical.processing.privacy import sanitize
from cli.context import get_context
from cli.display import console
from cli.utils import require_event

logger = logging.getLogger(__name__)


def download(
    event_id: Annotated[
        str,
        typer.Argument(help="Event id (see 'busical events')"),
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Directory to write the file to"),
    ] = Path("."),
    filename: Annotated[
        str | None,
        typer.Option("--filename", help="File name (defaults to synced-event-<timestamp>.ics)"),
    ] = None,
) -> None:
    """Export a 'Synced Event' busy block as an .ics file for the system calendar."""
    ctx = get_context()
    event = require_event(ctx.service, event_id)

    artifact = ICSWriter().build_download(sanitize(event), filename=filename)
    try:
        path = artifact.save(output)
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold green]✓[/bold green] Saved {path}")
