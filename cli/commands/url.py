"""Manage the encrypted calendar feed URL."""

import logging

import typer
from typing_extensions import Annotated

from busical.urls import is_valid_ics_url, normalize_ics_url
from cli.context import get_context
from cli.display import console, format_datetime, mask_url
from cli.utils import confirm_or_exit, run_async

logger = logging.getLogger(__name__)

url_app = typer.Typer(help="Set, show or clear the calendar feed URL", no_args_is_help=True)


@url_app.command("set")
def set_url(
    url: Annotated[
        str,
        typer.Argument(help="ICS feed URL (webcal:// links are accepted)"),
    ],
) -> None:
    """Encrypt and store the feed URL, then fetch it."""
    ctx = get_context()
    if not is_valid_ics_url(normalize_ics_url(url)):
        logger.warning("Feed URL does not look like an ICS feed")
        console.print(
            "[yellow]This URL does not look like an .ics calendar feed; trying anyway.[/yellow]"
        )

    record = run_async(ctx.service.set_url(url))

    console.print("\n[bold green]✓[/bold green] Feed URL saved (encrypted, bound to this device)")
    console.print(f"  Events:       {len(record.events)}")
    console.print(f"  Last fetched: {format_datetime(record.last_fetch)}")


@url_app.command("show")
def show_url(
    reveal: Annotated[
        bool,
        typer.Option("--reveal", help="Print the full URL instead of a masked one"),
    ] = False,
) -> None:
    """Show the stored feed URL (masked by default)."""
    ctx = get_context()
    url_store = ctx.service.url_store

    if not url_store.has_url():
        console.print("[dim]No feed URL configured. Use 'busical url set <URL>'.[/dim]")
        raise typer.Exit(1)

    url = run_async(url_store.load_url())
    if url is None:
        console.print(
            "[red]Stored feed URL could not be decrypted on this device.[/red] "
            "Set it again with 'busical url set <URL>'."
        )
        raise typer.Exit(1)

    console.print(url if reveal else mask_url(url))


@url_app.command("clear")
def clear_url(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """Forget the feed URL and the cached events."""
    ctx = get_context()
    confirm_or_exit("Remove the stored feed URL and cached events?", force=force)

    ctx.service.clear()
    logger.info("Feed URL and cache cleared from CLI")
    console.print("[bold green]✓[/bold green] Feed URL cleared")
