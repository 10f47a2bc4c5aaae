"""Show or edit the remembered provider accounts."""

import typer
from rich.table import Table
from typing_extensions import Annotated

from busical.output.calendar_links import CalendarPlatform
from cli.context import get_context
from cli.display import console

_PLATFORMS = (CalendarPlatform.GOOGLE.value, CalendarPlatform.OUTLOOK.value)


def emails(
    platform: Annotated[
        str | None,
        typer.Argument(help="google or outlook (default: both)"),
    ] = None,
    remove: Annotated[
        str | None,
        typer.Option("--remove", help="Forget this e-mail for the given platform"),
    ] = None,
) -> None:
    """List recently used e-mails per calendar provider."""
    ctx = get_context()
    history = ctx.email_history

    if platform is not None and platform not in _PLATFORMS:
        console.print(f"[red]Unknown platform '{platform}'. Use google or outlook.[/red]")
        raise typer.Exit(1)

    if remove:
        if platform is None:
            console.print("[red]--remove needs a platform[/red]")
            raise typer.Exit(1)
        history.remove(platform, remove)
        console.print(f"Removed {remove.strip().lower()} from {platform}")
        return

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("PLATFORM", style="cyan")
    table.add_column("E-MAIL")

    rows = 0
    for name in [platform] if platform else _PLATFORMS:
        for address in history.get(name):
            table.add_row(name, address)
            rows += 1

    if rows == 0:
        console.print("[dim]No e-mails remembered yet[/dim]")
        return
    console.print(table)
