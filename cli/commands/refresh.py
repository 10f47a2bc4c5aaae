"""Re-fetch the configured calendar feed."""

from cli.context import get_context
from cli.display import console, format_datetime
from cli.utils import run_async


def refresh() -> None:
    """Fetch the configured feed and replace the cached events."""
    ctx = get_context()
    record = run_async(ctx.service.refresh())

    console.print(f"[bold green]✓[/bold green] Fetched {len(record.events)} events")
    console.print(f"  Calendar updated: {format_datetime(record.calendar_last_updated)}")
