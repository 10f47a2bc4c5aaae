"""Rich-based event renderer for terminal display."""

from collections import defaultdict
from datetime import date, datetime, timezone, tzinfo

from rich.console import Console
from rich.table import Table
from rich.text import Text
from tzlocal import get_localzone

from busical.models.event import CalendarEvent
from cli.display.console import console as shared_console


class EventRenderer:
    """Render cached calendar events grouped by local day.

    Colors:
    - Day labels: cyan
    - Times and ids: dim
    - Titles: default
    """

    def __init__(self, console: Console | None = None, tz: tzinfo | None = None):
        self.console = console or shared_console
        self.tz = tz or get_localzone()

    def render_agenda(
        self,
        events: list[CalendarEvent],
        title: str | None = None,
        subtitle: str | None = None,
        today: date | None = None,
    ) -> None:
        """Render events grouped by day.

        Args:
            events: Events sorted by start time.
            title: Optional title for the display header.
            subtitle: Optional subtitle (e.g., week range).
            today: Reference day for relative labels (defaults to today).
        """
        if not events:
            self.render_empty()
            return

        self._print_header(title, subtitle)

        by_date: dict[date, list[CalendarEvent]] = defaultdict(list)
        for event in events:
            by_date[self._local(event.start_date).date()].append(event)

        today = today or datetime.now(self.tz).date()

        for event_date in sorted(by_date):
            self.console.print(f"\n[cyan]{self._format_day_label(event_date, today)}[/cyan]")

            table = Table(show_header=False, box=None, padding=(0, 2))
            table.add_column("Time", style="dim", width=13)
            table.add_column("Title")
            table.add_column("Id", style="dim")
            for event in by_date[event_date]:
                table.add_row(self._format_time_range(event), Text(event.title), event.id)
            self.console.print(table)

        self._print_footer(len(events))

    def render_empty(self, message: str | None = None) -> None:
        msg = message or "No events found"
        self.console.print(f"\n[dim]{msg}[/dim]\n")

    def _local(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(self.tz)

    def _print_header(self, title: str | None, subtitle: str | None) -> None:
        self.console.print()
        self.console.print("━" * 40)
        if title:
            header_text = f"  {title}"
            if subtitle:
                header_text += f" [dim]({subtitle})[/dim]"
            self.console.print(f"[bold]{header_text}[/bold]")
        self.console.print("━" * 40)

    def _print_footer(self, count: int) -> None:
        self.console.print()
        self.console.print("─" * 40)
        event_word = "event" if count == 1 else "events"
        self.console.print(f"[dim]{count} {event_word}[/dim]")
        self.console.print()

    def _format_day_label(self, event_date: date, today: date) -> str:
        """Format a date as "TODAY (Thu Jan 16)", "Tomorrow (...)" or "Mon Jan 19"."""
        delta = (event_date - today).days
        label = event_date.strftime("%a %b %d")

        if delta == 0:
            return f"TODAY ({label})"
        if delta == 1:
            return f"Tomorrow ({label})"
        if delta == -1:
            return f"Yesterday ({label})"
        return label

    def _format_time_range(self, event: CalendarEvent) -> str:
        """Format as "08:00–12:00" or "All day"."""
        if event.is_all_day:
            return "All day"
        start = self._local(event.start_date)
        end = self._local(event.end_date)
        return f"{start.strftime('%H:%M')}–{end.strftime('%H:%M')}"
