"""Print a provider deep link for a sanitized event."""

import logging

import typer
from typing_extensions import Annotated

from busical.output.calendar_links import CalendarPlatform, calendar_link
from busical.processing.privacy import sanitize
from busical.storage.email_history import is_valid_email
from cli.context import get_context
from cli.display import console
from cli.utils import require_event

logger = logging.getLogger(__name__)


def link(
    event_id: Annotated[
        str,
        typer.Argument(help="Event id (see 'busical events')"),
    ],
    provider: Annotated[
        str,
        typer.Option("--provider", "-p", help="Calendar provider: google or outlook"),
    ] = CalendarPlatform.GOOGLE.value,
    email: Annotated[
        str | None,
        typer.Option(
            "--email", "-e", help="Account to pre-select (defaults to the most recent one)"
        ),
    ] = None,
) -> None:
    """Print a link that adds a 'Synced Event' busy block to your calendar."""
    ctx = get_context()

    if provider not in (CalendarPlatform.GOOGLE.value, CalendarPlatform.OUTLOOK.value):
        console.print(f"[red]Unsupported provider '{provider}'. Use google or outlook.[/red]")
        raise typer.Exit(1)

    event = require_event(ctx.service, event_id)

    history = ctx.email_history
    if email:
        if not is_valid_email(email):
            console.print(f"[red]'{email}' is not a valid e-mail address[/red]")
            raise typer.Exit(1)
        history.add(provider, email)
    else:
        recent = history.get(provider)
        email = recent[0] if recent else None
        if email:
            logger.info(f"Using most recent {provider} account")

    # Only the sanitized event leaves the machine
    console.print(calendar_link(provider, sanitize(event), email), soft_wrap=True)
