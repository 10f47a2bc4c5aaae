"""Typer application and command routing."""

import logging

import typer
from typing_extensions import Annotated

from cli import setup_logging
from cli.commands import config, download, emails, events, link, refresh, url_app
from cli.context import CLIContext, set_context

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="busical",
    help="Mirror a private ICS feed into your own calendars as anonymous busy blocks.",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show info-level log messages"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only show errors"),
    ] = False,
) -> None:
    """Set up logging and the shared command context."""
    ctx = CLIContext(verbose=verbose, quiet=quiet)
    setup_logging(verbose=verbose, quiet=quiet, config=ctx.config)
    set_context(ctx)


app.add_typer(url_app, name="url")
app.command()(refresh)
app.command()(events)
app.command()(link)
app.command()(download)
app.command()(emails)
app.command()(config)
