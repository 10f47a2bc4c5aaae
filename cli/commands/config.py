"""Display the active BusiCal configuration."""

import os
from pathlib import Path

from rich.table import Table

from busical.config import BusiCalConfig
from cli.context import get_context
from cli.display import console

# Field name -> environment variable
_ENV_KEYS = {
    "data_dir": "BUSICAL_DATA_DIR",
    "log_dir": "LOG_DIR",
    "storage_filename": "BUSICAL_STORAGE_FILENAME",
    "log_filename": "LOG_FILENAME",
    "proxy_url": "BUSICAL_PROXY_URL",
    "fetch_timeout": "BUSICAL_FETCH_TIMEOUT",
    "max_feed_bytes": "BUSICAL_MAX_FEED_BYTES",
    "stale_after_hours": "BUSICAL_STALE_AFTER_HOURS",
    "email_history_limit": "BUSICAL_EMAIL_HISTORY_LIMIT",
    "screen_width": "BUSICAL_SCREEN_WIDTH",
    "screen_height": "BUSICAL_SCREEN_HEIGHT",
    "color_depth": "BUSICAL_COLOR_DEPTH",
}


def _find_env_file() -> Path | None:
    """Find .env file by searching current directory and parent directories."""
    current = Path.cwd()
    for path in [current] + list(current.parents):
        env_file = path / ".env"
        if env_file.exists():
            return env_file.resolve()
    return None


def config() -> None:
    """Display configuration sources and values."""
    cfg = get_context().config
    default_config = BusiCalConfig()

    env_file = _find_env_file()
    console.print(f"\n[bold].env file:[/bold] {env_file or '[dim]not found[/dim]'}\n")

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("SETTING", style="cyan", no_wrap=True)
    table.add_column("SOURCE", style="dim", no_wrap=True)
    table.add_column("VALUE")

    for field_name, env_key in _ENV_KEYS.items():
        value = getattr(cfg, field_name)
        if env_key in os.environ or value != getattr(default_config, field_name):
            source = "env"
        else:
            source = "default"
        table.add_row(field_name, source, str(value))

    console.print(table)
    console.print()
