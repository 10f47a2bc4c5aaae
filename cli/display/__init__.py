"""Display module for rendering BusiCal output.

- EventRenderer: Rich agenda view of cached events
- console: Shared Rich console instance
- Formatting functions for dates and feed URLs
"""

from cli.display.console import console
from cli.display.event_renderer import EventRenderer
from cli.display.formatters import format_datetime, format_relative_time, mask_url

__all__ = [
    "console",
    "EventRenderer",
    "format_datetime",
    "format_relative_time",
    "mask_url",
]
