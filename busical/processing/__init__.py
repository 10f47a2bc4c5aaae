"""Event processing for BusiCal."""

from busical.processing.privacy import sanitize
from busical.processing.weeks import filter_events_by_week, week_range

__all__ = ["filter_events_by_week", "sanitize", "week_range"]
