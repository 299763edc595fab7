"""Time tracking module for togglcli.

Provides the start/stop/continue lifecycle for remote time entries.
"""

from togglcli.time_tracking.engine import TimeEntryEngine, format_duration, utc_now

__all__ = ["TimeEntryEngine", "format_duration", "utc_now"]
