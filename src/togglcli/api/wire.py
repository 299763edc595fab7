"""Toggl wire-format conventions.

The service stores the duration of a running entry as the negated start
timestamp (epoch seconds) rather than elapsed time. That quirk lives here
and nowhere else: callers ask for running/stopped durations and elapsed
time through these helpers.
"""

from datetime import datetime
from typing import Any

from togglcli.models import TimeEntry


def running_duration(start: datetime) -> int:
    """Duration value the service expects for an entry running since ``start``."""
    return -int(start.timestamp())


def stopped_duration(start: datetime, stop: datetime) -> int:
    """Whole seconds between ``start`` and ``stop``."""
    return int((stop - start).total_seconds())


def elapsed_seconds(entry: TimeEntry, now: datetime) -> int:
    """Seconds an entry has been tracked, for display.

    Running entries are measured against ``now``; stopped entries report
    their stored duration.
    """
    if entry.stop is not None:
        return entry.duration
    if entry.start is None:
        return 0
    return max(stopped_duration(entry.start, now), 0)


def entry_payload(entry: TimeEntry) -> dict[str, Any]:
    """Serialize an entry into a create/update request body."""
    payload = entry.model_dump(mode="json", exclude={"id"})
    if payload.get("created_with") is None:
        payload.pop("created_with", None)
    return payload
