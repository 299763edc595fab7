"""Time entry lifecycle transitions.

An entry moves NotCreated -> Running -> Stopped. Starting always creates a
new remote entry; a stopped entry is never reopened.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from togglcli.api.base import ApiClient
from togglcli.api.wire import running_duration, stopped_duration
from togglcli.config import settings
from togglcli.errors import InvalidStateError, NoEntriesError
from togglcli.models import TimeEntry
from togglcli.picker.base import ItemPicker

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def format_duration(seconds: int) -> str:
    """Render elapsed seconds the way the Toggl timer does, as ``H:MM:SS``.

    Negative input (a raw running duration, or clock skew) shows as zero.
    """
    seconds = max(seconds, 0)
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


class TimeEntryEngine:
    """Computes time entry transitions and persists them through an ApiClient.

    Example:
        engine = TimeEntryEngine(api_client)
        running = await api_client.get_running_time_entry()
        if running:
            await engine.stop(running)
    """

    def __init__(
        self,
        api_client: ApiClient,
        clock: Callable[[], datetime] = utc_now,
        client_name: str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            api_client: Client used to persist transitions
            clock: Returns the current time (timezone-aware)
            client_name: Provenance tag for created entries (defaults to settings.client_name)
        """
        self.api_client = api_client
        self.clock = clock
        self.client_name = client_name or settings.client_name

    async def start(self, template: TimeEntry) -> TimeEntry:
        """Start a new running entry modelled on ``template``.

        Project, task, description, billable flag, tags and workspace are
        taken from the template; timing and provenance are fresh.

        Returns:
            The entry as created remotely
        """
        now = self.clock()
        candidate = template.model_copy(
            update={
                "id": None,
                "start": now,
                "stop": None,
                "duration": running_duration(now),
                "created_with": self.client_name,
            },
            deep=True,
        )
        logger.debug(f"Starting entry '{candidate.description}' at {now.isoformat()}")
        return await self.api_client.create_time_entry(candidate)

    async def stop(self, running_entry: TimeEntry) -> TimeEntry:
        """Stop a running entry at the current time.

        Raises:
            InvalidStateError: If the entry is already stopped, has no start,
                or would end up with a negative duration

        Returns:
            The entry as updated remotely
        """
        if not running_entry.is_running:
            raise InvalidStateError(f"Time entry {running_entry.id} is already stopped")
        if running_entry.start is None:
            raise InvalidStateError(f"Time entry {running_entry.id} has no start time")

        now = self.clock()
        duration = stopped_duration(running_entry.start, now)
        if duration < 0:
            raise InvalidStateError(
                f"Time entry {running_entry.id} starts in the future ({running_entry.start.isoformat()})"
            )

        stopped = running_entry.model_copy(update={"stop": now, "duration": duration}, deep=True)
        logger.debug(f"Stopping entry {running_entry.id} after {duration}s")
        return await self.api_client.update_time_entry(stopped)

    async def continue_most_recent(self, candidates: Sequence[TimeEntry]) -> TimeEntry:
        """Start a new entry copying the most recent one.

        Args:
            candidates: Entries ordered most recent first

        Raises:
            NoEntriesError: If there are no candidates
        """
        if not candidates:
            raise NoEntriesError("No previous time entry to continue")
        return await self.start(candidates[0])

    async def continue_picked(self, candidates: Sequence[TimeEntry], picker: ItemPicker) -> TimeEntry:
        """Start a new entry copying one the user picks.

        Raises:
            NoEntriesError: If there are no candidates
            PickerError: If the picker fails or is cancelled
        """
        if not candidates:
            raise NoEntriesError("No previous time entry to continue")
        return await self.start(picker.pick(candidates))
