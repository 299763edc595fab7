"""Base API client interface."""

from abc import ABC, abstractmethod

from togglcli.models import TimeEntry, User


class ApiClient(ABC):
    """Abstract base class for time-tracking service clients.

    Implementations should handle:
    - Authentication on every request
    - Mapping transport and HTTP failures onto ``togglcli.errors.ApiError``
    - Decoding responses into ``User`` / ``TimeEntry`` models

    No operation retries; failures propagate to the caller unchanged.
    """

    @abstractmethod
    async def get_user(self) -> User:
        """Fetch the account the client's token belongs to.

        Returns:
            The authenticated user

        Raises:
            AuthenticationError: If the token is rejected
        """
        ...

    @abstractmethod
    async def get_running_time_entry(self) -> TimeEntry | None:
        """Fetch the currently running time entry.

        Returns:
            The running entry, or None if nothing is running
        """
        ...

    @abstractmethod
    async def get_time_entries(self) -> list[TimeEntry]:
        """Fetch recent time entries, most recent first.

        Returns:
            Entries within the service's recent window (may be empty)
        """
        ...

    @abstractmethod
    async def create_time_entry(self, candidate: TimeEntry) -> TimeEntry:
        """Create a new time entry.

        Args:
            candidate: Entry with every field but ``id`` populated

        Returns:
            The canonical entry as stored remotely, including its id
        """
        ...

    @abstractmethod
    async def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        """Replace an existing time entry.

        Args:
            entry: Full entry, identified by its ``id``

        Returns:
            The canonical entry after the update
        """
        ...
