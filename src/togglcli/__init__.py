"""togglcli - a command-line client for Toggl Track time tracking."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("togglcli")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from togglcli.api import ApiClient, TogglApiClient
from togglcli.picker import FzfPicker, ItemPicker
from togglcli.time_tracking import TimeEntryEngine

__all__ = ["ApiClient", "TogglApiClient", "ItemPicker", "FzfPicker", "TimeEntryEngine"]
