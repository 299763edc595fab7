"""Remote API clients."""

from togglcli.api.base import ApiClient
from togglcli.api.toggl import TogglApiClient

__all__ = ["ApiClient", "TogglApiClient"]
