"""Error types raised by togglcli.

Every failure the core can produce derives from ``TogglCliError`` so the
command dispatcher can render them uniformly. Nothing in the core recovers
from these; they propagate unchanged to ``togglcli.cli``.
"""


class TogglCliError(Exception):
    """Base class for all togglcli errors."""


# -- remote API ---------------------------------------------------------


class ApiError(TogglCliError):
    """Base class for failures talking to the remote service."""


class AuthenticationError(ApiError):
    """The API token was rejected (invalid or expired)."""


class NetworkError(ApiError):
    """The request never produced an HTTP response (connection, timeout)."""


class RemoteError(ApiError):
    """The service answered with a non-2xx status not covered above."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status}: {message}")


class DecodeError(ApiError):
    """The response body could not be parsed into the expected model."""


# -- local --------------------------------------------------------------


class ConfigurationError(TogglCliError):
    """Credential material is structurally invalid (e.g. empty token)."""


class CredentialsError(TogglCliError):
    """The credential file could not be read or written."""


class InvalidStateError(TogglCliError):
    """A time entry was passed to a transition it cannot take."""


class NoEntriesError(TogglCliError):
    """There is no time entry to continue."""


# -- picker -------------------------------------------------------------


class PickerError(TogglCliError):
    """The interactive picker failed."""


class PickerCancelled(PickerError):
    """The user aborted the picker without choosing an item."""


class FzfNotInstalled(PickerError):
    """The picker executable could not be found."""
