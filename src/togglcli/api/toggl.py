"""Toggl Track API v9 client.

API Documentation: https://engineering.toggl.com/docs/
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from togglcli.api.base import ApiClient
from togglcli.api.wire import entry_payload
from togglcli.config import settings
from togglcli.errors import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    InvalidStateError,
    NetworkError,
    RemoteError,
)
from togglcli.models import Credentials, TimeEntry, User

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Toggl expects the token as the basic-auth user with this fixed password
_TOKEN_PASSWORD = "api_token"


def _decode(model: type[M], data: Any) -> M:
    """Validate a decoded JSON value into a model."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Unexpected {model.__name__} payload: {e}") from e


class TogglApiClient(ApiClient):
    """ApiClient bound to the Toggl Track REST API.

    Each request opens its own ``httpx.AsyncClient``; the instance itself
    only holds the token and connection settings.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_token: Toggl API token
            base_url: API base URL (defaults to settings.api_url)
            timeout: Request timeout in seconds (defaults to settings.request_timeout)
            transport: Optional httpx transport, used by tests
        """
        self.api_token = api_token
        self.base_url = (base_url or settings.get_api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    @classmethod
    def from_credentials(cls, credentials: Credentials, **kwargs: Any) -> "TogglApiClient":
        """Build a client from stored credentials without touching the network.

        Raises:
            ConfigurationError: If the token is empty
        """
        token = credentials.api_token.strip()
        if not token:
            raise ConfigurationError("API token is empty. Run 'toggl auth <API_TOKEN>' again.")
        return cls(token, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                auth=(self.api_token, _TOKEN_PASSWORD),
                headers={"Accept": "application/json"},
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, params=params, json=json)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.debug(f"{method} {url} -> {status}")
            if status in (401, 403):
                raise AuthenticationError(
                    "The API token was rejected. Check it at https://track.toggl.com/profile."
                ) from e
            raise RemoteError(status, e.response.text[:200]) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Connection error: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        # The current-entry resource answers "nothing running" with no body
        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response is not valid JSON: {response.text[:200]}") from e

    async def get_user(self) -> User:
        data = await self._request("GET", "/me")
        return _decode(User, data)

    async def get_running_time_entry(self) -> TimeEntry | None:
        data = await self._request("GET", "/me/time_entries/current")
        if data is None:
            return None
        return _decode(TimeEntry, data)

    async def get_time_entries(self) -> list[TimeEntry]:
        today = datetime.now(timezone.utc).date()
        params = {
            "start_date": (today - timedelta(days=settings.entries_window_days)).isoformat(),
            "end_date": (today + timedelta(days=1)).isoformat(),
        }
        data = await self._request("GET", "/me/time_entries", params=params)
        if not isinstance(data, list):
            raise DecodeError(f"Expected a list of time entries, got {type(data).__name__}")

        entries = [_decode(TimeEntry, item) for item in data]
        entries.sort(key=lambda e: e.start.timestamp() if e.start else 0.0, reverse=True)
        return entries

    async def create_time_entry(self, candidate: TimeEntry) -> TimeEntry:
        if candidate.workspace_id is None:
            raise InvalidStateError("Cannot create a time entry without a workspace")

        data = await self._request(
            "POST",
            f"/workspaces/{candidate.workspace_id}/time_entries",
            json=entry_payload(candidate),
        )
        return _decode(TimeEntry, data)

    async def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        if entry.id is None or entry.workspace_id is None:
            raise InvalidStateError("Cannot update a time entry that was never created")

        data = await self._request(
            "PUT",
            f"/workspaces/{entry.workspace_id}/time_entries/{entry.id}",
            json=entry_payload(entry),
        )
        return _decode(TimeEntry, data)
