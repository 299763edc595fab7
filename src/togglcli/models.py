"""Data models shared by the API client, the engine and the CLI."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

NO_DESCRIPTION = "(no description)"


class Credentials(BaseModel):
    """Credential material needed to build an API client."""

    api_token: str


class User(BaseModel):
    """The authenticated Toggl account.

    Only ``api_token`` is ever persisted; the rest is display data.
    """

    api_token: str
    email: str
    fullname: str | None = None
    timezone: str
    default_workspace_id: int


class TimeEntry(BaseModel):
    """One tracked work session.

    An entry is running while ``stop`` is None. The meaning of ``duration``
    for running entries follows the remote service's convention and is
    handled in ``togglcli.api.wire``.
    """

    id: int | None = None
    workspace_id: int | None = None
    project_id: int | None = None
    task_id: int | None = None
    billable: bool = False
    start: datetime | None = None
    stop: datetime | None = None
    duration: int = 0
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    created_with: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_running(self) -> bool:
        return self.stop is None

    def formatted(self) -> str:
        """Render the entry as a single picker line.

        The first field (start date) only disambiguates repeated
        descriptions and is excluded from fuzzy search by the picker.
        Whitespace runs in the description collapse to one space so the
        entry always renders as exactly one line.
        """
        day = self.start.strftime("%Y-%m-%d") if self.start else "----------"
        description = " ".join(self.description.split())
        line = f"{day} {description or NO_DESCRIPTION}"
        if self.project_id is not None:
            line += f" [project {self.project_id}]"
        return line
