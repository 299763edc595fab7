"""Configuration management for togglcli."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# togglcli config directory
TOGGLCLI_DIR = Path.home() / ".togglcli"
TOGGLCLI_ENV_FILE = TOGGLCLI_DIR / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOGGL_",
        # Later files override earlier ones
        env_file=(str(TOGGLCLI_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Overrides the token stored by `toggl auth` when set
    api_token: str = Field(
        default="",
        description="Toggl Track API token",
    )

    # Remote service
    api_url: str = Field(
        default="https://api.track.toggl.com/api/v9",
        description="Base URL of the Toggl Track REST API",
    )
    request_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds for each API request",
    )
    entries_window_days: int = Field(
        default=90,
        description="How many days back `list` and `continue` look for entries",
    )
    client_name: str = Field(
        default="togglcli",
        description="Value sent as created_with on new time entries",
    )

    # Picker
    picker_command: str = Field(
        default="fzf",
        description="Executable used for interactive selection",
    )

    credentials_path: Path | None = Field(
        default=None,
        description="Path of the credential file (default: ~/.togglcli/credentials.json)",
    )

    def get_api_url(self) -> str:
        """Get the API base URL without a trailing slash."""
        return self.api_url.rstrip("/")

    def get_credentials_path(self) -> Path:
        """Get the credential file path, using default if not set."""
        if self.credentials_path:
            return self.credentials_path
        return TOGGLCLI_DIR / "credentials.json"


# Global settings instance
settings = Settings()
