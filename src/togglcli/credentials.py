"""JSON file persistence for the API token.

The token is the only piece of account data kept locally. The file is
guarded by a file lock and restricted to the current user.
"""

import json
import logging
import os
from pathlib import Path

from filelock import FileLock
from pydantic import ValidationError

from togglcli.errors import CredentialsError
from togglcli.models import Credentials

logger = logging.getLogger(__name__)


class CredentialStorage:
    """File-based storage for togglcli credentials.

    Example:
        storage = CredentialStorage("/path/to/credentials.json")
        storage.persist("abc123")
        credentials = storage.read()
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the credential storage.

        Args:
            path: Path to the JSON credential file.
        """
        self._path = Path(path)
        self._lock_path = self._path.with_suffix(".lock")
        self._lock = FileLock(str(self._lock_path))

    @property
    def path(self) -> Path:
        """Get the credential file path."""
        return self._path

    def read(self) -> Credentials | None:
        """Read stored credentials.

        Returns:
            The stored credentials, or None if none were ever persisted.

        Raises:
            CredentialsError: If the file exists but cannot be read or parsed.
        """
        if not self._path.exists():
            return None

        try:
            with self._lock:
                content = self._path.read_text(encoding="utf-8")
            return Credentials.model_validate(json.loads(content))
        except (OSError, ValueError, ValidationError) as e:
            raise CredentialsError(f"Could not read credentials from {self._path}: {e}") from e

    def persist(self, api_token: str) -> None:
        """Store an API token, replacing any previous one.

        Args:
            api_token: Token to store.

        Raises:
            CredentialsError: If the file cannot be written.
        """
        content = json.dumps(Credentials(api_token=api_token).model_dump(mode="json"), indent=2)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                # Created owner-only so the token is never world-readable
                fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                # O_CREAT leaves the mode of an existing file alone
                os.chmod(self._path, 0o600)
        except OSError as e:
            raise CredentialsError(f"Could not write credentials to {self._path}: {e}") from e

        logger.debug(f"Saved credentials to {self._path}")
