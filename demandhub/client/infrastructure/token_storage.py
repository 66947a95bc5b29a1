"""
Token persistence utilities.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path  # noqa: TC003

logger = logging.getLogger(__name__)


class FileTokenStorage:
    """Keeps the raw bearer token in a single file; no file means logged out."""

    def __init__(self, file_path: Path):
        self.file_path = file_path

    def load(self) -> str | None:
        """Load the token from file."""
        try:
            with self.file_path.open() as f:
                token = f.read().strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        """Save the token to file, readable by the owner only."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(token)
        logger.debug("Token saved to %s", self.file_path)

    def clear(self) -> None:
        """Remove the token file."""
        try:
            self.file_path.unlink()
        except FileNotFoundError:
            return
        logger.debug("Token removed from %s", self.file_path)


class MemoryTokenStorage:
    """Token storage that lives only as long as the process."""

    def __init__(self, token: str | None = None):
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
