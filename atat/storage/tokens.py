"""Persistence of the OAuth access token."""

from pathlib import Path
from typing import Protocol

import structlog

from atat.utils.constants import TOKEN_FILENAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class TokenStorage(Protocol):
    """Load, save, and delete the access token."""

    def load(self) -> str | None:
        """Return the stored token, or None when nothing is stored."""
        ...

    def save(self, token: str) -> None:
        """Persist the token."""
        ...

    def delete(self) -> None:
        """Remove the stored token, if any."""
        ...


class FileTokenStorage:
    """Stores the token as plain text in the atat home directory."""

    def __init__(self, home: Path) -> None:
        """Initialize the storage rooted at `home` (usually ~/.atat)."""
        self.path = home / TOKEN_FILENAME

    def load(self) -> str | None:
        """Return the stored token, or None when the token file does not exist."""
        if not self.path.exists():
            return None
        token = self.path.read_text(encoding="utf-8").strip()
        return token or None

    def save(self, token: str) -> None:
        """Write the token, creating the home directory and restricting the file to the owner."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        self.path.chmod(0o600)
        logger.info("Saved access token", path=str(self.path))

    def delete(self) -> None:
        """Remove the token file if it exists."""
        if self.path.exists():
            self.path.unlink()
            logger.info("Deleted access token", path=str(self.path))
