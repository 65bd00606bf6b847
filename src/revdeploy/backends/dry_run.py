"""Dry-run decorator for remote stores.

Wraps any RemoteStore so that reads reach the real target while writes and
deletes are only logged.
"""

from __future__ import annotations

import logging

from revdeploy.backends.base import RemoteStore

logger = logging.getLogger(__name__)


class DryRunBackend(RemoteStore):
    """Remote store that never modifies the wrapped target."""

    def __init__(self, inner: RemoteStore) -> None:
        """Initialize the wrapper.

        Args:
            inner: Backend receiving the forwarded reads.
        """
        self._inner = inner

    @property
    def inner(self) -> RemoteStore:
        """Return the wrapped backend."""
        return self._inner

    @property
    def location(self) -> str:
        """Return the wrapped backend's location."""
        return f"{self._inner.location} (dry run)"

    def read(self, path: str) -> bytes:
        """Read from the wrapped backend."""
        return self._inner.read(path)

    def write(self, path: str, data: bytes) -> None:
        """Log the write without performing it."""
        logger.debug(f"Dry run: would write {path} ({len(data)} bytes)")

    def delete(self, path: str) -> None:
        """Log the deletion without performing it."""
        logger.debug(f"Dry run: would delete {path}")

    def delete_best_effort(self, path: str) -> None:
        """Log the deletion without performing it."""
        logger.debug(f"Dry run: would delete {path} if present")

    def close(self) -> None:
        """Close the wrapped backend."""
        self._inner.close()
