"""Remote store abstraction.

This module provides:
- RemoteStore: Abstract interface for deployment targets
- BackendError, MissingFileError: Exception classes
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import TracebackType

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when the remote store fails to complete an operation."""


class MissingFileError(BackendError):
    """Raised when a remote file does not exist."""


class RemoteStore(ABC):
    """Abstract interface for a remote file store.

    Paths are relative to the deployment root of the store and always use
    forward slashes.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Return a human-readable description of the deployment target."""

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Read a remote file.

        Args:
            path: Relative path of the file.

        Returns:
            File content.

        Raises:
            MissingFileError: If the file doesn't exist.
            BackendError: On any other failure.
        """

    @abstractmethod
    def write(self, path: str, data: bytes) -> None:
        """Create or overwrite a remote file.

        Intermediate directories are created as needed.

        Args:
            path: Relative path of the file.
            data: File content.

        Raises:
            BackendError: If the file cannot be written.
        """

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete a remote file.

        Args:
            path: Relative path of the file.

        Raises:
            MissingFileError: If the file doesn't exist.
            BackendError: On any other failure.
        """

    def delete_best_effort(self, path: str) -> None:
        """Delete a remote file, ignoring any failure."""
        try:
            self.delete(path)
        except BackendError as e:
            logger.debug(f"Could not delete {path}: {e}")

    def close(self) -> None:  # noqa: B027
        """Release the connection to the remote store."""

    def __enter__(self) -> RemoteStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def split_parents(path: str) -> list[str]:
    """Return the parent directories of a relative path, shallowest first.

    >>> split_parents("a/b/c.txt")
    ['a', 'a/b']
    """
    parts = path.strip("/").split("/")[:-1]
    return ["/".join(parts[: i + 1]) for i in range(len(parts))]
