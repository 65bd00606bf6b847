"""Local filesystem backend.

Deploys into a directory on the local machine: a mounted share, a web root
on the same host, or a scratch directory for development and testing.
"""

from __future__ import annotations

import logging
from pathlib import Path

from revdeploy.backends.base import BackendError, MissingFileError, RemoteStore

logger = logging.getLogger(__name__)


class LocalBackend(RemoteStore):
    """Remote store backed by a local directory."""

    def __init__(self, base_path: Path | str) -> None:
        """Initialize local backend.

        Args:
            base_path: Deployment root; created if missing.
        """
        self._base_path = Path(base_path).expanduser().resolve()
        self._base_path.mkdir(parents=True, exist_ok=True)

    @property
    def location(self) -> str:
        """Return the local deployment path."""
        return f"Local filesystem: {self._base_path}"

    def _path(self, path: str) -> Path:
        """Resolve a relative path inside the deployment root.

        Raises:
            BackendError: If the path escapes the deployment root.
        """
        full = (self._base_path / path.lstrip("/")).resolve()
        if not full.is_relative_to(self._base_path):
            raise BackendError(f"Path outside deployment root: {path}")
        return full

    def read(self, path: str) -> bytes:
        """Read a file from the deployment root."""
        full = self._path(path)
        try:
            return full.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise MissingFileError(f"File not found: {path}") from e
        except OSError as e:
            raise BackendError(f"Could not read {path}: {e}") from e

    def write(self, path: str, data: bytes) -> None:
        """Write a file, creating parent directories."""
        full = self._path(path)
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(data)
        except OSError as e:
            raise BackendError(f"Could not write {path}: {e}") from e

    def delete(self, path: str) -> None:
        """Delete a file and prune directories left empty."""
        full = self._path(path)
        try:
            full.unlink()
        except FileNotFoundError as e:
            raise MissingFileError(f"File not found: {path}") from e
        except OSError as e:
            raise BackendError(f"Could not delete {path}: {e}") from e
        self._prune(full.parent)

    def _prune(self, directory: Path) -> None:
        """Remove empty directories up to (not including) the deployment root."""
        while directory != self._base_path and directory.is_relative_to(self._base_path):
            try:
                directory.rmdir()
            except OSError:
                return
            logger.debug(f"Removed empty directory: {directory}")
            directory = directory.parent
