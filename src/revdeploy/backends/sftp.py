"""SFTP backend over SSH (paramiko)."""

from __future__ import annotations

import io
import logging
import posixpath
from typing import TYPE_CHECKING

from revdeploy.backends.base import BackendError, MissingFileError, RemoteStore, split_parents

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class SFTPBackend(RemoteStore):
    """Remote store reached over SFTP.

    The connection is opened lazily on the first operation and kept for the
    lifetime of the backend.
    """

    def __init__(
        self,
        host: str,
        path: str,
        username: str | None = None,
        password: str | None = None,
        port: int = 22,
        key_filename: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize SFTP backend.

        Args:
            host: SSH server hostname.
            path: Remote deployment root (absolute or relative to the login
                directory).
            username: Login name.
            password: Password (optional with key authentication).
            port: SSH port (default: 22).
            key_filename: Private key file.
            timeout: Connection timeout in seconds.
        """
        self._host = host
        self._root = path.rstrip("/") or "/"
        self._username = username
        self._password = password
        self._port = port
        self._key_filename = key_filename
        self._timeout = timeout
        self._ssh: Any = None
        self._sftp: Any = None

    @property
    def location(self) -> str:
        """Return the SFTP target."""
        user = f"{self._username}@" if self._username else ""
        return f"SFTP: {user}{self._host}:{self._port}{self._root}"

    def _connect(self) -> Any:
        """Return an open SFTP session, connecting if needed."""
        if self._sftp is not None:
            return self._sftp

        import paramiko

        logger.debug(f"Connecting to {self._host}:{self._port}")
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(
                hostname=self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                key_filename=self._key_filename,
                timeout=self._timeout,
            )
            self._sftp = client.open_sftp()
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise BackendError(f"Could not connect to {self._host}: {e}") from e
        self._ssh = client
        return self._sftp

    def _remote(self, path: str) -> str:
        return posixpath.join(self._root, path.lstrip("/"))

    def read(self, path: str) -> bytes:
        """Read a remote file."""
        from paramiko import SSHException

        sftp = self._connect()
        buffer = io.BytesIO()
        try:
            sftp.getfo(self._remote(path), buffer)
        except FileNotFoundError as e:
            raise MissingFileError(f"File not found: {path}") from e
        except (SSHException, OSError) as e:
            raise BackendError(f"Could not read {path}: {e}") from e
        return buffer.getvalue()

    def write(self, path: str, data: bytes) -> None:
        """Upload a file, creating remote directories as needed."""
        from paramiko import SSHException

        sftp = self._connect()
        try:
            for parent in split_parents(path):
                self._mkdir(sftp, self._remote(parent))
            sftp.putfo(io.BytesIO(data), self._remote(path))
        except (SSHException, OSError) as e:
            raise BackendError(f"Could not write {path}: {e}") from e

    def _mkdir(self, sftp: Any, remote: str) -> None:
        try:
            sftp.stat(remote)
        except FileNotFoundError:
            logger.debug(f"Creating remote directory: {remote}")
            sftp.mkdir(remote)

    def delete(self, path: str) -> None:
        """Delete a remote file and prune directories left empty."""
        from paramiko import SSHException

        sftp = self._connect()
        try:
            sftp.remove(self._remote(path))
        except FileNotFoundError as e:
            raise MissingFileError(f"File not found: {path}") from e
        except (SSHException, OSError) as e:
            raise BackendError(f"Could not delete {path}: {e}") from e

        for parent in reversed(split_parents(path)):
            try:
                sftp.rmdir(self._remote(parent))
            except (SSHException, OSError):
                # Directory not empty
                break
            logger.debug(f"Removed empty directory: {parent}")

    def close(self) -> None:
        """Close the SFTP session and SSH connection."""
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        if self._ssh is not None:
            self._ssh.close()
            self._ssh = None
