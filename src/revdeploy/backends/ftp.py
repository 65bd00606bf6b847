"""FTP backend (ftplib)."""

from __future__ import annotations

import ftplib
import io
import logging
import posixpath

from revdeploy.backends.base import BackendError, MissingFileError, RemoteStore, split_parents

logger = logging.getLogger(__name__)


class FTPBackend(RemoteStore):
    """Remote store reached over plain FTP."""

    def __init__(
        self,
        host: str,
        path: str = "",
        username: str = "anonymous",
        password: str = "",
        port: int = 21,
        passive: bool = True,
        timeout: float = 30.0,
    ) -> None:
        """Initialize FTP backend.

        Args:
            host: FTP server hostname.
            path: Remote deployment root.
            username: Login name (default: anonymous).
            password: Password.
            port: FTP port (default: 21).
            passive: Use passive mode (default: True).
            timeout: Connection timeout in seconds.
        """
        self._host = host
        self._root = path.rstrip("/")
        self._username = username
        self._password = password
        self._port = port
        self._passive = passive
        self._timeout = timeout
        self._ftp: ftplib.FTP | None = None

    @property
    def location(self) -> str:
        """Return the FTP target."""
        return f"FTP: {self._username}@{self._host}:{self._port}/{self._root.lstrip('/')}"

    def _connect(self) -> ftplib.FTP:
        """Return an open session, connecting if needed."""
        if self._ftp is not None:
            return self._ftp

        logger.debug(f"Connecting to {self._host}:{self._port}")
        ftp = ftplib.FTP(timeout=self._timeout)
        try:
            ftp.connect(self._host, self._port)
            ftp.login(self._username, self._password)
            ftp.set_pasv(self._passive)
        except (ftplib.Error, OSError) as e:
            ftp.close()
            raise BackendError(f"Could not connect to {self._host}: {e}") from e
        self._ftp = ftp
        return ftp

    def _remote(self, path: str) -> str:
        path = path.lstrip("/")
        return posixpath.join(self._root, path) if self._root else path

    def read(self, path: str) -> bytes:
        """Download a remote file."""
        ftp = self._connect()
        buffer = io.BytesIO()
        try:
            ftp.retrbinary(f"RETR {self._remote(path)}", buffer.write)
        except ftplib.error_perm as e:
            if str(e).startswith("550"):
                raise MissingFileError(f"File not found: {path}") from e
            raise BackendError(f"Could not read {path}: {e}") from e
        except (ftplib.Error, OSError) as e:
            raise BackendError(f"Could not read {path}: {e}") from e
        return buffer.getvalue()

    def write(self, path: str, data: bytes) -> None:
        """Upload a file, creating remote directories as needed."""
        ftp = self._connect()
        try:
            for parent in split_parents(path):
                self._mkdir(ftp, self._remote(parent))
            ftp.storbinary(f"STOR {self._remote(path)}", io.BytesIO(data))
        except (ftplib.Error, OSError) as e:
            raise BackendError(f"Could not write {path}: {e}") from e

    def _mkdir(self, ftp: ftplib.FTP, remote: str) -> None:
        try:
            ftp.mkd(remote)
            logger.debug(f"Created remote directory: {remote}")
        except ftplib.error_perm as e:
            # 550: already exists
            if not str(e).startswith("550"):
                raise

    def delete(self, path: str) -> None:
        """Delete a remote file and prune directories left empty."""
        ftp = self._connect()
        try:
            ftp.delete(self._remote(path))
        except ftplib.error_perm as e:
            if str(e).startswith("550"):
                raise MissingFileError(f"File not found: {path}") from e
            raise BackendError(f"Could not delete {path}: {e}") from e
        except (ftplib.Error, OSError) as e:
            raise BackendError(f"Could not delete {path}: {e}") from e

        for parent in reversed(split_parents(path)):
            try:
                ftp.rmd(self._remote(parent))
            except ftplib.error_perm:
                # Directory not empty
                break
            logger.debug(f"Removed empty directory: {parent}")

    def close(self) -> None:
        """Log out and close the connection."""
        if self._ftp is None:
            return
        try:
            self._ftp.quit()
        except (ftplib.Error, OSError):
            self._ftp.close()
        self._ftp = None
