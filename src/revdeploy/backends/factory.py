"""Backend construction from configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from revdeploy.backends.base import RemoteStore


def _require(config: Mapping[str, Any], key: str, scheme: str) -> Any:
    value = config.get(key)
    if not value:
        raise ValueError(f"{scheme} backend requires '{key}' configuration")
    return value


def create_backend(config: Mapping[str, Any]) -> RemoteStore:
    """Factory function to create a backend from configuration.

    Args:
        config: Backend configuration dict with keys:
            - scheme: "local" (alias "file"), "s3", "sftp" or "ftp"
            - For local: path
            - For S3: bucket, prefix, endpoint_url, access_key, secret_key, region
            - For SFTP: host, path, username, password, port, key_filename
            - For FTP: host, path, username, password, port, passive

    Returns:
        Configured RemoteStore instance.

    Raises:
        ValueError: If the scheme is unknown or required keys are missing.
    """
    scheme = config.get("scheme")
    if not scheme:
        raise ValueError("Backend configuration requires 'scheme'")

    if scheme in ("local", "file"):
        from revdeploy.backends.local import LocalBackend

        return LocalBackend(_require(config, "path", scheme))

    if scheme == "s3":
        from revdeploy.backends.s3 import S3Backend

        return S3Backend(
            bucket=_require(config, "bucket", scheme),
            prefix=config.get("prefix") or "",
            endpoint_url=config.get("endpoint_url"),
            access_key=config.get("access_key"),
            secret_key=config.get("secret_key"),
            region=config.get("region") or "us-east-1",
        )

    if scheme == "sftp":
        from revdeploy.backends.sftp import SFTPBackend

        return SFTPBackend(
            host=_require(config, "host", scheme),
            path=config.get("path") or ".",
            username=config.get("username"),
            password=config.get("password"),
            port=int(config.get("port") or 22),
            key_filename=config.get("key_filename"),
        )

    if scheme == "ftp":
        from revdeploy.backends.ftp import FTPBackend

        return FTPBackend(
            host=_require(config, "host", scheme),
            path=config.get("path") or "",
            username=config.get("username") or "anonymous",
            password=config.get("password") or "",
            port=int(config.get("port") or 21),
            passive=bool(config.get("passive", True)),
        )

    raise ValueError(f"Unknown backend scheme: {scheme}")
