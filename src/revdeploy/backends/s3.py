"""S3-compatible backend (AWS, OVH, MinIO, etc.)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from revdeploy.backends.base import BackendError, MissingFileError, RemoteStore

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Backend(RemoteStore):
    """Remote store backed by an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
    ) -> None:
        """Initialize S3 backend.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix acting as the deployment root.
            endpoint_url: Custom endpoint URL (for OVH, MinIO, etc.).
            access_key: AWS access key ID.
            secret_key: AWS secret access key.
            region: AWS region (default: us-east-1).
        """
        import boto3

        self._bucket = bucket
        self._prefix = prefix.strip("/")
        self._endpoint_url = endpoint_url
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    @property
    def location(self) -> str:
        """Return the S3 bucket location."""
        root = f"{self._bucket}/{self._prefix}" if self._prefix else self._bucket
        if self._endpoint_url:
            return f"S3: {self._endpoint_url}/{root}"
        return f"S3: s3://{root}"

    def _key(self, path: str) -> str:
        """Get the S3 key for a relative path."""
        path = path.lstrip("/")
        return f"{self._prefix}/{path}" if self._prefix else path

    @staticmethod
    def _is_missing(error: Any) -> bool:
        return error.response.get("Error", {}).get("Code") in _MISSING_CODES

    def read(self, path: str) -> bytes:
        """Read an object."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            response = self._client.get_object(Bucket=self._bucket, Key=self._key(path))
            body: bytes = response["Body"].read()
            return body
        except ClientError as e:
            if self._is_missing(e):
                raise MissingFileError(f"File not found: {path}") from e
            raise BackendError(f"Could not read {path}: {e}") from e
        except BotoCoreError as e:
            raise BackendError(f"Could not read {path}: {e}") from e

    def write(self, path: str, data: bytes) -> None:
        """Create or overwrite an object."""
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self._client.put_object(Bucket=self._bucket, Key=self._key(path), Body=data)
        except (BotoCoreError, ClientError) as e:
            raise BackendError(f"Could not write {path}: {e}") from e

    def delete(self, path: str) -> None:
        """Delete an object.

        S3 deletes are idempotent, so existence is checked first to report
        missing files like the other backends.
        """
        from botocore.exceptions import BotoCoreError, ClientError

        key = self._key(path)
        try:
            self._client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if self._is_missing(e):
                raise MissingFileError(f"File not found: {path}") from e
            raise BackendError(f"Could not delete {path}: {e}") from e
        except BotoCoreError as e:
            raise BackendError(f"Could not delete {path}: {e}") from e

        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise BackendError(f"Could not delete {path}: {e}") from e
