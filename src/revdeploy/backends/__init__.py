"""Backends module - Remote stores deployments are written to."""

from revdeploy.backends.base import BackendError, MissingFileError, RemoteStore
from revdeploy.backends.dry_run import DryRunBackend
from revdeploy.backends.factory import create_backend
from revdeploy.backends.local import LocalBackend

__all__ = [
    # Interface and errors
    "BackendError",
    "MissingFileError",
    "RemoteStore",
    # Implementations
    "DryRunBackend",
    "LocalBackend",
    # Factory
    "create_backend",
]
