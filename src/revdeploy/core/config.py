"""Deployment options shared by the engine and the CLI.

This module defines the immutable per-run configuration consumed by the
deployment engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_REVISION = "HEAD"
DEFAULT_REVISION_FILE = ".revision"


def _as_tuple(value: Iterable[str] | str | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class DeployOptions:
    """Options resolved once per deployment run.

    Attributes:
        exclude: Path prefixes; a tracked file starting with any of them is
            neither uploaded nor deleted.
        additional: Local files uploaded verbatim on every run, outside of
            version control.
        revision: Revision to deploy (any ref git can resolve).
        revision_file: Remote path of the revision marker.
        dry_run: When set, nothing on the remote side is modified.
    """

    exclude: tuple[str, ...] = ()
    additional: tuple[str, ...] = ()
    revision: str = DEFAULT_REVISION
    revision_file: str = DEFAULT_REVISION_FILE
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Normalize list-like fields to tuples."""
        object.__setattr__(self, "exclude", _as_tuple(self.exclude))
        object.__setattr__(self, "additional", _as_tuple(self.additional))
        if not self.revision:
            raise ValueError("revision must not be empty")
        if not self.revision_file:
            raise ValueError("revision_file must not be empty")

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **overrides: Any) -> DeployOptions:
        """Build options from a loaded configuration mapping.

        Overrides whose value is None are ignored, so CLI options that were
        not given fall back to the configuration file.

        Args:
            config: Parsed configuration (see revdeploy.cli.config).
            **overrides: Values taking precedence over the configuration.

        Returns:
            DeployOptions for the run.
        """
        values: dict[str, Any] = {
            "exclude": config.get("exclude") or (),
            "additional": config.get("additional") or (),
            "revision_file": config.get("revision_file") or DEFAULT_REVISION_FILE,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
