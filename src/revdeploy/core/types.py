"""Shared types for revdeploy.

This module defines the plan kinds and the result objects returned by the
deployment engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PlanKind(str, Enum):
    """Strategy chosen for a deployment run."""

    INCREMENTAL = "incremental"
    FULL = "full"


@dataclass
class DeployResult:
    """Outcome of a deployment run.

    Paths are recorded in the order the operations were issued. In dry-run
    mode they describe what would have been done.
    """

    plan: PlanKind
    to_revision: str
    from_revision: str | None = None
    uploaded: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    additional: list[str] = field(default_factory=list)
    revision_written: bool = False
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        """Whether the tracked content on the remote side was modified."""
        return bool(self.uploaded or self.deleted)


@dataclass(frozen=True)
class RevisionStatus:
    """Local and remote revisions for a deployment target."""

    local_revision: str
    remote_revision: str | None

    @property
    def up_to_date(self) -> bool:
        """Whether the remote side already carries the local revision."""
        return self.remote_revision == self.local_revision
