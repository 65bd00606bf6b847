"""Deployment plans.

This module provides:
- DeploymentPlan: Base class for a deployment strategy
- IncrementalPlan: Deploy the diff since the last deployed revision
- FullPlan: Upload every tracked file
- read_remote_revision, select_plan: Strategy selection

Selection rule:
| Remote revision marker | Plan            | Marker rewritten         |
|------------------------|-----------------|--------------------------|
| present                | IncrementalPlan | unless already at target |
| missing                | FullPlan        | always                   |
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

from revdeploy.backends.base import BackendError, MissingFileError
from revdeploy.core.types import DeployResult, PlanKind

if TYPE_CHECKING:
    from collections.abc import Set

    from revdeploy.backends.base import RemoteStore
    from revdeploy.core.config import DeployOptions
    from revdeploy.deploy.exclude import ExcludeFilter
    from revdeploy.git.tree import Diff

logger = logging.getLogger(__name__)

# Files some hosting providers drop into a freshly created web root.
JUNK_FILES = ("index.html", "gdform.php")


class SourceTree(Protocol):
    """What a plan needs from a revision snapshot."""

    @property
    def revision(self) -> str: ...

    def files(self) -> Set[str]: ...

    def show(self, path: str) -> bytes: ...

    def diff(self, from_revision: str) -> Diff: ...


class DeploymentPlan(ABC):
    """A deployment strategy selected once per run."""

    kind: PlanKind

    def __init__(
        self,
        tree: SourceTree,
        excludes: ExcludeFilter,
        log: logging.Logger | None = None,
    ) -> None:
        self._tree = tree
        self._excludes = excludes
        self._log = log or logger

    @property
    def from_revision(self) -> str | None:
        """Return the revision currently deployed, if known."""
        return None

    @property
    def to_revision(self) -> str:
        """Return the revision being deployed."""
        return self._tree.revision

    def new_result(self, dry_run: bool = False) -> DeployResult:
        """Create an empty result for this plan."""
        return DeployResult(
            plan=self.kind,
            from_revision=self.from_revision,
            to_revision=self.to_revision,
            dry_run=dry_run,
        )

    @abstractmethod
    def execute(self, backend: RemoteStore, result: DeployResult) -> None:
        """Apply the plan to the backend, recording actions in result."""

    @abstractmethod
    def should_write_revision(self) -> bool:
        """Whether the revision marker must be rewritten after this plan."""

    def _upload(self, backend: RemoteStore, path: str, result: DeployResult) -> None:
        if self._excludes.is_excluded(path):
            self._log.debug(f"Skipping file: {path}")
            result.skipped.append(path)
            return
        self._log.debug(f"Uploading file: {path}")
        backend.write(path, self._tree.show(path))
        result.uploaded.append(path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.from_revision} -> {self.to_revision})"


class IncrementalPlan(DeploymentPlan):
    """Deploy only what changed since the revision recorded remotely."""

    kind = PlanKind.INCREMENTAL

    def __init__(
        self,
        tree: SourceTree,
        diff: Diff,
        excludes: ExcludeFilter,
        log: logging.Logger | None = None,
    ) -> None:
        super().__init__(tree, excludes, log)
        self._diff = diff

    @property
    def diff(self) -> Diff:
        """Return the diff driving this plan."""
        return self._diff

    @property
    def from_revision(self) -> str:
        """Return the revision recorded on the remote side."""
        return self._diff.from_revision

    @property
    def to_revision(self) -> str:
        """Return the revision being deployed."""
        return self._diff.to_revision

    def revisions_match(self) -> bool:
        """Whether the remote side is already at the target revision."""
        return self.from_revision == self.to_revision

    def execute(self, backend: RemoteStore, result: DeployResult) -> None:
        """Upload changed files and delete removed ones."""
        if self.revisions_match() or not self._diff.any():
            self._log.debug("No changes to deploy")
            return

        self.prepare_host(backend)

        for path in sorted(self._diff.changed):
            self._upload(backend, path, result)

        for path in sorted(self._diff.deleted):
            if self._excludes.is_excluded(path):
                self._log.debug(f"Skipping file: {path}")
                result.skipped.append(path)
                continue
            self._log.debug(f"Deleting file: {path}")
            backend.delete(path)
            result.deleted.append(path)

    def prepare_host(self, backend: RemoteStore) -> None:
        """Delete placeholder files created by hosting providers."""
        self._log.debug("Deleting junk files created by hosting providers")
        for path in JUNK_FILES:
            if not self._excludes.is_excluded(path):
                backend.delete_best_effort(path)

    def should_write_revision(self) -> bool:
        return not self.revisions_match()


class FullPlan(DeploymentPlan):
    """Upload every tracked file; nothing is deleted."""

    kind = PlanKind.FULL

    def execute(self, backend: RemoteStore, result: DeployResult) -> None:
        """Upload the whole tree."""
        for path in sorted(self._tree.files()):
            self._upload(backend, path, result)

    def should_write_revision(self) -> bool:
        return True


def read_remote_revision(backend: RemoteStore, revision_file: str) -> str | None:
    """Read the revision marker from the backend.

    Args:
        backend: Remote store to read from.
        revision_file: Remote path of the marker.

    Returns:
        The recorded revision with trailing whitespace stripped, or None when
        no marker exists.

    Raises:
        BackendError: On any failure other than a missing marker, including a
            marker that is not valid UTF-8.
    """
    try:
        data = backend.read(revision_file)
    except MissingFileError:
        return None
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BackendError(f"Revision marker {revision_file} is corrupt: {e}") from e
    return text.rstrip() or None


def select_plan(
    tree: SourceTree,
    backend: RemoteStore,
    options: DeployOptions,
    excludes: ExcludeFilter,
    log: logging.Logger | None = None,
) -> DeploymentPlan:
    """Choose between an incremental and a full deployment.

    Returns:
        IncrementalPlan when a revision marker exists, FullPlan otherwise.

    Raises:
        BackendError: If the marker cannot be read for a reason other than
            being absent.
        GitCommandError: If the recorded revision is unknown to the repository.
    """
    log = log or logger
    remote_revision = read_remote_revision(backend, options.revision_file)
    if remote_revision is None:
        log.info("No remote revision found, deploying every file")
        return FullPlan(tree, excludes, log)

    log.info(f"Remote revision: {remote_revision}")
    return IncrementalPlan(tree, tree.diff(remote_revision), excludes, log)
