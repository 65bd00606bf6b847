"""Deployment engine coordinating a run.

This module provides:
- DeploymentEngine: Selects and executes a plan, then records the revision
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from revdeploy.backends.dry_run import DryRunBackend
from revdeploy.core.config import DeployOptions
from revdeploy.core.types import DeployResult, RevisionStatus
from revdeploy.deploy.errors import FastForwardError
from revdeploy.deploy.exclude import ExcludeFilter
from revdeploy.deploy.plans import read_remote_revision, select_plan
from revdeploy.git.repository import GitCommandError

if TYPE_CHECKING:
    from revdeploy.backends.base import RemoteStore
    from revdeploy.deploy.plans import DeploymentPlan
    from revdeploy.git.tree import RevisionTree

logger = logging.getLogger(__name__)

# Production config in the tree -> name the CMS loads it from.
PRODUCTION_CONFIGS = (
    ("wp-config.prod.php", "wp-config.php"),  # WordPress
    ("configuration.prod.php", "configuration.php"),  # Joomla
)


class DeploymentEngine:
    """Brings a remote store up to date with a revision tree.

    Usage:
        engine = DeploymentEngine(tree, backend, DeployOptions(exclude=("docs/",)))
        engine.validate()
        result = engine.deploy()
    """

    def __init__(
        self,
        tree: RevisionTree,
        backend: RemoteStore,
        options: DeployOptions | None = None,
        log: logging.Logger | None = None,
        local_root: Path | str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            tree: Snapshot of the revision to deploy.
            backend: Remote store to deploy to.
            options: Options for the run (default: DeployOptions()).
            log: Destination for progress messages (default: module logger).
            local_root: Directory additional files are read from
                (default: current directory).
        """
        self._tree = tree
        self._backend = backend
        self._options = options or DeployOptions()
        self._log = log or logger
        self._local_root = Path(local_root) if local_root is not None else None
        self._excludes = ExcludeFilter(self._options.exclude)

    @property
    def options(self) -> DeployOptions:
        """Return the options for this run."""
        return self._options

    def select_plan(self) -> DeploymentPlan:
        """Choose the plan for this run from the remote revision marker."""
        return select_plan(
            self._tree, self._backend, self._options, self._excludes, self._log
        )

    def deploy(self) -> DeployResult:
        """Run the deployment.

        The revision marker is written last, so a failure at any step leaves
        the previously recorded revision in place.

        Returns:
            DeployResult describing what was (or, in dry-run mode, would have
            been) done.

        Raises:
            BackendError: If a required remote operation fails.
            GitError: If the repository cannot be read.
            FileNotFoundError: If a tracked or additional file is missing.
        """
        plan = self.select_plan()
        backend = self._backend
        if self._options.dry_run:
            backend = DryRunBackend(backend)

        result = plan.new_result(dry_run=self._options.dry_run)
        self._log.info(f"Deploying {plan.to_revision} ({plan.kind.value}) to {backend.location}")

        plan.execute(backend, result)
        self.deploy_production_config(backend, result)
        self.deploy_additional(backend, result)

        if plan.should_write_revision():
            self.write_revision(backend)
            result.revision_written = True
        return result

    def write_revision(self, backend: RemoteStore | None = None) -> None:
        """Record the deployed revision on the remote side."""
        backend = backend or self._backend
        self._log.debug(f"Writing revision {self._tree.revision} to {self._options.revision_file}")
        backend.write(self._options.revision_file, self._tree.revision.encode("utf-8"))

    def deploy_production_config(self, backend: RemoteStore, result: DeployResult) -> None:
        """Install recognized CMS production configs under their live names."""
        files = self._tree.files()
        for source, target in PRODUCTION_CONFIGS:
            if source in files:
                self._log.debug(f"Writing CMS config file: {source} -> {target}")
                backend.write(target, self._tree.show(source))
                result.additional.append(target)

    def deploy_additional(self, backend: RemoteStore, result: DeployResult) -> None:
        """Upload files from outside version control.

        These bypass exclusion and are written on every run.
        """
        if not self._options.additional:
            self._log.debug("No additional files to deploy")
            return

        for name in self._options.additional:
            local = Path(name)
            if self._local_root is not None and not local.is_absolute():
                local = self._local_root / local
            remote = Path(name).as_posix().lstrip("/")
            self._log.debug(f"Uploading additional file: {remote}")
            backend.write(remote, local.read_bytes())
            result.additional.append(remote)

    def validate(self) -> None:
        """Check that the deployed history is incorporated upstream.

        If git cannot inspect the history (no upstream configured, detached
        HEAD, ...) the check is inconclusive and passes.

        Raises:
            FastForwardError: If git reports commits not yet incorporated.
        """
        try:
            outstanding = self._tree.repository.cherry()
        except GitCommandError as e:
            self._log.debug(f"Fast-forward check inconclusive, continuing: {e}")
            return
        if outstanding:
            raise FastForwardError(outstanding)

    def status(self) -> RevisionStatus:
        """Return the local and remote revisions."""
        return RevisionStatus(
            local_revision=self._tree.revision,
            remote_revision=read_remote_revision(self._backend, self._options.revision_file),
        )
