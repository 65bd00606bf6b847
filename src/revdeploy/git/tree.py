"""Revision snapshots and diffs.

This module provides:
- RevisionTree: Content of the repository at one revision
- Diff: Changed and deleted paths between two revisions
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from revdeploy.core.config import DEFAULT_REVISION

if TYPE_CHECKING:
    from revdeploy.git.repository import GitRepository


@dataclass(frozen=True)
class Diff:
    """Paths that differ between two revisions.

    A path is either in changed (added or modified) or in deleted, never both.
    """

    from_revision: str
    to_revision: str
    changed: frozenset[str] = field(default_factory=frozenset)
    deleted: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate the diff invariant."""
        object.__setattr__(self, "changed", frozenset(self.changed))
        object.__setattr__(self, "deleted", frozenset(self.deleted))
        overlap = self.changed & self.deleted
        if overlap:
            raise ValueError(f"Paths both changed and deleted: {sorted(overlap)}")

    @classmethod
    def compute(cls, repository: GitRepository, from_ref: str, to_ref: str) -> Diff:
        """Compute the diff between two refs.

        Both refs must be resolvable; otherwise GitCommandError is raised.
        """
        from_revision = repository.resolve(from_ref)
        to_revision = repository.resolve(to_ref)
        changed, deleted = repository.diff(from_revision, to_revision)
        return cls(from_revision, to_revision, frozenset(changed), frozenset(deleted))

    def any(self) -> bool:
        """Whether the diff contains anything to deploy."""
        return bool(self.changed or self.deleted)


class RevisionTree:
    """Snapshot of a repository at a resolved revision."""

    def __init__(self, repository: GitRepository, revision: str = DEFAULT_REVISION) -> None:
        """Resolve the revision and bind the snapshot to it.

        Args:
            repository: Repository to read from.
            revision: Ref to resolve (default: HEAD).

        Raises:
            GitCommandError: If the ref cannot be resolved.
        """
        self._repository = repository
        self._revision = repository.resolve(revision)
        self._files: frozenset[str] | None = None

    @property
    def repository(self) -> GitRepository:
        """Return the repository this tree belongs to."""
        return self._repository

    @property
    def revision(self) -> str:
        """Return the full commit id of this snapshot."""
        return self._revision

    def files(self) -> frozenset[str]:
        """Return every tracked path at this revision."""
        if self._files is None:
            self._files = frozenset(self._repository.list_files(self._revision))
        return self._files

    def show(self, path: str) -> bytes:
        """Return the content of a tracked file.

        Raises:
            FileNotFoundError: If the path does not exist at this revision.
        """
        return self._repository.show(self._revision, path)

    def diff(self, from_revision: str) -> Diff:
        """Compute the diff from an older revision to this snapshot."""
        return Diff.compute(self._repository, from_revision, self._revision)

    def __repr__(self) -> str:
        return f"RevisionTree({self._repository.path}, {self._revision[:12]})"
