"""Access to a git repository through GitPython.

This module provides:
- GitRepository: Repository wrapper reading commits, trees and blobs
- GitError, GitCommandError: Exception classes

Paths are always relative to the top of the working tree, whichever
directory of the repository the wrapper was opened from.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from git import Commit, Repo

logger = logging.getLogger(__name__)

# Tree entry mode of a submodule
GITLINK_MODE = 0o160000


class GitError(Exception):
    """Base exception for repository errors."""


class GitCommandError(GitError):
    """A git command exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int | None, stderr: str) -> None:
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"git {' '.join(args)} failed: {detail}")


class GitRepository:
    """A git repository on the local filesystem.

    Usage:
        repo = GitRepository(".")
        head = repo.resolve("HEAD")
        changed, deleted = repo.diff("abc123", head)
    """

    def __init__(self, path: Path | str = ".") -> None:
        """Open the repository containing path.

        Args:
            path: Working copy (or any directory inside it) or bare repository.

        Raises:
            GitError: If the path does not exist or is not inside a repository.
        """
        from git import Repo
        from git.exc import InvalidGitRepositoryError, NoSuchPathError

        location = Path(path).expanduser().resolve()
        try:
            self._repo: Repo = Repo(location, search_parent_directories=True)
        except NoSuchPathError as e:
            raise GitError(f"Repository not found: {location}") from e
        except InvalidGitRepositoryError as e:
            raise GitError(f"Not a git repository: {location}") from e

        self._path = Path(self._repo.working_tree_dir or self._repo.git_dir)
        self._commits: dict[str, Commit] = {}

    @property
    def path(self) -> Path:
        """Return the top of the working tree (the git directory if bare)."""
        return self._path

    def run(self, *args: str) -> bytes:
        """Run a git command in the repository and return its standard output.

        Args:
            *args: Arguments passed to git.

        Returns:
            Standard output as bytes.

        Raises:
            GitCommandError: If git exits with a non-zero status or cannot be
                started.
        """
        from git import Git
        from git.exc import GitCommandError as CommandError

        cmd = [Git.GIT_PYTHON_GIT_EXECUTABLE or "git", *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            return self._repo.git.execute(cmd, stdout_as_string=False)
        except CommandError as e:
            status = e.status if isinstance(e.status, int) else None
            raise GitCommandError(list(args), status, str(e.stderr)) from e

    def resolve(self, ref: str) -> str:
        """Resolve a ref to a full commit id.

        Raises:
            GitCommandError: If the ref does not name a commit.
        """
        out = self.run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")
        return out.decode("ascii").strip()

    def _commit(self, revision: str) -> Commit:
        """Return the commit object for a revision.

        Commits are cached by full id, so symbolic refs are resolved on
        every call.
        """
        commit = self._commits.get(revision)
        if commit is None:
            commit = self._repo.commit(self.resolve(revision))
            self._commits[commit.hexsha] = commit
        return commit

    def list_files(self, revision: str) -> set[str]:
        """List every file tracked at a revision.

        Submodules are not listed.

        Args:
            revision: Commit id or ref.

        Returns:
            Set of paths relative to the repository root.
        """
        tree = self._commit(revision).tree
        return {item.path for item in tree.traverse() if item.type == "blob"}

    def show(self, revision: str, path: str) -> bytes:
        """Return the content of a file at a revision.

        Raises:
            FileNotFoundError: If the path is not a file at the revision.
        """
        tree = self._commit(revision).tree
        try:
            blob = tree / path
        except KeyError as e:
            raise FileNotFoundError(f"{path} not found at revision {revision}") from e
        if blob.type != "blob":
            raise FileNotFoundError(f"{path} is not a file at revision {revision}")
        return blob.data_stream.read()

    def diff(self, from_revision: str, to_revision: str) -> tuple[set[str], set[str]]:
        """Compute the paths that differ between two revisions.

        Renames are reported as a deletion plus an addition. Submodule
        entries are ignored.

        Args:
            from_revision: Older revision.
            to_revision: Newer revision.

        Returns:
            (changed, deleted) tuple of path sets.
        """
        from git.exc import GitCommandError as CommandError

        old = self._commit(from_revision)
        new = self._commit(to_revision)
        try:
            entries = old.diff(new)
        except CommandError as e:
            status = e.status if isinstance(e.status, int) else None
            raise GitCommandError(
                ["diff", from_revision, to_revision], status, str(e.stderr)
            ) from e

        changed: set[str] = set()
        deleted: set[str] = set()
        for entry in entries:
            if entry.change_type == "D":
                if entry.a_mode != GITLINK_MODE:
                    deleted.add(entry.a_path)
                continue
            if entry.renamed_file and entry.a_mode != GITLINK_MODE:
                deleted.add(entry.a_path)
            if entry.b_mode != GITLINK_MODE:
                changed.add(entry.b_path)
        # A path renamed away and replaced in the same diff is a change.
        return changed, deleted - changed

    def cherry(self, upstream: str | None = None) -> list[str]:
        """List local commits not yet incorporated upstream.

        Wraps ``git cherry``. Commits whose change already exists upstream
        (marked ``-``) are not reported.

        Args:
            upstream: Upstream ref (default: the tracked upstream branch).

        Returns:
            Commit ids, oldest first.

        Raises:
            GitCommandError: If git cannot inspect the history, e.g. when no
                upstream is configured.
        """
        args = ["cherry"]
        if upstream:
            args.append(upstream)
        out = self.run(*args).decode("utf-8")
        commits = []
        for line in out.splitlines():
            marker, _, commit = line.partition(" ")
            if marker == "+" and commit:
                commits.append(commit.strip())
        return commits
