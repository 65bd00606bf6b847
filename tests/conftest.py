"""Shared fixtures for revdeploy tests.

Provides:
- MemoryBackend: In-memory RemoteStore recording every operation
- FakeTree: RevisionTree stand-in with a fixed file set and diffs
- GitRepoBuilder: Real git repository in tmp_path (skipped without git)
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from revdeploy.backends.base import MissingFileError, RemoteStore
from revdeploy.git.repository import GitCommandError
from revdeploy.git.tree import Diff


class MemoryBackend(RemoteStore):
    """RemoteStore keeping files in a dict and logging operations."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.files: dict[str, bytes] = dict(files or {})
        self.ops: list[tuple[str, str]] = []
        self.closed = False

    @property
    def location(self) -> str:
        return "Memory"

    def read(self, path: str) -> bytes:
        self.ops.append(("read", path))
        if path not in self.files:
            raise MissingFileError(f"File not found: {path}")
        return self.files[path]

    def write(self, path: str, data: bytes) -> None:
        self.ops.append(("write", path))
        self.files[path] = data

    def delete(self, path: str) -> None:
        self.ops.append(("delete", path))
        if path not in self.files:
            raise MissingFileError(f"File not found: {path}")
        del self.files[path]

    def delete_best_effort(self, path: str) -> None:
        self.ops.append(("delete_best_effort", path))
        self.files.pop(path, None)

    def close(self) -> None:
        self.closed = True

    @property
    def mutations(self) -> list[tuple[str, str]]:
        """Operations other than reads."""
        return [op for op in self.ops if op[0] != "read"]


class FakeTree:
    """Revision snapshot with in-memory content."""

    def __init__(
        self,
        revision: str,
        files: dict[str, bytes],
        changed: set[str] | None = None,
        deleted: set[str] | None = None,
    ) -> None:
        self.revision = revision
        self._files = files
        self._changed = changed or set()
        self._deleted = deleted or set()
        self.repository = MagicMock()
        self.repository.cherry.return_value = []
        self.diff_calls: list[str] = []

    def files(self) -> frozenset[str]:
        return frozenset(self._files)

    def show(self, path: str) -> bytes:
        if path not in self._files:
            raise FileNotFoundError(f"{path} not found at revision {self.revision}")
        return self._files[path]

    def diff(self, from_revision: str) -> Diff:
        self.diff_calls.append(from_revision)
        if from_revision == "unknown":
            raise GitCommandError(["rev-parse", from_revision], 128, "bad revision")
        if from_revision == self.revision:
            return Diff(from_revision, self.revision)
        return Diff(
            from_revision,
            self.revision,
            frozenset(self._changed),
            frozenset(self._deleted),
        )


class GitRepoBuilder:
    """Build a real git repository commit by commit."""

    def __init__(self, path: Path) -> None:
        self.path = path
        path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.name", "Test")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.path), *args],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, files: dict[str, str | bytes | None], message: str = "commit") -> str:
        """Write (or delete, for None values) files and commit them.

        Returns:
            The new commit id.
        """
        for name, content in files.items():
            target = self.path / name
            if content is None:
                self.git("rm", "-q", name)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
            self.git("add", name)
        self.git("commit", "-q", "-m", message)
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def memory_backend() -> MemoryBackend:
    """Empty in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def make_backend() -> Callable[..., MemoryBackend]:
    """Factory for in-memory backends with initial content."""
    return MemoryBackend


@pytest.fixture
def make_tree() -> Callable[..., FakeTree]:
    """Factory for fake revision trees."""
    return FakeTree


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepoBuilder:
    """Empty git repository (test skipped if git is not installed)."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    return GitRepoBuilder(tmp_path / "repo")


def ops_of(backend: Any, kind: str) -> list[str]:
    """Paths touched by one kind of operation."""
    return [path for op, path in backend.ops if op == kind]


@pytest.fixture
def ops() -> Callable[[Any, str], list[str]]:
    """Helper listing paths touched by one kind of backend operation."""
    return ops_of
