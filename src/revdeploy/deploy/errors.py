"""Exceptions raised by the deployment engine."""

from __future__ import annotations


class DeployError(Exception):
    """Base exception for deployment errors."""


class FastForwardError(DeployError):
    """The deployed history has commits not yet incorporated upstream.

    Attributes:
        commits: Outstanding commit ids, oldest first.
    """

    def __init__(self, commits: list[str]) -> None:
        self.commits = commits
        super().__init__(
            f"{len(commits)} commit(s) not incorporated upstream; "
            "push or merge before deploying"
        )
