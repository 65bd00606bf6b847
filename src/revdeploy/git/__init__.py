"""Git module - Repository access, revision trees and diffs."""

from revdeploy.git.repository import GitCommandError, GitError, GitRepository
from revdeploy.git.tree import Diff, RevisionTree

__all__ = [
    "Diff",
    "GitCommandError",
    "GitError",
    "GitRepository",
    "RevisionTree",
]
