"""Shared setup for commands that talk to a deployment target."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from revdeploy.backends import BackendError, RemoteStore, create_backend
from revdeploy.cli.config import ConfigError, get_config_file, load_config
from revdeploy.core.config import DeployOptions
from revdeploy.deploy import DeployError, DeploymentEngine
from revdeploy.git import GitError, GitRepository, RevisionTree

# Errors reported as "Error: <message>" with exit status 1.
FATAL_ERRORS = (
    BackendError,
    ConfigError,
    DeployError,
    FileNotFoundError,
    GitError,
    ValueError,
)


@dataclass
class Target:
    """Everything a command needs for one deployment target."""

    repository: GitRepository
    tree: RevisionTree
    backend: RemoteStore
    options: DeployOptions
    engine: DeploymentEngine


def build_target(
    ctx: click.Context,
    revision: str | None = None,
    **overrides: Any,
) -> Target:
    """Load the configuration and assemble repository, backend and engine.

    Args:
        ctx: Click context carrying the global options.
        revision: Revision to deploy (default: HEAD).
        **overrides: DeployOptions values given on the command line.
    """
    repo_path = Path(ctx.obj["repo"])
    config = load_config(get_config_file(repo_path, ctx.obj.get("config")))

    for key in ("exclude", "additional"):
        extra = overrides.pop(key, None)
        if extra:
            overrides[key] = [*config.get(key, []), *extra]

    options = DeployOptions.from_config(config, revision=revision, **overrides)
    repository = GitRepository(repo_path)
    tree = RevisionTree(repository, options.revision)
    backend = create_backend(config)
    engine = DeploymentEngine(
        tree, backend, options, log=ctx.obj.get("logger"), local_root=repository.path
    )
    return Target(repository, tree, backend, options, engine)


@contextmanager
def fatal_errors() -> Iterator[None]:
    """Turn known errors into an error message and exit status 1."""
    try:
        yield
    except FATAL_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
