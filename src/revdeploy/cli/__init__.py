"""Command-line interface for revdeploy.

This module provides the main CLI entry point and assembles all commands.

Commands:
- deploy: Deploy a revision to the configured target
- status: Show local and remote revisions
"""

from __future__ import annotations

import click

from revdeploy import __version__
from revdeploy.cli.config import CONFIG_FILE_NAME, ConfigError, get_config_file, load_config
from revdeploy.cli.console import setup_logging
from revdeploy.cli.deploy import deploy
from revdeploy.cli.status import status


@click.group()
@click.version_option(__version__)
@click.option(
    "--repo",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Repository to deploy from.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Configuration file (default: <repo>/{CONFIG_FILE_NAME}).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every file operation.")
@click.pass_context
def cli(ctx: click.Context, repo: str, config: str | None, verbose: bool) -> None:
    """revdeploy - Deploy git revisions to remote file stores."""
    ctx.ensure_object(dict)
    ctx.obj["repo"] = repo
    ctx.obj["config"] = config
    ctx.obj["logger"] = setup_logging(verbose)


cli.add_command(deploy)
cli.add_command(status)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    # Main entry points
    "cli",
    "main",
    # Config utilities
    "ConfigError",
    "get_config_file",
    "load_config",
]
