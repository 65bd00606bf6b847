"""Deploy command for the revdeploy CLI.

Commands:
- deploy: Deploy a revision to the configured target
"""

from __future__ import annotations

import click

from revdeploy.cli.target import build_target, fatal_errors
from revdeploy.core.types import DeployResult


def display_summary(result: DeployResult) -> None:
    """Display deployment results."""
    for path in result.uploaded:
        click.echo(f"  ↑ {path}")
    for path in result.deleted:
        click.echo(f"  ✗ {path}")
    for path in result.additional:
        click.echo(f"  + {path}")

    if not result.changed and not result.additional:
        click.echo("Everything is up to date.")
    else:
        click.echo(
            f"\nDeploy complete: {len(result.uploaded)} uploaded, "
            f"{len(result.deleted)} deleted, "
            f"{len(result.skipped)} skipped, "
            f"{len(result.additional)} additional"
        )
    if result.revision_written:
        click.echo(f"Remote revision set to {result.to_revision}")
    if result.dry_run:
        click.echo(click.style("Dry run: the remote side was not modified.", fg="yellow"))


@click.command()
@click.argument("revision", required=False)
@click.option("--dry-run", is_flag=True, help="Show what would be deployed without changing anything.")
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Path prefix to leave out (repeatable, added to the configured list).",
)
@click.option(
    "--additional",
    "-a",
    multiple=True,
    help="Untracked local file to upload as well (repeatable).",
)
@click.option("--revision-file", default=None, help="Remote path of the revision marker.")
@click.option("--skip-validation", is_flag=True, help="Deploy even if commits are not pushed.")
@click.pass_context
def deploy(
    ctx: click.Context,
    revision: str | None,
    dry_run: bool,
    exclude: tuple[str, ...],
    additional: tuple[str, ...],
    revision_file: str | None,
    skip_validation: bool,
) -> None:
    """Deploy REVISION (default: HEAD) to the configured target.

    Only files changed since the revision recorded on the target are
    transferred. When no revision is recorded, every file is uploaded.
    """
    with fatal_errors():
        target = build_target(
            ctx,
            revision,
            exclude=exclude,
            additional=additional,
            revision_file=revision_file,
            dry_run=dry_run,
        )
        with target.backend:
            if not skip_validation:
                target.engine.validate()
            result = target.engine.deploy()

    display_summary(result)
