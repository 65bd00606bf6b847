"""Status command for the revdeploy CLI.

Commands:
- status: Show local and remote revisions
"""

from __future__ import annotations

import click

from revdeploy.cli.target import build_target, fatal_errors


@click.command()
@click.argument("revision", required=False)
@click.pass_context
def status(ctx: click.Context, revision: str | None) -> None:
    """Show the revision deployed on the target."""
    with fatal_errors():
        target = build_target(ctx, revision)
        with target.backend:
            state = target.engine.status()
        location = target.backend.location

    click.echo(f"Remote: {location}")
    click.echo(f"Local revision:  {state.local_revision}")
    click.echo(f"Remote revision: {state.remote_revision or '---'}")
    if state.up_to_date:
        click.echo("Up to date.")
