"""Snapshot sync commands."""

import click
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.errors import DomainError
from duetrack.domain.sync import JsonFileTransport, SyncCoordinator


@click.group("sync")
@click.option(
    "--file",
    "sync_file",
    required=True,
    type=click.Path(dir_okay=False),
    envvar="DUETRACK_SYNC_FILE",
    help="Shared JSON snapshot file (overrides DUETRACK_SYNC_FILE)",
)
@click.pass_context
def sync_group(ctx, sync_file: str):
    """Share payments with other devices through a JSON snapshot file."""
    ctx.obj["sync"] = SyncCoordinator(ctx.obj["repository"], JsonFileTransport(sync_file))


@sync_group.command("push")
@click.pass_context
def push(ctx):
    """Overwrite the shared snapshot with local payments."""
    count = ctx.obj["sync"].push()
    click.echo(f"Pushed {count} payments")


@sync_group.command("pull")
@click.pass_context
def pull(ctx):
    """Replace local payments with the shared snapshot."""
    try:
        count = ctx.obj["sync"].pull()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    if count is None:
        click.echo("Shared snapshot is empty; nothing pulled")
    else:
        click.echo(f"Pulled {count} payments")


def register_commands(cli):
    """Register sync commands with main CLI."""
    cli.add_command(sync_group)
