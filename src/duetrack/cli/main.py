"""Main CLI entry point."""

import click
from duetrack.database.factories import create_sqlite_repository
from duetrack.logging_config import configure_logging

# Import and register all commands at module level
from duetrack.cli.commands import (
    payment,
    month,
    due,
    import_cmd,
    sync,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DUETRACK_DB_PATH environment variable)",
    envvar="DUETRACK_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="DUETRACK_LOG_LEVEL",
    help="Logging verbosity (stderr)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Duetrack - Bill, loan and subscription tracker.

    Record recurring and one-off payments, mark them paid and keep an eye on
    what is due next. Paying a recurring payment schedules its next
    occurrence automatically.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the repository only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        repository = create_sqlite_repository(database_path=db_path)
        repository.connect()
        ctx.obj["repository"] = repository
        ctx.call_on_close(repository.disconnect)


# Register all commands
payment.register_commands(cli)
month.register_commands(cli)
due.register_commands(cli)
import_cmd.register_commands(cli)
sync.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
