"""CSV import and export commands."""

import click
from duetrack.cli.error_handling import handle_domain_error
from duetrack.domain.csv_export import CSVExportService
from duetrack.domain.csv_import import CSVImportService, ImportMode
from duetrack.domain.errors import DomainError


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--replace", is_flag=True, help="Replace all stored payments instead of appending")
@click.pass_context
def import_csv(ctx, csv_file: str, replace: bool):
    """Import payments from a CSV file.

    Loan and credit card rows with an end_date are expanded into one payment
    per month. Files written by 'duetrack export' are restored as-is.
    """
    service = CSVImportService(ctx.obj["repository"])
    mode = ImportMode.REPLACE if replace else ImportMode.APPEND

    try:
        result = service.import_csv(csv_file_path=csv_file, mode=mode)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} payments")
    click.echo(f"  Skipped: {result['skipped']} rows without a name")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


@click.command("export")
@click.argument("csv_file", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def export_csv(ctx, csv_file: str):
    """Export all payments to a CSV backup file."""
    service = CSVExportService(ctx.obj["repository"])
    count = service.export_csv(csv_file)
    click.echo(f"Exported {count} payments to {csv_file}")


def register_commands(cli):
    """Register import/export commands with main CLI."""
    cli.add_command(import_csv)
    cli.add_command(export_csv)
