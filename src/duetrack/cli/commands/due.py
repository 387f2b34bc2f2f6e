"""Due date, reminder and outstanding debt commands."""

import json
import click
from datetime import date, datetime

from duetrack.cli.payment_resolution import echo_payment_table, format_amount
from duetrack.domain.analysis import build_snapshot, outstanding_overview
from duetrack.domain.payment import PaymentService
from duetrack.domain.reminders import (
    DEFAULT_REMINDER_HOUR,
    Notifier,
    due_today,
    overdue,
    reminder_for,
)
from duetrack.utils.date_parser import parse_date


class EchoNotifier(Notifier):
    """Notifier that prints to the terminal."""

    def send(self, title: str, body: str) -> None:
        click.echo(f"{title}: {body}")


@click.command("due")
@click.option("--date", "date_str", help="Day to check (defaults to today)")
@click.pass_context
def due(ctx, date_str: str | None):
    """Show unpaid payments due today and overdue ones.

    Weekend due dates count as due on the following Monday.
    """
    today = date.today()
    if date_str:
        try:
            today = parse_date(date_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    payments = PaymentService(ctx.obj["repository"]).list_payments(is_paid=False)
    todays = due_today(payments, today)
    late = overdue(payments, today)

    if not todays and not late:
        click.echo(f"Nothing due on {today}.")
        return
    if todays:
        click.echo(f"\nDue on {today}:")
        echo_payment_table(todays)
    if late:
        click.echo("\nOverdue:")
        echo_payment_table(late)


@click.command("remind")
@click.option("--at", "at_str", help="Point in time to check, 'YYYY-MM-DD HH:MM' (defaults to now)")
@click.option(
    "--reminder-hour",
    type=click.IntRange(0, 23),
    default=DEFAULT_REMINDER_HOUR,
    show_default=True,
    envvar="DUETRACK_REMINDER_HOUR",
    help="Hour of the first reminder of the day",
)
@click.pass_context
def remind(ctx, at_str: str | None, reminder_hour: int):
    """Send the reminder due at this point in time, if any.

    Meant to be run hourly, e.g. from cron.
    """
    now = datetime.now()
    if at_str:
        try:
            now = datetime.strptime(at_str.strip(), "%Y-%m-%d %H:%M")
        except ValueError as e:
            click.echo(f"Error: Invalid time: {e}", err=True)
            ctx.exit(1)

    payments = PaymentService(ctx.obj["repository"]).list_payments(is_paid=False)
    reminder = reminder_for(payments, now, reminder_hour=reminder_hour)
    if reminder is None:
        click.echo("No reminder at this time.")
        return
    EchoNotifier().notify(reminder)


@click.command("outstanding")
@click.option("--json", "as_json", is_flag=True, help="Print the unpaid payments as JSON for an external advisor")
@click.pass_context
def outstanding(ctx, as_json: bool):
    """Show total unpaid debt and payments due within a week."""
    payments = PaymentService(ctx.obj["repository"]).list_payments()

    if as_json:
        snapshot = [
            {
                "name": item.name,
                "type": item.payment_type,
                "amount": str(item.amount),
                "date": item.date.isoformat(),
            }
            for item in build_snapshot(payments)
        ]
        click.echo(json.dumps(snapshot, ensure_ascii=False, indent=2))
        return

    overview = outstanding_overview(payments, date.today())
    click.echo(f"Total unpaid: {format_amount(overview.total_debt)} ({overview.pending_count} payment(s))")
    if overview.urgent_items:
        click.echo("Due within 7 days:")
        for name in overview.urgent_items:
            click.echo(f"  - {name}")


def register_commands(cli):
    """Register due date commands with main CLI."""
    cli.add_command(due)
    cli.add_command(remind)
    cli.add_command(outstanding)
