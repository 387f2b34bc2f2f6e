"""Month view and spending trend commands."""

import calendar
import click
from datetime import date

from duetrack.cli.payment_resolution import echo_payment_table, format_amount
from duetrack.domain.entities import PaymentCategory
from duetrack.domain.summary import SummaryService
from duetrack.utils.date_parser import parse_month

CATEGORY_CHOICES = [category.value.lower() for category in PaymentCategory]


@click.command("month")
@click.option("--month", "month_str", default="this month", show_default=True, help="Month (YYYY-MM, 'this month', 'last month', 'next month')")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False), help="Only list this category")
@click.pass_context
def month_view(ctx, month_str: str, category: str | None):
    """Show the payments of a month with expected and paid totals."""
    try:
        year, month = parse_month(month_str)
    except ValueError as e:
        click.echo(f"Error: Invalid month: {e}", err=True)
        ctx.exit(1)

    service = SummaryService(ctx.obj["repository"])
    payments = service.payments_for_month(
        year, month, category=PaymentCategory(category.upper()) if category else None
    )
    summary = service.build_month_summary(payments, year, month)

    click.echo(f"\n{calendar.month_name[month]} {year}")
    if not payments:
        click.echo("No payments found.")
        return

    echo_payment_table(payments)
    click.echo("-" * 100)
    click.echo(f"{'Expected':<20} {format_amount(summary.expected_total):>14}")
    click.echo(f"{'Paid':<20} {format_amount(summary.paid_total):>14}")
    click.echo(f"{'Pending payments':<20} {summary.pending_count:>14}")

    if category is None:
        click.echo("\nBy category:")
        for cat, total in summary.category_totals.items():
            click.echo(f"  {cat.value:<18} {format_amount(total):>14}")

    if summary.tag_totals:
        click.echo("\nBy tag:")
        for tag, total in sorted(summary.tag_totals.items(), key=lambda item: (-item[1], item[0])):
            click.echo(f"  {tag:<18} {format_amount(total):>14}")


@click.command("trend")
@click.option("--months", default=6, show_default=True, type=click.IntRange(1, 60), help="Number of months to show")
@click.pass_context
def trend(ctx, months: int):
    """Show the amount paid per month, ending with the current month."""
    service = SummaryService(ctx.obj["repository"])
    points = service.spending_trend(date.today(), months=months)

    highest = max((point.paid_total for point in points), default=0) or 1
    click.echo("\nPaid per month:")
    for point in points:
        bar = "#" * int(30 * point.paid_total / highest)
        label = f"{calendar.month_abbr[point.month]} {point.year}"
        click.echo(f"  {label:<10} {format_amount(point.paid_total):>14}  {bar}")


def register_commands(cli):
    """Register month commands with main CLI."""
    cli.add_command(month_view)
    cli.add_command(trend)
