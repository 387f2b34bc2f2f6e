"""Payment management commands."""

import click
from decimal import Decimal
from typing import Any

from duetrack.cli.error_handling import handle_domain_error
from duetrack.cli.payment_resolution import (
    echo_payment_table,
    format_amount,
    format_due_date,
    resolve_payment_or_exit,
)
from duetrack.domain.entities import PaymentCategory, PaymentPeriod, PaymentType
from duetrack.domain.errors import DomainError
from duetrack.domain.payment import PaymentService
from duetrack.utils.amount_parser import parse_amount
from duetrack.utils.date_parser import parse_date
from duetrack.utils.payment_resolver import short_id

TYPE_CHOICES = ["loan", "credit-card", "bill", "digital"]
PERIOD_CHOICES = [period.value.lower() for period in PaymentPeriod]
CATEGORY_CHOICES = [category.value.lower() for category in PaymentCategory]


def _parse_date_or_exit(ctx, value: str, label: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx, value: str, label: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.command("add")
@click.argument("name")
@click.option("--type", "payment_type", type=click.Choice(TYPE_CHOICES, case_sensitive=False), required=True, help="Payment type")
@click.option("--amount", required=True, help="Expected amount (0 if not yet known)")
@click.option("--date", required=True, help="Due date (YYYY-MM-DD, DD.MM.YYYY or 'today', 'tomorrow')")
@click.option("--end-date", help="Loan maturity or subscription cutoff date")
@click.option("--period", type=click.Choice(PERIOD_CHOICES, case_sensitive=False), default="monthly", show_default=True, help="Recurrence period")
@click.option("--minimum", help="Minimum payment amount (required for credit cards)")
@click.option("--tag", help="Custom grouping tag (e.g., 'Household')")
@click.option("--commitment-end", help="Contract commitment end date")
@click.option("--auto-payment", is_flag=True, help="Payment is collected automatically")
@click.option("--auto-payment-bank", help="Bank collecting the automatic payment")
@click.option("--notes", help="Notes")
@click.option("--paid", is_flag=True, help="Record a past payment that is already paid")
@click.pass_context
def add_payment(
    ctx,
    name: str,
    payment_type: str,
    amount: str,
    date: str,
    end_date: str | None,
    period: str,
    minimum: str | None,
    tag: str | None,
    commitment_end: str | None,
    auto_payment: bool,
    auto_payment_bank: str | None,
    notes: str | None,
    paid: bool,
):
    """Add a payment.

    Examples:
        duetrack add "Netflix" --type digital --amount 229.99 --date 2024-01-25
        duetrack add "Car loan" --type loan --amount 5000 --date 2024-01-15 --end-date 2025-01-15
        duetrack add "Bonus card" --type credit-card --amount 0 --minimum 0 --date 2024-01-30
    """
    service = PaymentService(ctx.obj["repository"])

    due = _parse_date_or_exit(ctx, date, "date")
    expected = _parse_amount_or_exit(ctx, amount, "amount")
    end = _parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    commitment = _parse_date_or_exit(ctx, commitment_end, "commitment end date") if commitment_end else None
    minimum_amount = _parse_amount_or_exit(ctx, minimum, "minimum amount") if minimum else None

    try:
        payment = service.create_payment(
            name=name,
            payment_type=PaymentType.from_label(payment_type),
            amount=expected,
            date=due,
            end_date=end,
            period=PaymentPeriod(period.upper()),
            minimum_payment_amount=minimum_amount,
            custom_tag=tag,
            commitment_end_date=commitment,
            auto_payment=auto_payment,
            auto_payment_bank=auto_payment_bank,
            notes=notes,
            already_paid=paid,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created payment {short_id(payment.id)}")
    click.echo(f"  Name: {payment.name}")
    click.echo(f"  Type: {payment.payment_type.label}")
    click.echo(f"  Due: {format_due_date(payment)}")
    click.echo(f"  Amount: {format_amount(payment.amount)}")
    if payment.is_paid:
        click.echo("  Status: paid")


@click.command("list")
@click.option("--category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False), help="Only this category")
@click.option("--pending", "status", flag_value="pending", help="Only unpaid payments")
@click.option("--paid", "status", flag_value="paid", help="Only paid payments")
@click.pass_context
def list_payments(ctx, category: str | None, status: str | None):
    """List payments."""
    service = PaymentService(ctx.obj["repository"])
    is_paid = None if status is None else status == "paid"
    payments = service.list_payments(
        category=PaymentCategory(category.upper()) if category else None,
        is_paid=is_paid,
    )

    if not payments:
        click.echo("No payments found.")
        return

    click.echo(f"\nFound {len(payments)} payment(s):")
    echo_payment_table(payments)


@click.command("pay")
@click.argument("payment_ref", metavar="PAYMENT")
@click.option("--amount", help="Amount paid (defaults to the expected amount)")
@click.pass_context
def pay(ctx, payment_ref: str, amount: str | None):
    """Mark a payment as paid.

    PAYMENT is a payment id or an unambiguous prefix of one. Recurring
    payments get their next occurrence scheduled; loans do not.

    Examples:
        duetrack pay auto-3f2a9c1b
        duetrack pay 3f2a --amount 512.40
    """
    service = PaymentService(ctx.obj["repository"])
    payment_id = resolve_payment_or_exit(ctx, service, payment_ref)

    if amount is None:
        paid_amount = service.require_payment(payment_id).amount
    else:
        paid_amount = _parse_amount_or_exit(ctx, amount, "amount")

    try:
        confirmation = service.confirm_payment(payment_id, paid_amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    paid = confirmation.updated_payment
    click.echo(f"Marked '{paid.name}' paid ({format_amount(paid.paid_amount)})")
    successor = confirmation.next_occurrence
    if successor is not None:
        click.echo(f"Next occurrence {short_id(successor.id)} due {format_due_date(successor)}")
    else:
        click.echo("No further occurrence scheduled")


@click.command("edit")
@click.argument("payment_ref", metavar="PAYMENT")
@click.option("--name", help="New name")
@click.option("--type", "payment_type", type=click.Choice(TYPE_CHOICES, case_sensitive=False), help="New payment type")
@click.option("--amount", help="New expected amount")
@click.option("--date", help="New due date")
@click.option("--end-date", help="New end date, or empty string to clear")
@click.option("--period", type=click.Choice(PERIOD_CHOICES, case_sensitive=False), help="New recurrence period")
@click.option("--minimum", help="New minimum payment amount, or empty string to clear")
@click.option("--tag", help="New tag, or empty string to clear")
@click.option("--notes", help="New notes, or empty string to clear")
@click.pass_context
def edit_payment(
    ctx,
    payment_ref: str,
    name: str | None,
    payment_type: str | None,
    amount: str | None,
    date: str | None,
    end_date: str | None,
    period: str | None,
    minimum: str | None,
    tag: str | None,
    notes: str | None,
) -> None:
    """Edit a payment.

    Updates only the fields that are provided.

    Examples:
        duetrack edit 3f2a --amount 250
        duetrack edit 3f2a --tag ""  # Clear tag
    """
    service = PaymentService(ctx.obj["repository"])
    payment_id = resolve_payment_or_exit(ctx, service, payment_ref)

    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if payment_type is not None:
        changes["payment_type"] = PaymentType.from_label(payment_type)
    if amount is not None:
        changes["amount"] = _parse_amount_or_exit(ctx, amount, "amount")
    if date is not None:
        changes["date"] = _parse_date_or_exit(ctx, date, "date")
    if end_date is not None:
        changes["end_date"] = _parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    if period is not None:
        changes["period"] = PaymentPeriod(period.upper())
    if minimum is not None:
        changes["minimum_payment_amount"] = _parse_amount_or_exit(ctx, minimum, "minimum amount") if minimum else None
    if tag is not None:
        changes["custom_tag"] = tag or None
    if notes is not None:
        changes["notes"] = notes or None

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_payment(payment_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated payment {short_id(payment_id)}")


@click.command("delete")
@click.argument("payment_ref", metavar="PAYMENT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment(ctx, payment_ref: str, yes: bool):
    """Delete a payment."""
    service = PaymentService(ctx.obj["repository"])
    payment_id = resolve_payment_or_exit(ctx, service, payment_ref)
    payment = service.require_payment(payment_id)

    if not yes:
        click.confirm(f"Delete '{payment.name}' due {payment.date}?", abort=True)

    try:
        service.delete_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted payment {short_id(payment_id)}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(add_payment)
    cli.add_command(list_payments)
    cli.add_command(pay)
    cli.add_command(edit_payment)
    cli.add_command(delete_payment)
