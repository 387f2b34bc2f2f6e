"""CLI helpers for payment resolution and display."""

from __future__ import annotations

from decimal import Decimal

import click
from duetrack.domain.due_dates import adjust_due_date, was_adjusted
from duetrack.domain.entities import Payment
from duetrack.domain.payment import PaymentService
from duetrack.utils.payment_resolver import resolve_payment, short_id


def resolve_payment_or_exit(
    ctx: click.Context, payment_service: PaymentService, reference: str
) -> str:
    """Resolve a payment id or prefix, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_payment(payment_service, reference)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def format_due_date(payment: Payment) -> str:
    """Show the adjusted due date, flagging weekend shifts."""
    adjusted = adjust_due_date(payment.date)
    if was_adjusted(payment.date):
        return f"{adjusted} (moved from {payment.date:%a})"
    return str(adjusted)


def echo_payment_table(payments: list[Payment]) -> None:
    """Print payments as a compact table."""
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<16} {'Due':<24} {'Name':<22} {'Type':<12} {'Amount':>12} {'Status':<8}"
    )
    click.echo("-" * 100)
    for p in payments:
        status = "paid" if p.is_paid else "pending"
        click.echo(
            f"{short_id(p.id):<16} {format_due_date(p):<24} {p.name[:22]:<22} "
            f"{p.payment_type.label:<12} {format_amount(p.amount):>12} {status:<8}"
        )
