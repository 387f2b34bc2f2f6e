"""Utility for resolving payment references to IDs."""

from duetrack.domain.errors import NotFoundError
from duetrack.domain.payment import PaymentService


def short_id(payment_id: str) -> str:
    """Shorten a payment id for display, e.g. ``auto-3f2a9c1b``."""
    prefix, _, rest = payment_id.partition("-")
    if not rest:
        return payment_id[:8]
    return f"{prefix}-{rest[:8]}"


def resolve_payment(payment_service: PaymentService, reference: str) -> str:
    """Resolve a payment id, or an unambiguous prefix of one, to the full id.

    The prefix may include the provenance part (``auto-3f2a``) or start at
    the random part (``3f2a``).

    Args:
        payment_service: PaymentService instance
        reference: Full id or id prefix

    Returns:
        Payment ID

    Raises:
        NotFoundError: If no payment or more than one payment matches
    """
    reference = reference.strip()
    if not reference:
        raise NotFoundError("Empty payment reference")

    ids = [p.id for p in payment_service.list_payments()]
    if reference in ids:
        return reference

    matches = [
        payment_id
        for payment_id in ids
        if payment_id.startswith(reference)
        or payment_id.partition("-")[2].startswith(reference)
    ]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise NotFoundError(f"Payment '{reference}' not found")
    raise NotFoundError(
        f"Payment reference '{reference}' is ambiguous ({len(matches)} matches)"
    )
