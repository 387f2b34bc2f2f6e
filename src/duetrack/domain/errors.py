"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested payment does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as confirming an already paid occurrence."""


def payment_not_found(payment_id: str) -> str:
    """Return message for missing payment."""
    return f"Payment '{payment_id}' not found"


def payment_already_paid(payment_id: str) -> str:
    """Return message when a paid occurrence is confirmed again."""
    return f"Payment '{payment_id}' is already paid"


def missing_required_fields(fields: list[str]) -> str:
    """Return message for an entry missing required fields."""
    return f"Please fill in the required fields: {', '.join(fields)}"


def loan_requires_end_date() -> str:
    """Return message for a loan entered without maturity date."""
    return "Loans require an end date"


def card_requires_minimum_payment() -> str:
    """Return message for a credit card entered without minimum payment."""
    return "Credit cards require a minimum payment amount"


def invalid_paid_amount(value: object) -> str:
    """Return message for a paid amount that is negative or not finite."""
    return f"Paid amount must be a finite, non-negative number (got {value})"


def unknown_payment_type(label: str) -> str:
    """Return message for an unrecognised payment type label."""
    return f"Unknown payment type '{label}'"
