"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InsufficientFundsError(ConflictError):
    """Reservation exceeds the account's available amount."""


class AlreadyResolvedError(ConflictError):
    """Withdrawal request is no longer pending."""


class LockTimeoutError(DomainError):
    """Per-account lock could not be acquired in time. Safe to retry."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def principal_not_found(principal_id: str) -> str:
    """Return message for a principal without an account."""
    return f"No account for principal '{principal_id}'"


def withdrawal_not_found(request_id: int) -> str:
    """Return message for missing withdrawal request."""
    return f"Withdrawal request {request_id} not found"


def duplicate_principal(principal_id: str) -> str:
    """Return message for a second account on the same principal."""
    return f"Principal '{principal_id}' already has an account"


def non_positive_amount(amount: Decimal) -> str:
    return f"Amount must be positive, got {amount}"


def too_many_decimal_places(amount: Decimal) -> str:
    """Return message for an amount finer than one cent."""
    return f"Amount must have at most 2 decimal places, got {amount}"


def amount_too_large(amount: Decimal, limit: Decimal) -> str:
    return f"Amount {amount} exceeds the maximum of {limit}"


def insufficient_funds(account_id: int, requested: Decimal, available: Decimal) -> str:
    """Return message when a reservation exceeds the available amount."""
    return (
        f"Insufficient funds in account {account_id}: "
        f"requested {requested}, available {available}"
    )


def already_resolved(request_id: int, status: str) -> str:
    """Return message when resolving a non-pending request."""
    return f"Withdrawal request {request_id} already processed ({status})"


def lock_timeout(account_id: int, timeout: float) -> str:
    return f"Account {account_id} is busy, lock not acquired within {timeout:g}s"


def invalid_window(window_days: int, allowed: tuple[int, ...]) -> str:
    """Return message for an unsupported aggregation window."""
    choices = ", ".join(str(w) for w in allowed)
    return f"Unsupported window of {window_days} days (choose one of {choices})"
