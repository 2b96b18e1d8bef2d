"""Utility for resolving account references to IDs."""

from venueledger.domain.errors import NotFoundError, account_not_found
from venueledger.domain.ledger import LedgerService


def resolve_account(ledger: LedgerService, account: str | int) -> int:
    """Resolve an account ID or owner principal ID to an account ID.

    Args:
        ledger: LedgerService instance
        account: Account ID (int or string representation of int) or the
            principal ID owning the account

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    # If it's already an integer, use it as ID
    if isinstance(account, int):
        return ledger.get_account(account).id

    # Try to parse as integer (handles string IDs like "1")
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is None:
        return ledger.get_account_by_principal(str(account)).id

    try:
        return ledger.get_account(account_id).id
    except NotFoundError:
        # Numeric principal IDs are allowed too
        try:
            return ledger.get_account_by_principal(str(account)).id
        except NotFoundError:
            raise NotFoundError(account_not_found(account_id))
