"""Ledger store domain service.

The only path by which an account's balance or available amount may change.
Every mutation runs under the account's lock and inside one database unit of
work, and the balance updates themselves are conditional, so the invariant
``0 <= available_amount <= balance`` holds even against writers in other
processes.
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Optional

from venueledger.database.base import Database
from venueledger.domain.entities import (
    Account,
    AccountRole,
    ReservationToken,
    RevenueEntry,
)
from venueledger.domain.errors import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
    account_not_found,
    amount_too_large,
    duplicate_principal,
    insufficient_funds,
    non_positive_amount,
    principal_not_found,
    too_many_decimal_places,
)
from venueledger.domain.locks import AccountLocks

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Money columns are Numeric(18, 2)
MAX_AMOUNT = Decimal("9999999999999999.99")


def to_amount(amount) -> Decimal:
    """Coerce a positive money amount to Decimal.

    The value must be representable in a money column exactly: whole cents,
    at most MAX_AMOUNT. Nothing is rounded.

    Raises:
        ValidationError: If amount is not a finite number greater than zero,
            has fractions of a cent, or is too large to store
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid amount '{amount}'")
    if not value.is_finite() or value <= 0:
        raise ValidationError(non_positive_amount(value))
    if value > MAX_AMOUNT:
        raise ValidationError(amount_too_large(value, MAX_AMOUNT))
    if value.quantize(CENT) != value:
        raise ValidationError(too_many_decimal_places(value))
    return value


class LedgerService:
    """Service owning account balances and daily revenue."""

    def __init__(self, db: Database, locks: Optional[AccountLocks] = None):
        """Initialize ledger service.

        Args:
            db: Database instance
            locks: Per-account lock registry shared by every service writing
                to the same database
        """
        self.db = db
        self.locks = locks if locks is not None else AccountLocks()

    def create_account(
        self, owner_principal_id: str, role: AccountRole = AccountRole.OWNER
    ) -> int:
        """Create the account for a principal.

        Args:
            owner_principal_id: Principal (user) the account belongs to
            role: Account role

        Returns:
            Account ID

        Raises:
            ValidationError: If the principal ID is empty
            ConflictError: If the principal already has an account
        """
        principal = (owner_principal_id or "").strip()
        if not principal:
            raise ValidationError("Principal ID must not be empty")
        if self.db.get_account_by_principal(principal) is not None:
            raise ConflictError(duplicate_principal(principal))

        account_id = self.db.create_account(owner_principal_id=principal, role=AccountRole(role))
        logger.info(f"Created {AccountRole(role).value} account {account_id} for '{principal}'")
        return account_id

    def get_account(self, account_id: int) -> Account:
        """Get account by ID.

        Raises:
            NotFoundError: If account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_principal(self, owner_principal_id: str) -> Account:
        """Get the account of a principal.

        Raises:
            NotFoundError: If the principal has no account
        """
        account = self.db.get_account_by_principal(owner_principal_id)
        if account is None:
            raise NotFoundError(principal_not_found(owner_principal_id))
        return account

    def list_accounts(self, role: Optional[AccountRole] = None) -> list[Account]:
        """List all accounts, optionally only those with the given role."""
        return self.db.list_accounts(role=role)

    def list_revenue_entries(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[RevenueEntry]:
        """List an account's revenue entries in ascending day order.

        Raises:
            NotFoundError: If account doesn't exist
        """
        self.get_account(account_id)
        return self.db.list_revenue_entries(account_id, start_date=start_date, end_date=end_date)

    def credit_revenue(self, account_id: int, day: date, amount) -> Account:
        """Post revenue for a day to an account.

        Adds amount to both balance and available amount, and adds it to the
        revenue entry for day so several bookings settling on the same day
        accumulate instead of overwriting each other.

        Args:
            account_id: Account ID
            day: Calendar day the revenue belongs to
            amount: Positive amount

        Returns:
            Account after the credit

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If account doesn't exist
            LockTimeoutError: If the account stays busy
        """
        value = to_amount(amount)
        if isinstance(day, datetime):
            day = day.date()

        with self.locks.hold(account_id), self.db.atomic():
            self.get_account(account_id)
            self.db.credit_account(account_id, value)
            self.db.add_revenue(account_id, day, value)
            account = self.get_account(account_id)

        logger.info(f"Credited {value} to account {account_id} for {day.isoformat()}")
        return account

    def reserve_for_withdrawal(self, account_id: int, amount) -> ReservationToken:
        """Earmark funds for a withdrawal.

        Decrements the available amount; the balance is unchanged until the
        withdrawal is settled.

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If account doesn't exist
            InsufficientFundsError: If less than amount is available
            LockTimeoutError: If the account stays busy
        """
        value = to_amount(amount)

        with self.locks.hold(account_id), self.db.atomic():
            account = self.get_account(account_id)
            if not self.db.reserve_available(account_id, value):
                raise InsufficientFundsError(
                    insufficient_funds(account_id, value, account.available_amount)
                )
            account = self.get_account(account_id)

        logger.info(
            f"Reserved {value} on account {account_id} (available now {account.available_amount})"
        )
        return ReservationToken(
            account_id=account_id,
            amount=value,
            available_after=account.available_amount,
            reserved_at=datetime.now(UTC),
        )

    def settle_approved(self, account_id: int, amount) -> Account:
        """Remove reserved funds from the balance once a withdrawal is approved.

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If account doesn't exist
            ConflictError: If amount was never reserved
            LockTimeoutError: If the account stays busy
        """
        value = to_amount(amount)

        with self.locks.hold(account_id), self.db.atomic():
            self.get_account(account_id)
            if not self.db.debit_balance(account_id, value):
                raise ConflictError(
                    f"Cannot settle {value} on account {account_id}: amount is not reserved"
                )
            account = self.get_account(account_id)

        logger.info(f"Settled {value} from account {account_id} (balance now {account.balance})")
        return account

    def release_reservation(self, account_id: int, amount) -> Account:
        """Return reserved funds to the available amount after a rejection.

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If account doesn't exist
            ConflictError: If amount was never reserved
            LockTimeoutError: If the account stays busy
        """
        value = to_amount(amount)

        with self.locks.hold(account_id), self.db.atomic():
            self.get_account(account_id)
            if not self.db.release_available(account_id, value):
                raise ConflictError(
                    f"Cannot release {value} on account {account_id}: amount is not reserved"
                )
            account = self.get_account(account_id)

        logger.info(
            f"Released {value} on account {account_id} (available now {account.available_amount})"
        )
        return account
