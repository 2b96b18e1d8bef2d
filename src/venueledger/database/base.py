"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from venueledger.domain.entities import (
    Account,
    AccountRole,
    RevenueEntry,
    WithdrawalRequest,
    WithdrawalStatus,
)


class Database(ABC):
    """Abstract database interface for venueledger.

    Balance-changing methods are conditional updates: they return False
    instead of writing when the guarded condition does not hold, so callers
    can turn a lost race into a domain error.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the calling thread's session."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed writes as one unit of work.

        Nested blocks join the outermost one; the outermost commits on success
        and rolls back if the block raises.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(self, owner_principal_id: str, role: AccountRole) -> int:
        """Create an account with zero balances. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_principal(self, owner_principal_id: str) -> Optional[Account]:
        """Get account by owning principal."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        role: Optional[AccountRole] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Account]:
        """List accounts ordered by ID, optionally filtered by role."""
        pass

    @abstractmethod
    def count_accounts(self, role: Optional[AccountRole] = None) -> int:
        """Count accounts, optionally filtered by role."""
        pass

    # Balance operations
    @abstractmethod
    def credit_account(self, account_id: int, amount: Decimal) -> bool:
        """Add amount to balance and available amount."""
        pass

    @abstractmethod
    def reserve_available(self, account_id: int, amount: Decimal) -> bool:
        """Subtract amount from available amount if at least amount is available."""
        pass

    @abstractmethod
    def release_available(self, account_id: int, amount: Decimal) -> bool:
        """Return amount to available amount if it stays within balance."""
        pass

    @abstractmethod
    def debit_balance(self, account_id: int, amount: Decimal) -> bool:
        """Subtract amount from balance if balance stays >= available amount."""
        pass

    # Revenue operations
    @abstractmethod
    def add_revenue(self, account_id: int, day: date, amount: Decimal) -> None:
        """Add amount to the account's revenue entry for day, creating it if needed."""
        pass

    @abstractmethod
    def list_revenue_entries(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[RevenueEntry]:
        """List revenue entries for an account in ascending day order."""
        pass

    # Withdrawal operations
    @abstractmethod
    def create_withdrawal(self, account_id: int, description: str, amount: Decimal) -> int:
        """Create a PENDING withdrawal request. Returns request ID."""
        pass

    @abstractmethod
    def get_withdrawal(self, request_id: int) -> Optional[WithdrawalRequest]:
        """Get withdrawal request by ID."""
        pass

    @abstractmethod
    def mark_withdrawal_resolved(
        self, request_id: int, status: WithdrawalStatus, resolved_at: datetime
    ) -> bool:
        """Move a PENDING request to status. Returns False if it was not PENDING."""
        pass

    @abstractmethod
    def list_withdrawals(
        self,
        account_id: Optional[int] = None,
        status: Optional[WithdrawalStatus] = None,
        search: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
        sort_field: str = "created_at",
        descending: bool = True,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[WithdrawalRequest]:
        """List withdrawal requests with optional filters.

        Args:
            account_id: Optional account ID filter
            status: Optional status filter
            search: Case-insensitive substring of description or owner principal
            created_from: Optional inclusive lower bound on created_at
            created_before: Optional exclusive upper bound on created_at
            sort_field: One of created_at, amount, status, resolved_at, id
            descending: Sort direction
            offset: Rows to skip
            limit: Maximum rows to return
        """
        pass

    @abstractmethod
    def count_withdrawals(
        self,
        account_id: Optional[int] = None,
        status: Optional[WithdrawalStatus] = None,
        search: Optional[str] = None,
    ) -> int:
        """Count withdrawal requests matching the filters."""
        pass

    @abstractmethod
    def get_withdrawal_status_totals(
        self, account_id: Optional[int] = None
    ) -> list[dict[str, Any]]:
        """Get count and amount sum of withdrawal requests per status.

        Returns a list of dictionaries with status, count and amount keys. This
        structure is kept as dict for aggregation results.
        """
        pass
