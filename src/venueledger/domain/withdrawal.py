"""Withdrawal workflow domain service.

A request reserves its funds the moment it is filed, so approving or
rejecting it afterwards is pure bookkeeping and can never fail for lack of
funds::

    PENDING --approve--> APPROVED   (balance -= amount)
    PENDING --reject---> REJECTED   (available += amount)
"""

import logging
import time
from datetime import datetime, UTC
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from venueledger.database.base import Database
from venueledger.domain.entities import (
    Page,
    SortDirection,
    WithdrawalFilter,
    WithdrawalRequest,
    WithdrawalStatus,
)
from venueledger.domain.errors import (
    AlreadyResolvedError,
    InsufficientFundsError,
    LockTimeoutError,
    NotFoundError,
    ValidationError,
    already_resolved,
    insufficient_funds,
    withdrawal_not_found,
)
from venueledger.domain.ledger import LedgerService, to_amount

logger = logging.getLogger(__name__)

T = TypeVar("T")

SORT_FIELDS = ("created_at", "amount", "status", "resolved_at", "id")
MAX_PAGE_SIZE = 1000


class WithdrawalService:
    """Service owning the withdrawal request state machine."""

    def __init__(
        self,
        db: Database,
        ledger: Optional[LedgerService] = None,
        min_withdrawal_amount: Optional[Decimal] = None,
        lock_retry_backoff: float = 0.05,
    ):
        """Initialize withdrawal service.

        Args:
            db: Database instance
            ledger: Ledger service sharing the same database and locks
            min_withdrawal_amount: Optional lower bound for a single request
            lock_retry_backoff: Seconds to wait before the one retry after a
                lock timeout
        """
        self.db = db
        self.ledger = ledger if ledger is not None else LedgerService(db)
        self.min_withdrawal_amount = min_withdrawal_amount
        self.lock_retry_backoff = lock_retry_backoff

    def _retry_once_on_lock_timeout(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except LockTimeoutError as e:
            logger.warning(f"{e}; retrying once in {self.lock_retry_backoff}s")
            time.sleep(self.lock_retry_backoff)
            return operation()

    def _validate_description(self, description: str) -> str:
        text = (description or "").strip()
        if not text:
            raise ValidationError("Description must not be empty")
        return text

    def _validate_amount(self, amount) -> Decimal:
        value = to_amount(amount)
        if self.min_withdrawal_amount is not None and value < self.min_withdrawal_amount:
            raise ValidationError(
                f"Minimum withdrawal is {self.min_withdrawal_amount}, got {value}"
            )
        return value

    def request_withdrawal(self, account_id: int, description: str, amount) -> WithdrawalRequest:
        """File a withdrawal request against an account's available amount.

        Funds are reserved and the PENDING request is stored in one unit of
        work: if the reservation fails, no request exists.

        Args:
            account_id: Account to withdraw from
            description: Free text shown to the admin
            amount: Positive amount, at most the available amount

        Returns:
            The created PENDING request

        Raises:
            ValidationError: If description is empty or amount is invalid
            NotFoundError: If account doesn't exist
            InsufficientFundsError: If amount exceeds the available amount
            LockTimeoutError: If the account stays busy after one retry
        """
        text = self._validate_description(description)
        value = self._validate_amount(amount)

        def file_request() -> int:
            with self.ledger.locks.hold(account_id), self.db.atomic():
                self.ledger.reserve_for_withdrawal(account_id, value)
                return self.db.create_withdrawal(account_id, text, value)

        request_id = self._retry_once_on_lock_timeout(file_request)
        logger.info(f"Withdrawal {request_id} filed on account {account_id} for {value}")
        return self.get_withdrawal(request_id)

    def request_full_withdrawal(self, account_id: int, description: str) -> WithdrawalRequest:
        """File a withdrawal request for everything currently available.

        Raises:
            ValidationError: If description is empty or the available amount
                is below the configured minimum
            NotFoundError: If account doesn't exist
            InsufficientFundsError: If nothing is available
            LockTimeoutError: If the account stays busy after one retry
        """
        text = self._validate_description(description)

        def file_request() -> tuple[int, Decimal]:
            with self.ledger.locks.hold(account_id), self.db.atomic():
                account = self.ledger.get_account(account_id)
                if account.available_amount <= 0:
                    raise InsufficientFundsError(
                        insufficient_funds(account_id, account.available_amount, account.available_amount)
                    )
                value = self._validate_amount(account.available_amount)
                self.ledger.reserve_for_withdrawal(account_id, value)
                return self.db.create_withdrawal(account_id, text, value), value

        request_id, value = self._retry_once_on_lock_timeout(file_request)
        logger.info(f"Withdrawal {request_id} filed on account {account_id} for full {value}")
        return self.get_withdrawal(request_id)

    def get_withdrawal(self, request_id: int) -> WithdrawalRequest:
        """Get withdrawal request by ID.

        Raises:
            NotFoundError: If request doesn't exist
        """
        request = self.db.get_withdrawal(request_id)
        if request is None:
            raise NotFoundError(withdrawal_not_found(request_id))
        return request

    def resolve(self, request_id: int, status: WithdrawalStatus | str) -> WithdrawalRequest:
        """Approve or reject a pending withdrawal request.

        Resolving is idempotent-safe: a request leaves PENDING exactly once,
        any later attempt fails without touching the ledger.

        Args:
            request_id: Withdrawal request ID
            status: APPROVED or REJECTED

        Returns:
            The resolved request

        Raises:
            ValidationError: If status is not a terminal status
            NotFoundError: If request doesn't exist
            AlreadyResolvedError: If request is not PENDING
            LockTimeoutError: If the account stays busy after one retry
        """
        if isinstance(status, WithdrawalStatus):
            target = status
        else:
            try:
                target = WithdrawalStatus(str(status).strip().upper())
            except ValueError:
                raise ValidationError(f"Unknown withdrawal status '{status}'")
        if not target.is_terminal:
            raise ValidationError("A withdrawal can only be resolved to APPROVED or REJECTED")

        request = self.get_withdrawal(request_id)
        account_id = request.account_id

        def apply_resolution() -> None:
            with self.ledger.locks.hold(account_id), self.db.atomic():
                current = self.get_withdrawal(request_id)
                if current.status is not WithdrawalStatus.PENDING or not self.db.mark_withdrawal_resolved(
                    request_id, target, datetime.now(UTC)
                ):
                    latest = self.get_withdrawal(request_id)
                    raise AlreadyResolvedError(already_resolved(request_id, latest.status.value))

                if target is WithdrawalStatus.APPROVED:
                    self.ledger.settle_approved(account_id, current.amount)
                else:
                    self.ledger.release_reservation(account_id, current.amount)

        self._retry_once_on_lock_timeout(apply_resolution)
        logger.info(f"Withdrawal {request_id} on account {account_id} {target.value}")
        return self.get_withdrawal(request_id)

    def approve(self, request_id: int) -> WithdrawalRequest:
        """Approve a pending withdrawal request."""
        return self.resolve(request_id, WithdrawalStatus.APPROVED)

    def reject(self, request_id: int) -> WithdrawalRequest:
        """Reject a pending withdrawal request."""
        return self.resolve(request_id, WithdrawalStatus.REJECTED)

    def list_withdrawals(self, filter: Optional[WithdrawalFilter] = None) -> Page[WithdrawalRequest]:
        """List one page of withdrawal requests.

        Serves both an owner's own history (filter by account) and the admin's
        global queue.

        Raises:
            ValidationError: If paging or sort options are invalid
        """
        filter = filter or WithdrawalFilter()
        if filter.page < 1:
            raise ValidationError(f"Page must be >= 1, got {filter.page}")
        if not 1 <= filter.page_size <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"Page size must be between 1 and {MAX_PAGE_SIZE}, got {filter.page_size}"
            )
        if filter.sort_field not in SORT_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{filter.sort_field}' (choose one of {', '.join(SORT_FIELDS)})"
            )
        try:
            direction = SortDirection(filter.sort_direction)
        except ValueError:
            raise ValidationError(f"Unknown sort direction '{filter.sort_direction}'")

        search = filter.search.strip() if filter.search else None
        items = self.db.list_withdrawals(
            account_id=filter.account_id,
            status=filter.status,
            search=search,
            sort_field=filter.sort_field,
            descending=direction is SortDirection.DESC,
            offset=(filter.page - 1) * filter.page_size,
            limit=filter.page_size,
        )
        total = self.db.count_withdrawals(
            account_id=filter.account_id, status=filter.status, search=search
        )
        return Page(
            items=tuple(items),
            page=filter.page,
            page_size=filter.page_size,
            total_items=total,
        )
