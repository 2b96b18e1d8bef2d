"""Read-only projections for the owner dashboard and the admin console."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from venueledger.database.base import Database
from venueledger.domain.entities import (
    Account,
    AccountRole,
    AccountTotals,
    AdminSummary,
    OwnerSummary,
    Page,
    StatusBreakdown,
    WithdrawalStatus,
)
from venueledger.domain.errors import NotFoundError, ValidationError, account_not_found
from venueledger.domain.period import utc_today
from venueledger.domain.withdrawal import MAX_PAGE_SIZE


class SummaryService:
    """Service for building summary views.

    Everything is computed on read from the current ledger rows; nothing is
    cached, so every view reflects the latest mutation.
    """

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_owner_summary(
        self, account_id: int, recent_limit: int = 5, today: Optional[date] = None
    ) -> OwnerSummary:
        """Build the owner dashboard view of one account.

        Args:
            account_id: Account ID
            recent_limit: Number of most recent withdrawals to include
            today: Reference date for the month-to-date total

        Returns:
            OwnerSummary with balances, recent withdrawals and withdrawal stats

        Raises:
            NotFoundError: If account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        recent = self.db.list_withdrawals(
            account_id=account_id, sort_field="created_at", descending=True, limit=recent_limit
        )
        breakdown = self.status_breakdown(account_id)
        approved = breakdown[WithdrawalStatus.APPROVED]
        average = (approved.amount / approved.count) if approved.count else Decimal("0")

        today = today or utc_today()
        month_start = datetime.combine(today.replace(day=1), time.min)
        this_month = self.db.list_withdrawals(
            account_id=account_id,
            created_from=month_start,
            created_before=month_start + relativedelta(months=1),
        )

        return OwnerSummary(
            account_id=account.id,
            balance=account.balance,
            available_amount=account.available_amount,
            pending_amount=breakdown[WithdrawalStatus.PENDING].amount,
            total_withdrawn=approved.amount,
            average_withdrawal=average,
            this_month_total=sum((r.amount for r in this_month), Decimal("0")),
            recent_withdrawals=tuple(recent),
        )

    def status_breakdown(
        self, account_id: Optional[int] = None
    ) -> dict[WithdrawalStatus, StatusBreakdown]:
        """Count and sum withdrawal requests per status, with every status present."""
        breakdown = {status: StatusBreakdown() for status in WithdrawalStatus}
        for row in self.db.get_withdrawal_status_totals(account_id=account_id):
            breakdown[row["status"]] = StatusBreakdown(count=row["count"], amount=row["amount"])
        return breakdown

    def get_admin_summary(self) -> AdminSummary:
        """Build the admin console overview.

        Account totals cover non-admin accounts only; the admin's own account
        is reported separately.
        """
        accounts = self.db.list_accounts()
        user_accounts = tuple(acc for acc in accounts if acc.role is not AccountRole.ADMIN)
        admin_account = next((acc for acc in accounts if acc.role is AccountRole.ADMIN), None)

        totals = AccountTotals(
            owner_count=sum(1 for acc in user_accounts if acc.role is AccountRole.OWNER),
            total_balance=sum((acc.balance for acc in user_accounts), Decimal("0")),
            total_available=sum((acc.available_amount for acc in user_accounts), Decimal("0")),
        )
        breakdown = self.status_breakdown()

        return AdminSummary(
            accounts=user_accounts,
            totals=totals,
            admin_account=admin_account,
            withdrawal_status_breakdown=breakdown,
            total_withdrawals=sum(b.count for b in breakdown.values()),
            total_withdrawal_amount=sum((b.amount for b in breakdown.values()), Decimal("0")),
        )

    def list_accounts_page(
        self, role: Optional[AccountRole] = None, page: int = 1, page_size: int = 20
    ) -> Page[Account]:
        """List one page of accounts for the admin cash-flow table.

        Raises:
            ValidationError: If paging options are invalid
        """
        if page < 1:
            raise ValidationError(f"Page must be >= 1, got {page}")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"Page size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}"
            )
        items = self.db.list_accounts(role=role, offset=(page - 1) * page_size, limit=page_size)
        return Page(
            items=tuple(items),
            page=page,
            page_size=page_size,
            total_items=self.db.count_accounts(role=role),
        )
