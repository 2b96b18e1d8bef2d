"""Domain model entities for venueledger.

These are pure data classes representing the cash-flow ledger, independent of
the database schema. Services hand these out; ORM rows never leave the
database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class AccountRole(str, Enum):
    """Role of the principal owning an account."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"


class WithdrawalStatus(str, Enum):
    """Withdrawal request lifecycle states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not WithdrawalStatus.PENDING


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Account:
    """Cash-flow account of one owner or admin principal."""

    id: int
    owner_principal_id: str
    role: AccountRole
    balance: Decimal
    available_amount: Decimal
    created_at: datetime

    @property
    def reserved_amount(self) -> Decimal:
        """Funds earmarked by pending withdrawals."""
        return self.balance - self.available_amount


@dataclass(frozen=True)
class RevenueEntry:
    """Revenue posted to an account for one calendar day."""

    id: int
    account_id: int
    day: date
    amount_for_day: Decimal


@dataclass(frozen=True)
class WithdrawalRequest:
    """Withdrawal request filed against an account's available amount."""

    id: int
    account_id: int
    description: str
    amount: Decimal
    status: WithdrawalStatus
    created_at: datetime
    resolved_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReservationToken:
    """Receipt for funds earmarked against a withdrawal."""

    account_id: int
    amount: Decimal
    available_after: Decimal
    reserved_at: datetime


@dataclass(frozen=True)
class WithdrawalFilter:
    """Filter, paging and sort options for listing withdrawal requests."""

    account_id: Optional[int] = None
    status: Optional[WithdrawalStatus] = None
    search: Optional[str] = None
    page: int = 1
    page_size: int = 20
    sort_field: str = "created_at"
    sort_direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a larger result set (pages are 1-based)."""

    items: tuple[T, ...]
    page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        if self.total_items == 0:
            return 0
        return (self.total_items + self.page_size - 1) // self.page_size


@dataclass(frozen=True)
class DailyAmount:
    day: date
    amount: Decimal


@dataclass(frozen=True)
class PeriodSeries:
    """Zero-filled per-day series over a trailing window."""

    window_days: int
    start_date: date
    end_date: date
    series: tuple[DailyAmount, ...]
    total: Decimal


@dataclass(frozen=True)
class StatusBreakdown:
    count: int = 0
    amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class AccountTotals:
    """Totals over all non-admin accounts."""

    owner_count: int
    total_balance: Decimal
    total_available: Decimal


@dataclass(frozen=True)
class OwnerSummary:
    """Owner dashboard projection of one account."""

    account_id: int
    balance: Decimal
    available_amount: Decimal
    pending_amount: Decimal
    total_withdrawn: Decimal
    average_withdrawal: Decimal
    this_month_total: Decimal
    recent_withdrawals: tuple[WithdrawalRequest, ...] = ()


@dataclass(frozen=True)
class AdminSummary:
    """Admin console projection over every account and withdrawal."""

    accounts: tuple[Account, ...]
    totals: AccountTotals
    admin_account: Optional[Account]
    withdrawal_status_breakdown: dict[WithdrawalStatus, StatusBreakdown] = field(
        default_factory=dict
    )
    total_withdrawals: int = 0
    total_withdrawal_amount: Decimal = Decimal("0")
