"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so services only ever see frozen
domain entities and never hold live ORM rows.
"""

from decimal import Decimal

from venueledger.domain import entities as domain
from venueledger.database.models import (
    Account as ORMAccount,
    RevenueEntry as ORMRevenueEntry,
    WithdrawalRequest as ORMWithdrawalRequest,
)


def _money(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_principal_id=orm_account.owner_principal_id,
        role=domain.AccountRole(orm_account.role),
        balance=_money(orm_account.balance),
        available_amount=_money(orm_account.available_amount),
        created_at=orm_account.created_at,
    )


def revenue_entry_to_domain(orm_entry: ORMRevenueEntry) -> domain.RevenueEntry:
    """Convert SQLAlchemy RevenueEntry model to domain RevenueEntry entity."""
    return domain.RevenueEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        day=orm_entry.day,
        amount_for_day=_money(orm_entry.amount_for_day),
    )


def withdrawal_to_domain(orm_request: ORMWithdrawalRequest) -> domain.WithdrawalRequest:
    """Convert SQLAlchemy WithdrawalRequest model to domain entity."""
    return domain.WithdrawalRequest(
        id=orm_request.id,
        account_id=orm_request.account_id,
        description=orm_request.description,
        amount=_money(orm_request.amount),
        status=domain.WithdrawalStatus(orm_request.status),
        created_at=orm_request.created_at,
        resolved_at=orm_request.resolved_at,
    )
