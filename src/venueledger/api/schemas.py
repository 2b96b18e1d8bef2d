from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from venueledger.domain.entities import AccountRole, WithdrawalStatus


class CreateAccountRequest(BaseModel):
    owner_principal_id: str = Field(..., description="Principal (user) that owns the account")
    role: AccountRole = AccountRole.OWNER

    model_config = ConfigDict(json_schema_extra={
        "example": {"owner_principal_id": "owner-42", "role": "OWNER"}
    })


class CreditRevenueRequest(BaseModel):
    amount: Decimal = Field(..., description="Settled booking revenue, must be positive")
    day: Optional[date] = Field(default=None, description="Revenue day, defaults to today")


class CreateWithdrawalRequest(BaseModel):
    description: str = Field(..., description="Reason shown to the admin")
    amount: Optional[Decimal] = Field(
        default=None, description="Amount to withdraw, defaults to the entire available amount"
    )

    model_config = ConfigDict(json_schema_extra={
        "example": {"description": "Weekly payout", "amount": 250000}
    })


class ResolveWithdrawalRequest(BaseModel):
    status: str = Field(..., description="APPROVED or REJECTED")


class AccountResponse(BaseModel):
    id: int
    owner_principal_id: str
    role: AccountRole
    balance: Decimal
    available_amount: Decimal
    reserved_amount: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccountPage(BaseModel):
    items: list[AccountResponse]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)


class WithdrawalResponse(BaseModel):
    id: int
    account_id: int
    description: str
    amount: Decimal
    status: WithdrawalStatus
    created_at: datetime
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WithdrawalPage(BaseModel):
    items: list[WithdrawalResponse]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)


class DailyAmountResponse(BaseModel):
    day: date
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class PeriodSeriesResponse(BaseModel):
    window_days: int
    start_date: date
    end_date: date
    series: list[DailyAmountResponse]
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class StatusBreakdownResponse(BaseModel):
    count: int
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class OwnerSummaryResponse(BaseModel):
    account_id: int
    balance: Decimal
    available_amount: Decimal
    pending_amount: Decimal
    total_withdrawn: Decimal
    average_withdrawal: Decimal
    this_month_total: Decimal
    recent_withdrawals: list[WithdrawalResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class AccountTotalsResponse(BaseModel):
    owner_count: int
    total_balance: Decimal
    total_available: Decimal

    model_config = ConfigDict(from_attributes=True)


class AdminSummaryResponse(BaseModel):
    accounts: list[AccountResponse]
    totals: AccountTotalsResponse
    admin_account: Optional[AccountResponse] = None
    withdrawal_status_breakdown: dict[WithdrawalStatus, StatusBreakdownResponse]
    total_withdrawals: int
    total_withdrawal_amount: Decimal

    model_config = ConfigDict(from_attributes=True)
