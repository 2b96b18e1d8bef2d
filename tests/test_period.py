"""Tests for period aggregation."""

from datetime import date, datetime, timedelta, UTC
from decimal import Decimal

import pytest

from venueledger.domain.entities import WithdrawalStatus
from venueledger.domain.errors import NotFoundError, ValidationError
from venueledger.domain.period import WINDOW_DAYS, trailing_window, zero_filled_series


def test_trailing_window_ends_today_inclusive():
    start, end = trailing_window(7, today=date(2025, 1, 10))
    assert start == date(2025, 1, 4)
    assert end == date(2025, 1, 10)


@pytest.mark.parametrize("window", [0, 1, 14, 31, 365])
def test_trailing_window_rejects_other_windows(window):
    with pytest.raises(ValidationError, match="Unsupported window"):
        trailing_window(window)


def test_zero_filled_series_fills_gaps():
    series = zero_filled_series(
        date(2025, 1, 1), date(2025, 1, 3), {date(2025, 1, 2): Decimal("5")}
    )
    assert [(p.day, p.amount) for p in series] == [
        (date(2025, 1, 1), Decimal("0")),
        (date(2025, 1, 2), Decimal("5")),
        (date(2025, 1, 3), Decimal("0")),
    ]


class TestAggregate:
    @pytest.mark.parametrize("window", WINDOW_DAYS)
    def test_series_is_complete_and_ascending(self, periods, owner_account, window):
        today = date(2025, 3, 31)
        result = periods.aggregate(owner_account.id, window, today=today)

        days = [p.day for p in result.series]
        assert len(days) == window
        assert days == sorted(days)
        assert len(set(days)) == window
        assert days[-1] == today
        assert days[0] == today - timedelta(days=window - 1)
        assert result.window_days == window
        assert result.total == Decimal("0")

    def test_single_day_of_activity(self, ledger, periods, owner_account):
        ledger.credit_revenue(owner_account.id, date(2025, 1, 10), Decimal("500000"))

        result = periods.aggregate(owner_account.id, 30, today=date(2025, 1, 20))

        nonzero = [p for p in result.series if p.amount != 0]
        assert len(result.series) == 30
        assert len(nonzero) == 1
        assert nonzero[0].day == date(2025, 1, 10)
        assert result.total == Decimal("500000")

    def test_total_is_sum_of_series(self, ledger, periods, owner_account):
        today = date(2025, 1, 31)
        for offset, amount in [(0, "100"), (3, "250.50"), (6, "49.50"), (10, "1000")]:
            ledger.credit_revenue(owner_account.id, today - timedelta(days=offset), Decimal(amount))

        result = periods.aggregate(owner_account.id, 7, today=today)

        assert result.total == sum(p.amount for p in result.series)
        # The day 10 days back falls outside the 7-day window
        assert result.total == Decimal("400.00")

    def test_future_revenue_is_excluded(self, ledger, periods, owner_account):
        ledger.credit_revenue(owner_account.id, date(2025, 2, 1), Decimal("10"))
        result = periods.aggregate(owner_account.id, 7, today=date(2025, 1, 31))
        assert result.total == Decimal("0")

    def test_unknown_account(self, periods):
        with pytest.raises(NotFoundError):
            periods.aggregate(999, 7)

    def test_invalid_window(self, periods, owner_account):
        with pytest.raises(ValidationError):
            periods.aggregate(owner_account.id, 14)


class TestAggregateWithdrawals:
    def test_buckets_requests_by_filing_day(self, ledger, withdrawals, periods, funded_account):
        withdrawals.request_withdrawal(funded_account.id, "a", Decimal("100"))
        approved = withdrawals.request_withdrawal(funded_account.id, "b", Decimal("250"))
        withdrawals.approve(approved.id)
        today = datetime.now(UTC).date()

        result = periods.aggregate_withdrawals(7, today=today)

        assert len(result.series) == 7
        assert result.series[-1].day == today
        assert result.series[-1].amount == Decimal("350")
        assert result.total == Decimal("350")

    def test_filters_by_status_and_account(
        self, ledger, withdrawals, periods, funded_account, owner_account
    ):
        withdrawals.request_withdrawal(funded_account.id, "a", Decimal("100"))
        approved = withdrawals.request_withdrawal(funded_account.id, "b", Decimal("250"))
        withdrawals.approve(approved.id)
        today = datetime.now(UTC).date()

        approved_only = periods.aggregate_withdrawals(
            30, status=WithdrawalStatus.APPROVED, today=today
        )
        other_account = periods.aggregate_withdrawals(
            30, account_id=owner_account.id, today=today
        )

        assert approved_only.total == Decimal("250")
        assert other_account.total == Decimal("0")
        assert len(other_account.series) == 30

    def test_window_before_any_request(self, withdrawals, periods, funded_account):
        withdrawals.request_withdrawal(funded_account.id, "a", Decimal("100"))
        result = periods.aggregate_withdrawals(90, today=date(2000, 1, 1))
        assert result.total == Decimal("0")

    def test_unknown_account(self, periods):
        with pytest.raises(NotFoundError):
            periods.aggregate_withdrawals(7, account_id=999)
