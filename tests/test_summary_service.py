"""Tests for summary domain service."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from venueledger.domain.entities import AccountRole, WithdrawalStatus
from venueledger.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def busy_ledger(ledger, withdrawals, admin_account):
    """Two owners with a mix of pending, approved and rejected withdrawals."""
    alice = ledger.create_account("alice")
    bob = ledger.create_account("bob")
    ledger.credit_revenue(alice, date(2025, 1, 10), Decimal("1000"))
    ledger.credit_revenue(bob, date(2025, 1, 11), Decimal("2000"))
    ledger.credit_revenue(admin_account.id, date(2025, 1, 11), Decimal("99"))

    a1 = withdrawals.request_withdrawal(alice, "first", Decimal("100"))
    a2 = withdrawals.request_withdrawal(alice, "second", Decimal("300"))
    b1 = withdrawals.request_withdrawal(bob, "payout", Decimal("500"))
    b2 = withdrawals.request_withdrawal(bob, "rent", Decimal("700"))
    withdrawals.approve(a1.id)
    withdrawals.approve(a2.id)
    withdrawals.reject(b2.id)
    return {"alice": alice, "bob": bob, "admin": admin_account.id, "pending": b1}


class TestOwnerSummary:
    def test_balances_and_stats(self, summaries, busy_ledger):
        view = summaries.get_owner_summary(busy_ledger["alice"])

        assert view.account_id == busy_ledger["alice"]
        assert view.balance == Decimal("600")
        assert view.available_amount == Decimal("600")
        assert view.pending_amount == Decimal("0")
        assert view.total_withdrawn == Decimal("400")
        assert view.average_withdrawal == Decimal("200")

    def test_pending_amount(self, summaries, busy_ledger):
        view = summaries.get_owner_summary(busy_ledger["bob"])

        assert view.pending_amount == Decimal("500")
        assert view.balance == Decimal("2000")
        assert view.available_amount == Decimal("1500")
        assert view.total_withdrawn == Decimal("0")
        assert view.average_withdrawal == Decimal("0")

    def test_recent_withdrawals_newest_first(self, summaries, busy_ledger):
        view = summaries.get_owner_summary(busy_ledger["alice"], recent_limit=1)

        assert len(view.recent_withdrawals) == 1
        assert view.recent_withdrawals[0].description == "second"

    def test_this_month_total(self, summaries, busy_ledger):
        this_month = summaries.get_owner_summary(
            busy_ledger["bob"], today=datetime.now(UTC).date()
        )
        long_ago = summaries.get_owner_summary(busy_ledger["bob"], today=date(2000, 1, 15))

        assert this_month.this_month_total == Decimal("1200")
        assert long_ago.this_month_total == Decimal("0")

    def test_account_without_activity(self, summaries, owner_account):
        view = summaries.get_owner_summary(owner_account.id)

        assert view.balance == Decimal("0")
        assert view.recent_withdrawals == ()
        assert view.this_month_total == Decimal("0")

    def test_unknown_account(self, summaries):
        with pytest.raises(NotFoundError):
            summaries.get_owner_summary(999)


class TestAdminSummary:
    def test_totals_exclude_admin_account(self, summaries, busy_ledger):
        view = summaries.get_admin_summary()

        assert view.totals.owner_count == 2
        assert view.totals.total_balance == Decimal("2600")
        assert view.totals.total_available == Decimal("2100")
        assert {acc.id for acc in view.accounts} == {busy_ledger["alice"], busy_ledger["bob"]}
        assert view.admin_account.id == busy_ledger["admin"]
        assert view.admin_account.balance == Decimal("99")

    def test_status_breakdown(self, summaries, busy_ledger):
        view = summaries.get_admin_summary()
        breakdown = view.withdrawal_status_breakdown

        assert breakdown[WithdrawalStatus.PENDING].count == 1
        assert breakdown[WithdrawalStatus.PENDING].amount == Decimal("500")
        assert breakdown[WithdrawalStatus.APPROVED].count == 2
        assert breakdown[WithdrawalStatus.APPROVED].amount == Decimal("400")
        assert breakdown[WithdrawalStatus.REJECTED].count == 1
        assert breakdown[WithdrawalStatus.REJECTED].amount == Decimal("700")
        assert view.total_withdrawals == 4
        assert view.total_withdrawal_amount == Decimal("1600")

    def test_reflects_latest_mutation(self, summaries, withdrawals, busy_ledger):
        withdrawals.approve(busy_ledger["pending"].id)
        view = summaries.get_admin_summary()

        assert view.withdrawal_status_breakdown[WithdrawalStatus.PENDING].count == 0
        assert view.totals.total_balance == Decimal("2100")

    def test_empty_ledger(self, summaries):
        view = summaries.get_admin_summary()

        assert view.accounts == ()
        assert view.admin_account is None
        assert view.totals.owner_count == 0
        assert set(view.withdrawal_status_breakdown) == set(WithdrawalStatus)
        assert view.total_withdrawal_amount == Decimal("0")


class TestAccountsPage:
    def test_pages_accounts_in_id_order(self, ledger, summaries):
        ids = [ledger.create_account(f"owner-{i}") for i in range(5)]

        first = summaries.list_accounts_page(page=1, page_size=2)
        last = summaries.list_accounts_page(page=3, page_size=2)

        assert [a.id for a in first.items] == ids[:2]
        assert [a.id for a in last.items] == ids[4:]
        assert first.total_items == 5
        assert first.total_pages == 3

    def test_role_filter(self, summaries, owner_account, admin_account):
        result = summaries.list_accounts_page(role=AccountRole.ADMIN)
        assert [a.id for a in result.items] == [admin_account.id]
        assert result.total_items == 1

    @pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (1, 1001)])
    def test_invalid_paging(self, summaries, page, page_size):
        with pytest.raises(ValidationError):
            summaries.list_accounts_page(page=page, page_size=page_size)
