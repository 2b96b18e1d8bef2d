"""Tests for concurrent access to the same accounts."""

import threading
from datetime import date
from decimal import Decimal

import pytest

from venueledger.domain.entities import WithdrawalStatus
from venueledger.domain.errors import AlreadyResolvedError, InsufficientFundsError, LockTimeoutError
from venueledger.domain.locks import AccountLocks
from venueledger.domain.period import utc_today


def _run_in_threads(temp_db, count, target):
    """Run target(i) in count threads at once and collect results or errors."""
    barrier = threading.Barrier(count)
    results = [None] * count

    def worker(i):
        barrier.wait()
        try:
            results[i] = target(i)
        except Exception as e:
            results[i] = e
        finally:
            temp_db.disconnect()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


def test_concurrent_requests_never_overdraw(ledger, withdrawals, temp_db):
    account_id = ledger.create_account("owner-race")
    ledger.credit_revenue(account_id, utc_today(), Decimal("1000"))

    results = _run_in_threads(
        temp_db,
        20,
        lambda i: withdrawals.request_withdrawal(account_id, f"payout {i}", Decimal("100")),
    )

    succeeded = [r for r in results if not isinstance(r, Exception)]
    failed = [r for r in results if isinstance(r, Exception)]
    assert len(succeeded) == 10
    assert all(isinstance(e, InsufficientFundsError) for e in failed)

    account = ledger.get_account(account_id)
    assert account.available_amount == Decimal("0")
    assert account.balance == Decimal("1000")


def test_concurrent_resolution_applies_once(ledger, withdrawals, temp_db):
    account_id = ledger.create_account("owner-race")
    ledger.credit_revenue(account_id, utc_today(), Decimal("1000"))
    request = withdrawals.request_withdrawal(account_id, "payout", Decimal("400"))

    statuses = [WithdrawalStatus.APPROVED, WithdrawalStatus.REJECTED] * 5
    results = _run_in_threads(temp_db, 10, lambda i: withdrawals.resolve(request.id, statuses[i]))

    succeeded = [r for r in results if not isinstance(r, Exception)]
    failed = [r for r in results if isinstance(r, Exception)]
    assert len(succeeded) == 1
    assert len(failed) == 9
    assert all(isinstance(e, AlreadyResolvedError) for e in failed)

    final = withdrawals.get_withdrawal(request.id)
    account = ledger.get_account(account_id)
    if final.status is WithdrawalStatus.APPROVED:
        assert (account.balance, account.available_amount) == (Decimal("600"), Decimal("600"))
    else:
        assert (account.balance, account.available_amount) == (Decimal("1000"), Decimal("1000"))


def test_concurrent_credits_all_land(ledger, temp_db):
    account_id = ledger.create_account("owner-race")

    results = _run_in_threads(
        temp_db,
        10,
        lambda i: ledger.credit_revenue(account_id, date(2025, 1, 10), Decimal("10")),
    )

    assert not [r for r in results if isinstance(r, Exception)]
    account = ledger.get_account(account_id)
    assert account.balance == Decimal("100")
    assert ledger.list_revenue_entries(account_id)[0].amount_for_day == Decimal("100")


class TestAccountLocks:
    def test_lock_is_reentrant(self):
        locks = AccountLocks(timeout=0.1)
        with locks.hold(1):
            with locks.hold(1):
                pass

    def test_busy_account_times_out(self):
        locks = AccountLocks(timeout=0.05)
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold(1):
                held.set()
                release.wait()

        thread = threading.Thread(target=holder)
        thread.start()
        held.wait()
        try:
            with pytest.raises(LockTimeoutError, match="Account 1 is busy"):
                with locks.hold(1):
                    pass
            # Other accounts are unaffected
            with locks.hold(2):
                pass
        finally:
            release.set()
            thread.join()
