"""Per-account exclusive critical sections."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from venueledger.domain.errors import LockTimeoutError, lock_timeout

logger = logging.getLogger(__name__)


class AccountLocks:
    """In-process mutexes keyed by account ID.

    Locks are reentrant so a workflow step holding an account's lock can call
    ledger operations on the same account. Different accounts never contend.

    The registry only grows, one lock per account ever touched. Accounts are
    never deleted, so it stays bounded by the number of accounts.
    """

    def __init__(self, timeout: float = 2.0):
        """Initialize the lock registry.

        Args:
            timeout: Seconds to wait for a busy account before giving up
        """
        self.timeout = timeout
        self._locks: dict[int, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, account_id: int) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[account_id] = lock
            return lock

    @contextmanager
    def hold(self, account_id: int) -> Iterator[None]:
        """Hold the account's lock for the duration of the block.

        Raises:
            LockTimeoutError: If the lock is not acquired within the timeout
        """
        lock = self._lock_for(account_id)
        if not lock.acquire(timeout=self.timeout):
            logger.warning(f"Lock timeout on account {account_id} after {self.timeout}s")
            raise LockTimeoutError(lock_timeout(account_id, self.timeout))
        try:
            yield
        finally:
            lock.release()
