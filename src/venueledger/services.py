"""Wiring of the domain services over one database."""

from dataclasses import dataclass
from typing import Optional

from venueledger.config import Settings
from venueledger.database.base import Database
from venueledger.domain.ledger import LedgerService
from venueledger.domain.locks import AccountLocks
from venueledger.domain.period import PeriodAggregator
from venueledger.domain.summary import SummaryService
from venueledger.domain.withdrawal import WithdrawalService


@dataclass
class Services:
    """Domain services sharing one database and one lock registry."""

    db: Database
    ledger: LedgerService
    withdrawals: WithdrawalService
    periods: PeriodAggregator
    summaries: SummaryService

    @classmethod
    def build(cls, db: Database, settings: Optional[Settings] = None) -> "Services":
        settings = settings or Settings()
        ledger = LedgerService(db, locks=AccountLocks(timeout=settings.lock_timeout))
        return cls(
            db=db,
            ledger=ledger,
            withdrawals=WithdrawalService(
                db,
                ledger=ledger,
                min_withdrawal_amount=settings.min_withdrawal_amount,
                lock_retry_backoff=settings.lock_retry_backoff,
            ),
            periods=PeriodAggregator(db),
            summaries=SummaryService(db),
        )
