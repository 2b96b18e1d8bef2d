"""Domain layer for venueledger."""

__all__ = [
    "LedgerService",
    "WithdrawalService",
    "PeriodAggregator",
    "SummaryService",
    "AccountLocks",
]

_SERVICES = {
    "LedgerService": "venueledger.domain.ledger",
    "WithdrawalService": "venueledger.domain.withdrawal",
    "PeriodAggregator": "venueledger.domain.period",
    "SummaryService": "venueledger.domain.summary",
    "AccountLocks": "venueledger.domain.locks",
}


# Services import the database layer, which imports entities from this
# package, so services are resolved lazily
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
