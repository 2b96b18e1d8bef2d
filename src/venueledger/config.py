"""Environment-driven settings."""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

DEFAULT_LOCK_TIMEOUT = 2.0
DEFAULT_LOCK_RETRY_BACKOFF = 0.05


def default_database_path() -> str:
    """Return ~/.venueledger/venueledger.db, creating the directory."""
    db_dir = Path.home() / ".venueledger"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "venueledger.db")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for services, API and CLI."""

    database_url: Optional[str] = None
    database_path: Optional[str] = None
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    lock_retry_backoff: float = DEFAULT_LOCK_RETRY_BACKOFF
    min_withdrawal_amount: Optional[Decimal] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from VENUELEDGER_* environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        min_withdrawal = os.environ.get("VENUELEDGER_MIN_WITHDRAWAL")
        if min_withdrawal:
            try:
                min_withdrawal_amount: Optional[Decimal] = Decimal(min_withdrawal)
            except InvalidOperation:
                raise ValueError(
                    f"VENUELEDGER_MIN_WITHDRAWAL is not a number: '{min_withdrawal}'"
                )
        else:
            min_withdrawal_amount = None

        return cls(
            database_url=os.environ.get("VENUELEDGER_DATABASE_URL"),
            database_path=os.environ.get("VENUELEDGER_DB_PATH"),
            lock_timeout=float(
                os.environ.get("VENUELEDGER_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT)
            ),
            lock_retry_backoff=float(
                os.environ.get("VENUELEDGER_LOCK_RETRY_BACKOFF", DEFAULT_LOCK_RETRY_BACKOFF)
            ),
            min_withdrawal_amount=min_withdrawal_amount,
            log_level=os.environ.get("VENUELEDGER_LOG_LEVEL", "WARNING"),
        )

    def resolve_database_url(self) -> str:
        """Return the SQLAlchemy URL, falling back to the default SQLite file."""
        if self.database_url:
            return self.database_url
        path = self.database_path or default_database_path()
        return f"sqlite:///{path}"
