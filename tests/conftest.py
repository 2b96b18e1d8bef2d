"""Shared pytest fixtures for venueledger tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from venueledger.config import Settings
from venueledger.database.factories import create_sqlite_database
from venueledger.domain.entities import AccountRole
from venueledger.domain.period import utc_today
from venueledger.services import Services


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def services(temp_db):
    """Create wired services over a temporary database."""
    return Services.build(temp_db, Settings(lock_timeout=5.0, lock_retry_backoff=0.01))


@pytest.fixture
def ledger(services):
    return services.ledger


@pytest.fixture
def withdrawals(services):
    return services.withdrawals


@pytest.fixture
def periods(services):
    return services.periods


@pytest.fixture
def summaries(services):
    return services.summaries


@pytest.fixture
def owner_account(ledger):
    """Create an owner account with no funds."""
    account_id = ledger.create_account("owner-1", AccountRole.OWNER)
    return ledger.get_account(account_id)


@pytest.fixture
def funded_account(ledger):
    """Create an owner account holding 1,000,000 of revenue."""
    account_id = ledger.create_account("owner-funded", AccountRole.OWNER)
    return ledger.credit_revenue(account_id, utc_today(), Decimal("1000000"))


@pytest.fixture
def admin_account(ledger):
    """Create the admin account."""
    account_id = ledger.create_account("admin-1", AccountRole.ADMIN)
    return ledger.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
