"""SQLAlchemy models for the venueledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from venueledger.domain.entities import AccountRole, WithdrawalStatus

Base = declarative_base()

MONEY = Numeric(18, 2)


class Account(Base):
    """Cash-flow account model, one per principal."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_principal_id = Column(String, unique=True, nullable=False)
    role = Column(Enum(AccountRole, name="account_role"), nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    available_amount = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("available_amount >= 0", name="ck_available_non_negative"),
        CheckConstraint("available_amount <= balance", name="ck_available_within_balance"),
    )

    # Relationships
    revenue_entries = relationship("RevenueEntry", back_populates="account")
    withdrawals = relationship("WithdrawalRequest", back_populates="account")


class RevenueEntry(Base):
    """Daily revenue model, one row per account per day."""

    __tablename__ = "revenue_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    day = Column(Date, nullable=False)
    amount_for_day = Column(MONEY, nullable=False)

    __table_args__ = (UniqueConstraint("account_id", "day", name="uq_account_day"),)

    # Relationships
    account = relationship("Account", back_populates="revenue_entries")


class WithdrawalRequest(Base):
    """Withdrawal request model."""

    __tablename__ = "withdrawal_requests"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    description = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    status = Column(
        Enum(WithdrawalStatus, name="withdrawal_status"),
        nullable=False,
        default=WithdrawalStatus.PENDING,
    )
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    resolved_at = Column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_withdrawal_amount_positive"),
        Index("ix_withdrawal_account_id", "account_id"),
        Index("ix_withdrawal_status", "status"),
    )

    # Relationships
    account = relationship("Account", back_populates="withdrawals")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are thread-scoped, the connection pool is shared
        connect_args = {"check_same_thread": False, "timeout": 30}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
