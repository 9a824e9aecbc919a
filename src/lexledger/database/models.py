"""SQLAlchemy models for lexledger database.

Every foreign key declares its delete policy explicitly. Children are removed
by the database layer before their parents; RESTRICT is the backstop, and the
only SET NULL is TrustAccount.project_id (a deleted project orphans its trust
accounts).
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Enum,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from lexledger.domain.entities import AccountType, TrustAccountType

Base = declarative_base()

MONEY = Numeric(18, 4)


def _now() -> datetime:
    return datetime.now(UTC)


class Company(Base):
    """Company (firm) model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Account(Base):
    """Chart-of-accounts entry."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    type = Column(Enum(AccountType, name="account_type"), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "code", name="uq_account_company_code"),)

    lines = relationship("TransactionLine", back_populates="account", passive_deletes="all")


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Project(Base):
    """Project (matter) model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    number = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    currency = Column(String(3), nullable=False)
    issued_on = Column(Date, nullable=False)


class TimeEntry(Base):
    """Time entry model."""

    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    lawyer = Column(String, nullable=False)
    hours = Column(Numeric(8, 2), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)


class ProjectAssignment(Base):
    """Lawyer-to-project assignment model."""

    __tablename__ = "project_assignments"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="RESTRICT"), nullable=False)
    lawyer = Column(String, nullable=False)
    role = Column(String, nullable=True)


class Transaction(Base):
    """General ledger transaction header."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    date = Column(Date, nullable=False)
    currency = Column(String(3), nullable=False)
    memo = Column(String, nullable=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=True)
    time_entry_id = Column(Integer, ForeignKey("time_entries.id", ondelete="RESTRICT"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    lines = relationship(
        "TransactionLine",
        back_populates="transaction",
        order_by="TransactionLine.position",
        passive_deletes="all",
    )


class TransactionLine(Base):
    """Signed transaction line (debit positive, credit negative)."""

    __tablename__ = "transaction_lines"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="RESTRICT"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False)
    amount = Column(MONEY, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    transaction = relationship("Transaction", back_populates="lines")
    account = relationship("Account", back_populates="lines")


class TrustAccount(Base):
    """Trust account, unique per project, type and currency."""

    __tablename__ = "trust_accounts"

    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    currency = Column(String(3), nullable=False)
    account_type = Column(Enum(TrustAccountType, name="trust_account_type"), nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("project_id", "account_type", "currency", name="uq_trust_account_key"),
    )

    transactions = relationship("TrustTransaction", back_populates="trust_account", passive_deletes="all")


class TrustTransaction(Base):
    """Trust account movement."""

    __tablename__ = "trust_transactions"

    id = Column(Integer, primary_key=True)
    trust_account_id = Column(Integer, ForeignKey("trust_accounts.id", ondelete="RESTRICT"), nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    memo = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    trust_account = relationship("TrustAccount", back_populates="transactions")


class Setting(Base):
    """Keyed setting (e.g. EX_RATE_EGP_USD)."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    value = Column(String, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


def _install_sqlite_pragmas(engine: Engine) -> None:
    """Enforce foreign keys and let SQLAlchemy own BEGIN so SAVEPOINT works."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        _install_sqlite_pragmas(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
