"""Shared pytest fixtures for lexledger tests."""

import tempfile
import os
from datetime import date
import pytest

from lexledger.database.factories import create_sqlite_database
from lexledger.domain.account import AccountService
from lexledger.domain.maintenance import MaintenanceService
from lexledger.domain.practice import PracticeService
from lexledger.domain.settings import SettingsService
from lexledger.domain.transaction import TransactionService
from lexledger.domain.trust import TrustService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

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
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def trust_service(temp_db):
    """Create a TrustService with a temporary database."""
    return TrustService(temp_db)


@pytest.fixture
def maintenance_service(temp_db):
    """Create a MaintenanceService with a temporary database."""
    return MaintenanceService(temp_db)


@pytest.fixture
def settings_service(temp_db):
    """Create a SettingsService with a temporary database."""
    return SettingsService(temp_db)


@pytest.fixture
def practice_service(temp_db):
    """Create a PracticeService with a temporary database."""
    return PracticeService(temp_db)


@pytest.fixture
def company(practice_service):
    """A company with no accounts."""
    return practice_service.get_company(practice_service.create_company("Hassan & Partners"))


@pytest.fixture
def standard_company(company, account_service):
    """A company seeded with the standard law-firm chart."""
    account_service.ensure_standard_chart(company.id)
    return company


@pytest.fixture
def accounts(standard_company, account_service):
    """Standard chart accounts keyed by code."""
    return {acc.code: acc for acc in account_service.list_accounts(standard_company.id)}


@pytest.fixture
def client(practice_service, company):
    """A client of the sample company."""
    return practice_service.get_client(practice_service.create_client(company.id, "Nile Shipping Co."))


@pytest.fixture
def project(practice_service, client):
    """A project of the sample client."""
    return practice_service.get_project(practice_service.create_project(client.id, "Charter dispute"))


@pytest.fixture
def post(transaction_service, standard_company, accounts):
    """Post a balanced two-line transaction between account codes."""

    def _post(debit_code, credit_code, amount, txn_date=date(2024, 3, 15), memo=None, currency="USD", **kwargs):
        return transaction_service.post_transaction(
            company_id=standard_company.id,
            date=txn_date,
            lines=[(accounts[debit_code].id, amount), (accounts[credit_code].id, -amount)],
            memo=memo,
            currency=currency,
            **kwargs,
        )

    return _post


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
