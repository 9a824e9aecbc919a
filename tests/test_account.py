"""Tests for account commands."""

from datetime import date
from decimal import Decimal

import pytest
from lexledger.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_account_create(cli_runner, temp_db, company):
    """Test creating an account."""
    result = _invoke(cli_runner, temp_db, "account", "create", "1030", "Bank - Savings", "--company", str(company.id), "--type", "asset")

    assert result.exit_code == 0
    assert "Created account 1030 'Bank - Savings'" in result.output
    assert "ID:" in result.output


def test_account_create_duplicate_code(cli_runner, temp_db, standard_company):
    result = _invoke(cli_runner, temp_db, "account", "create", "1000", "Cash again", "--company", str(standard_company.id), "--type", "ASSET")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_account_list_empty(cli_runner, temp_db, company):
    """Test listing accounts when none exist."""
    result = _invoke(cli_runner, temp_db, "account", "list", "--company", str(company.id))

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_ordered_by_code(cli_runner, temp_db, standard_company):
    result = _invoke(cli_runner, temp_db, "account", "list", "--company", str(standard_company.id))

    assert result.exit_code == 0
    assert result.output.index("Operating Cash") < result.output.index("Legal Fees")


def test_account_update_by_code(cli_runner, temp_db, account_service, standard_company):
    result = _invoke(cli_runner, temp_db, "account", "update", "1000", "--company", str(standard_company.id), "--name", "Main Bank")

    assert result.exit_code == 0
    assert account_service.get_account_by_code(standard_company.id, "1000").name == "Main Bank"


def test_account_update_unknown(cli_runner, temp_db, standard_company):
    result = _invoke(cli_runner, temp_db, "account", "update", "9999", "--company", str(standard_company.id), "--name", "X")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_account_delete_in_use(cli_runner, temp_db, standard_company, post):
    post("1000", "4000", Decimal("10"))

    result = _invoke(cli_runner, temp_db, "account", "delete", "1000", "--company", str(standard_company.id))

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_reset_chart_requires_confirm(cli_runner, temp_db, company):
    result = _invoke(cli_runner, temp_db, "account", "reset-chart", "--company", str(company.id))

    assert result.exit_code == 1
    assert "--confirm" in result.output


def test_reset_chart(cli_runner, temp_db, account_service, standard_company):
    result = _invoke(cli_runner, temp_db, "account", "reset-chart", "--company", str(standard_company.id), "--confirm")

    assert result.exit_code == 0
    assert "Chart reset: 5 accounts created" in result.output
    assert len(account_service.list_accounts(standard_company.id)) == 5


def test_ensure_standard(cli_runner, temp_db, company):
    result = _invoke(cli_runner, temp_db, "account", "ensure-standard", "--company", str(company.id))

    assert result.exit_code == 0
    assert "Created 20, merged 0, removed 0 accounts" in result.output


def test_ledger_and_trial_balance(cli_runner, temp_db, standard_company, post):
    post("1000", "4000", Decimal("100"), txn_date=date(2024, 1, 10), memo="Retainer fee")
    post("1000", "4000", Decimal("50"), txn_date=date(2024, 2, 10), memo="Consultation")

    result = _invoke(
        cli_runner, temp_db, "account", "ledger", "1000", "--company", str(standard_company.id), "--period", "2024-02"
    )

    assert result.exit_code == 0
    assert "Consultation" in result.output
    assert "Retainer fee" not in result.output
    assert "Opening" in result.output and "100.00" in result.output
    assert "Closing" in result.output and "150.00" in result.output

    result = _invoke(cli_runner, temp_db, "account", "trial-balance", "--company", str(standard_company.id))

    assert result.exit_code == 0
    assert "Balanced" in result.output
    assert "NOT BALANCED" not in result.output
