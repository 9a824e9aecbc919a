"""Tests for AccountService."""

from datetime import date
from decimal import Decimal

import pytest

from lexledger.domain.chart import ROOT_CHART, STANDARD_CHART
from lexledger.domain.entities import AccountSeed, AccountType
from lexledger.domain.errors import (
    DependencyError,
    DuplicateCodeError,
    ForeignKeyViolation,
    NotFoundError,
    ValidationError,
)


class TestCreateAccount:
    """Tests for account creation."""

    def test_create_account(self, account_service, company):
        """Test creating an account."""
        account_id = account_service.create_account(company.id, "1000", "Operating Cash", "asset")

        account = account_service.get_account(account_id)
        assert account.code == "1000"
        assert account.name == "Operating Cash"
        assert account.type == AccountType.ASSET
        assert account.company_id == company.id

    def test_create_duplicate_code(self, account_service, company):
        """Test that a code can only be used once per company."""
        account_service.create_account(company.id, "1000", "Operating Cash", AccountType.ASSET)

        with pytest.raises(DuplicateCodeError, match="already exists"):
            account_service.create_account(company.id, "1000", "Other Cash", AccountType.ASSET)

    def test_same_code_in_two_companies(self, account_service, practice_service, company):
        """Test that codes are unique per company, not globally."""
        other = practice_service.create_company("Other Firm")
        account_service.create_account(company.id, "1000", "Cash", AccountType.ASSET)
        account_service.create_account(other, "1000", "Cash", AccountType.ASSET)

        assert len(account_service.list_accounts(company.id)) == 1
        assert len(account_service.list_accounts(other)) == 1

    def test_create_account_unknown_company(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.create_account(999, "1000", "Cash", AccountType.ASSET)

    @pytest.mark.parametrize("code,name,type_", [("", "Cash", "ASSET"), ("1000", " ", "ASSET"), ("1000", "Cash", "ROCK")])
    def test_create_account_invalid(self, account_service, company, code, name, type_):
        with pytest.raises(ValidationError):
            account_service.create_account(company.id, code, name, type_)

    def test_list_accounts_ordered_by_code(self, account_service, company):
        for code in ("5000", "1000", "3000"):
            account_service.create_account(company.id, code, f"Account {code}", AccountType.ASSET)

        codes = [acc.code for acc in account_service.list_accounts(company.id)]
        assert codes == ["1000", "3000", "5000"]


class TestUpdateAndDelete:
    """Tests for account updates and deletion."""

    def test_rename_account(self, account_service, accounts):
        account_service.update_account(accounts["1010"].id, name="Bank - Main")

        assert account_service.get_account(accounts["1010"].id).name == "Bank - Main"

    def test_change_type_without_lines(self, account_service, accounts):
        account_service.update_account(accounts["1200"].id, type="EXPENSE")

        assert account_service.get_account(accounts["1200"].id).type == AccountType.EXPENSE

    def test_change_type_with_lines_refused(self, account_service, accounts, post):
        post("1000", "4000", Decimal("100"))

        with pytest.raises(DependencyError, match="Cannot change type"):
            account_service.update_account(accounts["1000"].id, type="LIABILITY")
        assert account_service.get_account(accounts["1000"].id).type == AccountType.ASSET

    def test_delete_unused_account(self, account_service, accounts):
        account_service.delete_account(accounts["5200"].id)

        assert account_service.get_account(accounts["5200"].id) is None

    def test_delete_account_with_lines_refused(self, account_service, accounts, post):
        post("1000", "4000", Decimal("100"))

        with pytest.raises(ForeignKeyViolation):
            account_service.delete_account(accounts["4000"].id)
        assert account_service.get_account(accounts["4000"].id) is not None

    def test_delete_missing_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.delete_account(12345)


class TestResetChartOfAccounts:
    """Tests for replacing a company's chart."""

    def test_reset_creates_root_chart_in_order(self, account_service, accounts, standard_company):
        created = account_service.reset_chart_of_accounts(standard_company.id)

        assert [(a.code, a.name) for a in created] == [
            ("1", "Assets"),
            ("2", "Liabilities"),
            ("3", "Equity"),
            ("4", "Revenue"),
            ("5", "Expenses"),
        ]
        # Insertion order shows in the IDs
        assert [a.id for a in created] == sorted(a.id for a in created)
        assert len(account_service.list_accounts(standard_company.id)) == len(ROOT_CHART)

    def test_reset_with_custom_entries(self, account_service, company):
        entries = [
            AccountSeed("100", "Cash", AccountType.ASSET),
            AccountSeed("400", "Fees", AccountType.INCOME),
        ]

        created = account_service.reset_chart_of_accounts(company.id, entries)

        assert [a.code for a in created] == ["100", "400"]

    def test_reset_refused_when_lines_exist(self, account_service, accounts, standard_company, post):
        post("1000", "4000", Decimal("100"))

        with pytest.raises(ForeignKeyViolation):
            account_service.reset_chart_of_accounts(standard_company.id)
        assert len(account_service.list_accounts(standard_company.id)) == len(STANDARD_CHART)

    def test_reset_duplicate_entries_leave_chart_untouched(self, account_service, accounts, standard_company):
        entries = [
            AccountSeed("1", "Assets", AccountType.ASSET),
            AccountSeed("1", "Assets again", AccountType.ASSET),
        ]

        with pytest.raises(DuplicateCodeError):
            account_service.reset_chart_of_accounts(standard_company.id, entries)
        assert len(account_service.list_accounts(standard_company.id)) == len(STANDARD_CHART)


class TestEnsureStandardChart:
    """Tests for seeding and migrating to the standard chart."""

    def test_seeds_empty_company(self, account_service, company):
        stats = account_service.ensure_standard_chart(company.id)

        assert stats["created"] == len(STANDARD_CHART)
        codes = [a.code for a in account_service.list_accounts(company.id)]
        assert codes == sorted(seed.code for seed in STANDARD_CHART)

    def test_rerun_is_noop(self, account_service, standard_company):
        stats = account_service.ensure_standard_chart(standard_company.id)

        assert stats == {"created": 0, "merged": 0, "removed": 0}

    def test_legacy_codes_merge_into_seeded_accounts(self, account_service, transaction_service, company):
        legacy = account_service.create_account(company.id, "CASH-MAIN", "Main cash", AccountType.ASSET)
        income = account_service.create_account(company.id, "INCOME", "Income", AccountType.INCOME)
        transaction_service.post_transaction(company.id, date(2024, 1, 5), [(legacy, Decimal("10")), (income, Decimal("-10"))])

        stats = account_service.ensure_standard_chart(company.id)

        assert stats == {"created": len(STANDARD_CHART), "merged": 2, "removed": 0}
        assert account_service.get_account(legacy) is None
        assert account_service.get_account(income) is None
        balances = {b.code: b.balance for b in transaction_service.account_balances(company.id)}
        assert balances == {"1010": Decimal("10"), "4000": Decimal("-10")}

    def test_legacy_account_takes_standard_name(self, account_service, company):
        account_service.create_account(company.id, "EXPENSE", "Misc Legacy", AccountType.EXPENSE)

        account_service.ensure_standard_chart(company.id)

        payroll = account_service.get_account_by_code(company.id, "5000")
        assert payroll.name == "Payroll & Benefits"
        assert account_service.get_account_by_code(company.id, "EXPENSE") is None

    def test_merges_legacy_into_existing_standard(self, account_service, transaction_service, standard_company, accounts):
        legacy = account_service.create_account(standard_company.id, "TRUST-ASSET", "Trust", AccountType.ASSET)
        transaction_service.post_transaction(
            standard_company.id,
            date(2024, 1, 5),
            [(legacy, Decimal("250")), (accounts["2000"].id, Decimal("-250"))],
        )

        stats = account_service.ensure_standard_chart(standard_company.id)

        assert stats["merged"] == 1
        assert account_service.get_account(legacy) is None
        balances = {b.code: b.balance for b in transaction_service.account_balances(standard_company.id)}
        assert balances["1020"] == Decimal("250")

    def test_removes_unused_nonstandard_accounts(self, account_service, standard_company):
        account_service.create_account(standard_company.id, "9999", "Scratch", AccountType.EXPENSE)

        stats = account_service.ensure_standard_chart(standard_company.id)

        assert stats["removed"] == 1
        assert account_service.get_account_by_code(standard_company.id, "9999") is None
