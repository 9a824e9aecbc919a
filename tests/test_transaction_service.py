"""Tests for TransactionService."""

from datetime import date
from decimal import Decimal

import pytest

from lexledger.domain.entities import LineInput
from lexledger.domain.errors import NotFoundError, UnbalancedTransactionError, ValidationError


class TestPostTransaction:
    """Tests for posting transactions."""

    def test_post_balanced_transaction(self, transaction_service, standard_company, accounts):
        """Test that a balanced transaction is stored with its lines in order."""
        txn_id = transaction_service.post_transaction(
            company_id=standard_company.id,
            date=date(2024, 2, 1),
            lines=[
                LineInput(accounts["1100"].id, Decimal("1000.00")),
                LineInput(accounts["4000"].id, Decimal("-900.00")),
                LineInput(accounts["4100"].id, Decimal("-100.00")),
            ],
            memo="Invoice 2024-001",
        )

        txn = transaction_service.get_transaction(txn_id)
        assert txn.memo == "Invoice 2024-001"
        assert txn.currency == "USD"
        assert [line.account_id for line in txn.lines] == [
            accounts["1100"].id,
            accounts["4000"].id,
            accounts["4100"].id,
        ]
        assert sum(line.amount for line in txn.lines) == 0
        assert txn.lines[0].debit == Decimal("1000")
        assert txn.lines[1].credit == Decimal("900")

    def test_unbalanced_transaction_persists_nothing(self, transaction_service, standard_company, accounts):
        """Test that an unbalanced transaction leaves no transaction or lines."""
        with pytest.raises(UnbalancedTransactionError, match="not balanced"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, Decimal("100")), (accounts["4000"].id, Decimal("-99.99"))],
            )

        assert transaction_service.list_transactions(standard_company.id) == []
        assert transaction_service.account_balances(standard_company.id) == []

    def test_sub_cent_difference_rounds_away(self, transaction_service, standard_company, accounts):
        """Test that a residue under half a minor unit is absorbed by rounding."""
        txn_id = transaction_service.post_transaction(
            company_id=standard_company.id,
            date=date(2024, 2, 1),
            lines=[(accounts["1000"].id, "100.004"), (accounts["4000"].id, "-100.00")],
        )

        txn = transaction_service.get_transaction(txn_id)
        assert txn.lines[0].amount == Decimal("100.00")

    def test_three_way_split_stored_lines_sum_to_zero(self, transaction_service, standard_company, accounts):
        """Test that the rounding residue of a split lands on the largest line."""
        txn_id = transaction_service.post_transaction(
            company_id=standard_company.id,
            date=date(2024, 2, 1),
            lines=[
                (accounts["1000"].id, "33.333"),
                (accounts["1010"].id, "33.333"),
                (accounts["4000"].id, "-66.666"),
            ],
        )

        txn = transaction_service.get_transaction(txn_id)
        assert [line.amount for line in txn.lines] == [Decimal("33.33"), Decimal("33.33"), Decimal("-66.66")]
        assert sum(line.amount for line in txn.lines) == 0

    def test_half_minor_unit_difference_rejected(self, transaction_service, standard_company, accounts):
        with pytest.raises(UnbalancedTransactionError):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, "100.005"), (accounts["4000"].id, "-100")],
            )
        assert transaction_service.list_transactions(standard_company.id) == []

    def test_string_and_float_amounts(self, transaction_service, standard_company, accounts):
        txn_id = transaction_service.post_transaction(
            company_id=standard_company.id,
            date=date(2024, 2, 1),
            lines=[(accounts["1000"].id, "$1,250.50"), (accounts["4000"].id, -1250.5)],
        )

        assert transaction_service.get_transaction(txn_id) is not None

    def test_single_line_rejected(self, transaction_service, standard_company, accounts):
        with pytest.raises(ValidationError, match="at least two lines"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, Decimal("0"))],
            )

    def test_zero_line_rejected(self, transaction_service, standard_company, accounts):
        with pytest.raises(ValidationError, match="zero amount"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, Decimal("0")), (accounts["4000"].id, Decimal("0"))],
            )

    def test_non_numeric_amount_rejected(self, transaction_service, standard_company, accounts):
        with pytest.raises(ValidationError, match="Invalid amount"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, "ten"), (accounts["4000"].id, Decimal("-10"))],
            )

    def test_unknown_account_rejected(self, transaction_service, standard_company, accounts):
        with pytest.raises(NotFoundError):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, Decimal("10")), (99999, Decimal("-10"))],
            )

    def test_account_of_other_company_rejected(self, transaction_service, account_service, practice_service, standard_company, accounts):
        other = practice_service.create_company("Other Firm")
        foreign = account_service.create_account(other, "4000", "Fees", "INCOME")

        with pytest.raises(ValidationError, match="does not belong"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, Decimal("10")), (foreign, Decimal("-10"))],
            )
        assert transaction_service.list_transactions(standard_company.id) == []

    def test_invoice_of_other_company_rejected(
        self, transaction_service, practice_service, maintenance_service, standard_company, accounts
    ):
        """Test that a posting cannot reference another company's invoice."""
        other = practice_service.create_company("Other Firm")
        other_client = practice_service.create_client(other, "Delta Freight")
        other_project = practice_service.create_project(other_client, "Customs appeal")
        invoice_id = practice_service.create_invoice(other_project, "INV-9", Decimal("75"), issued_on=date(2024, 1, 5))

        with pytest.raises(ValidationError, match="does not belong"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1100"].id, Decimal("75")), (accounts["4000"].id, Decimal("-75"))],
                invoice_id=invoice_id,
            )
        assert transaction_service.list_transactions(standard_company.id) == []

        report = maintenance_service.wipe_company_financials(other)
        assert report.counts["invoices"] == 1
        assert report.counts["projects"] == 1

    def test_time_entry_of_other_company_rejected(self, transaction_service, practice_service, standard_company, accounts):
        other = practice_service.create_company("Other Firm")
        other_client = practice_service.create_client(other, "Delta Freight")
        other_project = practice_service.create_project(other_client, "Customs appeal")
        entry_id = practice_service.create_time_entry(other_project, "M. Saleh", "1.5", date(2024, 1, 4))

        with pytest.raises(ValidationError, match="does not belong"):
            transaction_service.post_transaction(
                company_id=standard_company.id,
                date=date(2024, 2, 1),
                lines=[(accounts["1110"].id, Decimal("150")), (accounts["4000"].id, Decimal("-150"))],
                time_entry_id=entry_id,
            )
        assert transaction_service.list_transactions(standard_company.id) == []

    def test_unknown_company_rejected(self, transaction_service, accounts):
        with pytest.raises(NotFoundError):
            transaction_service.post_transaction(
                company_id=424242,
                date=date(2024, 2, 1),
                lines=[(accounts["1000"].id, Decimal("10")), (accounts["4000"].id, Decimal("-10"))],
            )

    def test_zero_decimal_currency(self, transaction_service, standard_company, accounts):
        """Test that JPY amounts round to whole yen."""
        txn_id = transaction_service.post_transaction(
            company_id=standard_company.id,
            date=date(2024, 2, 1),
            lines=[(accounts["1000"].id, "1000.4"), (accounts["4000"].id, "-1000")],
            currency="jpy",
        )

        txn = transaction_service.get_transaction(txn_id)
        assert txn.currency == "JPY"
        assert txn.lines[0].amount == Decimal("1000")


class TestQueries:
    """Tests for ledger queries."""

    def test_query_cash_lines(self, transaction_service, standard_company, post):
        post("1000", "4000", Decimal("100"), txn_date=date(2024, 1, 1))
        post("1010", "4000", Decimal("200"), txn_date=date(2024, 1, 2))
        post("1100", "4000", Decimal("300"), txn_date=date(2024, 1, 3))

        lines = transaction_service.query_cash_lines(standard_company.id)

        assert [line.account_code for line in lines] == ["1010", "1000"]
        assert [line.date for line in lines] == [date(2024, 1, 2), date(2024, 1, 1)]

    def test_query_cash_lines_ascending_with_limit(self, transaction_service, standard_company, post):
        for day in range(1, 6):
            post("1000", "4000", Decimal("10"), txn_date=date(2024, 1, day))

        lines = transaction_service.query_cash_lines(standard_company.id, limit=2, order="asc")

        assert [line.date for line in lines] == [date(2024, 1, 1), date(2024, 1, 2)]

    def test_query_cash_lines_custom_prefix(self, transaction_service, standard_company, post):
        post("1020", "2000", Decimal("500"))
        post("1000", "4000", Decimal("100"))

        lines = transaction_service.query_cash_lines(standard_company.id, account_code_prefix="102")

        assert [line.account_code for line in lines] == ["1020"]

    def test_query_cash_lines_invalid_args(self, transaction_service, standard_company):
        with pytest.raises(ValidationError):
            transaction_service.query_cash_lines(standard_company.id, limit=0)
        with pytest.raises(ValidationError):
            transaction_service.query_cash_lines(standard_company.id, order="sideways")

    def test_list_transactions_date_filter(self, transaction_service, standard_company, post):
        post("1000", "4000", Decimal("1"), txn_date=date(2024, 1, 10))
        post("1000", "4000", Decimal("2"), txn_date=date(2024, 2, 10))
        post("1000", "4000", Decimal("3"), txn_date=date(2024, 3, 10))

        txns = transaction_service.list_transactions(
            standard_company.id, start_date=date(2024, 2, 1), end_date=date(2024, 3, 31)
        )

        assert [t.date for t in txns] == [date(2024, 3, 10), date(2024, 2, 10)]

    def test_account_balances(self, transaction_service, standard_company, post):
        post("1000", "4000", Decimal("100"))
        post("5100", "1000", Decimal("30"))

        balances = {b.code: b.balance for b in transaction_service.account_balances(standard_company.id)}

        assert balances == {"1000": Decimal("70"), "4000": Decimal("-100"), "5100": Decimal("30")}

    def test_account_ledger_opening_and_closing(self, transaction_service, accounts, post):
        post("1000", "4000", Decimal("100"), txn_date=date(2024, 1, 15))
        post("1000", "4000", Decimal("50"), txn_date=date(2024, 2, 15))
        post("5100", "1000", Decimal("20"), txn_date=date(2024, 2, 20))

        ledger = transaction_service.account_ledger(accounts["1000"].id, date(2024, 2, 1), date(2024, 2, 29))

        assert ledger.opening == {"USD": Decimal("100")}
        assert [line.amount for line in ledger.lines] == [Decimal("50"), Decimal("-20")]
        assert ledger.closing == {"USD": Decimal("130")}

    def test_account_ledger_rejects_inverted_range(self, transaction_service, accounts):
        with pytest.raises(ValidationError):
            transaction_service.account_ledger(accounts["1000"].id, date(2024, 3, 1), date(2024, 2, 1))

    def test_trial_balance(self, transaction_service, standard_company, post):
        post("1000", "3000", Decimal("5000"), txn_date=date(2024, 1, 1))
        post("1100", "4000", Decimal("1200"), txn_date=date(2024, 1, 10))
        post("5100", "1000", Decimal("300"), txn_date=date(2024, 2, 1))

        report = transaction_service.trial_balance(standard_company.id)

        rows = {row.code: (row.debit, row.credit) for row in report.rows}
        assert rows["1000"] == (Decimal("4700"), Decimal("0"))
        assert rows["3000"] == (Decimal("0"), Decimal("5000"))
        assert report.totals() == {"USD": (Decimal("6200"), Decimal("6200"))}
        assert report.is_balanced

    def test_trial_balance_as_of(self, transaction_service, standard_company, post):
        post("1000", "3000", Decimal("5000"), txn_date=date(2024, 1, 1))
        post("5100", "1000", Decimal("300"), txn_date=date(2024, 2, 1))

        report = transaction_service.trial_balance(standard_company.id, as_of=date(2024, 1, 31))

        assert {row.code for row in report.rows} == {"1000", "3000"}


class TestDeleteTransactionsForProject:
    """Tests for removing a project's postings."""

    def test_deletes_invoice_and_time_postings_only(
        self, transaction_service, practice_service, standard_company, project, post
    ):
        invoice_id = practice_service.create_invoice(project.id, "INV-1", Decimal("500"), issued_on=date(2024, 1, 5))
        entry_id = practice_service.create_time_entry(project.id, "A. Farouk", "2.5", date(2024, 1, 4))
        post("1100", "4000", Decimal("500"), invoice_id=invoice_id)
        post("1110", "4000", Decimal("250"), time_entry_id=entry_id)
        keep = post("1000", "3000", Decimal("1000"))

        deleted = transaction_service.delete_transactions_for_project(project.id)

        assert deleted == 2
        assert [t.id for t in transaction_service.list_transactions(standard_company.id)] == [keep]

    def test_unknown_project(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.delete_transactions_for_project(777)
