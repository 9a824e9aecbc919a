"""Destructive maintenance operations."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from lexledger.database.base import COMPANY_RECORD_KINDS, PROJECT_RECORD_KINDS, Database
from lexledger.domain import errors
from lexledger.domain.chart import BANK_CODE, TRUST_CASH_CODE
from lexledger.domain.currency import normalize_currency
from lexledger.domain.entities import DeletionReport
from lexledger.domain.errors import NotFoundError
from lexledger.domain.transaction import TransactionService

logger = structlog.get_logger(__name__)

TRUST_RECORD_KINDS = ("trust_transactions", "trust_accounts")
LEGACY_TRUST_CURRENCY = "EGP"
LEGACY_TRUST_MEMO = f"Move legacy trust cash to {TRUST_CASH_CODE}"


class MaintenanceService:
    """Service for company-wide deletions, project deletions and ledger repairs."""

    def __init__(self, db: Database):
        """Initialize maintenance service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_company(self, company_id: int) -> None:
        if self.db.get_company(company_id) is None:
            raise NotFoundError(errors.company_not_found(company_id))

    def preview_company_wipe(self, company_id: int) -> DeletionReport:
        """Count what wipe_company_financials would delete, without deleting."""
        self._require_company(company_id)
        return DeletionReport(
            counts={kind: self.db.count_company_records(kind, company_id) for kind in COMPANY_RECORD_KINDS}
        )

    def wipe_company_financials(self, company_id: int) -> DeletionReport:
        """Delete every financial and practice record of a company.

        Tables are emptied children first (see COMPANY_RECORD_KINDS) inside a
        single atomic unit: if any step fails, no row is deleted. The company
        row itself is kept, so re-running reports zero counts.

        Returns:
            Per-table deletion counts
        """
        self._require_company(company_id)
        report = DeletionReport()

        with self.db.atomic():
            for kind in COMPANY_RECORD_KINDS:
                report.counts[kind] = self.db.delete_company_records(kind, company_id)

        logger.info("company_financials_wiped", company_id=company_id, total=report.total, **report.counts)
        return report

    def clear_trust_accounts(self, company_id: int) -> DeletionReport:
        """Delete all trust transactions, then trust accounts, of a company's clients."""
        self._require_company(company_id)
        report = DeletionReport()

        with self.db.atomic():
            for kind in TRUST_RECORD_KINDS:
                report.counts[kind] = self.db.delete_company_records(kind, company_id)

        logger.info("trust_accounts_cleared", company_id=company_id, **report.counts)
        return report

    def delete_project(self, project_id: int) -> DeletionReport:
        """Delete a project and the records hanging off it.

        Ledger transactions tied to the project's invoices or time entries go
        first, then time entries, assignments and invoices. Trust accounts are
        detached rather than deleted and show up as orphans afterwards.

        Raises:
            NotFoundError: If the project does not exist
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(errors.project_not_found(project_id))
        report = DeletionReport()

        with self.db.atomic():
            transactions, lines = self.db.delete_project_transactions(project_id)
            report.counts["transaction_lines"] = lines
            report.counts["transactions"] = transactions
            for kind in PROJECT_RECORD_KINDS:
                report.counts[kind] = self.db.delete_project_records(kind, project_id)
            report.counts["trust_accounts_detached"] = self.db.detach_trust_accounts(project_id)
            self.db.delete_project(project_id)
            report.counts["projects"] = 1

        logger.info("project_deleted", project_id=project_id, **report.counts)
        return report

    def move_legacy_trust_cash(
        self, company_id: int, currency: Optional[str] = LEGACY_TRUST_CURRENCY, on: Optional[date] = None
    ) -> Decimal:
        """Move client money left on the bank account over to client trust cash.

        Older books held trust receipts on 1010. The net debit balance of 1010
        in the given currency is posted across to 1020 in one transaction.

        Args:
            company_id: Company ID
            currency: Currency of the balance to move, EGP by default
            on: Posting date, defaults to today

        Returns:
            The amount moved, zero when 1010 has no positive balance

        Raises:
            NotFoundError: If the company or either account is missing
        """
        self._require_company(company_id)
        currency = normalize_currency(currency)
        bank = self.db.get_account_by_code(company_id, BANK_CODE)
        trust_cash = self.db.get_account_by_code(company_id, TRUST_CASH_CODE)
        for code, account in ((BANK_CODE, bank), (TRUST_CASH_CODE, trust_cash)):
            if account is None:
                raise NotFoundError(f"Accounts missing: {errors.account_code_not_found(company_id, code)}")

        balance = sum(
            (line.amount for line in self.db.list_ledger_lines(account_id=bank.id, currency=currency)),
            Decimal("0"),
        )
        if balance <= 0:
            logger.info("legacy_trust_cash_skipped", company_id=company_id, currency=currency, balance=str(balance))
            return Decimal("0")

        transaction_id = TransactionService(self.db).post_transaction(
            company_id=company_id,
            date=on or date.today(),
            lines=[(trust_cash.id, balance), (bank.id, -balance)],
            memo=LEGACY_TRUST_MEMO,
            currency=currency,
        )
        logger.info(
            "legacy_trust_cash_moved",
            company_id=company_id,
            transaction_id=transaction_id,
            amount=str(balance),
            currency=currency,
        )
        return balance
