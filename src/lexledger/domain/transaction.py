"""Transaction ledger domain service."""

from typing import Optional, Sequence
from datetime import date
from decimal import Decimal
from collections import defaultdict

import structlog

from lexledger.database.base import Database
from lexledger.domain import errors
from lexledger.domain.chart import CASH_CODE_PREFIX
from lexledger.domain.currency import minor_unit, normalize_currency, quantize
from lexledger.domain.entities import (
    AccountBalance,
    AccountLedger,
    LedgerLine,
    LineInput,
    Transaction as TransactionEntity,
    TrialBalance,
    TrialBalanceRow,
)
from lexledger.domain.errors import NotFoundError, UnbalancedTransactionError, ValidationError
from lexledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

DEFAULT_CASH_LEDGER_LIMIT = 300


class TransactionService:
    """Service for posting and querying general ledger transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def post_transaction(
        self,
        company_id: int,
        date: date,
        lines: Sequence[LineInput | tuple[int, object]],
        memo: Optional[str] = None,
        currency: Optional[str] = None,
        invoice_id: Optional[int] = None,
        time_entry_id: Optional[int] = None,
    ) -> int:
        """Post a balanced transaction.

        Args:
            company_id: Company the transaction belongs to
            date: Transaction date
            lines: Line inputs or (account_id, amount) pairs; debits positive,
                credits negative
            memo: Optional memo
            currency: Currency of every line, defaults to USD
            invoice_id: Optional invoice the posting belongs to
            time_entry_id: Optional time entry the posting belongs to

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the company, an account, the invoice or the time
                entry does not exist
            ValidationError: If fewer than two lines are given, an amount is
                not numeric or zero, or an account, the invoice or the time
                entry belongs to another company
            UnbalancedTransactionError: If the lines miss zero by half a minor
                unit or more. Smaller residues land on the largest line after
                rounding.
        """
        currency = normalize_currency(currency)
        if self.db.get_company(company_id) is None:
            raise NotFoundError(errors.company_not_found(company_id))
        if len(lines) < 2:
            raise ValidationError("A transaction needs at least two lines")

        raw_lines: list[tuple[int, Decimal]] = []
        for line in lines:
            account_id, raw_amount = (line.account_id, line.amount) if isinstance(line, LineInput) else line
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(errors.account_not_found(account_id))
            if account.company_id != company_id:
                raise ValidationError(f"Account {account_id} does not belong to company {company_id}")
            try:
                amount = to_decimal(raw_amount)
            except ValueError as e:
                raise ValidationError(f"Invalid amount for account {account_id}: {e}")
            if quantize(amount, currency) == 0:
                raise ValidationError(f"Line for account {account_id} has a zero amount")
            raw_lines.append((account_id, amount))

        raw_total = sum((amount for _, amount in raw_lines), Decimal("0"))
        if abs(raw_total) >= minor_unit(currency) / 2:
            raise UnbalancedTransactionError(errors.unbalanced_transaction(quantize(raw_total, currency), currency))
        resolved = self._rounded_lines(raw_lines, currency)

        if invoice_id is not None:
            invoice = self.db.get_invoice(invoice_id)
            if invoice is None:
                raise NotFoundError(f"Invoice {invoice_id} not found")
            self._require_company_project(invoice.project_id, company_id, f"Invoice {invoice_id}")
        if time_entry_id is not None:
            entry = self.db.get_time_entry(time_entry_id)
            if entry is None:
                raise NotFoundError(f"Time entry {time_entry_id} not found")
            self._require_company_project(entry.project_id, company_id, f"Time entry {time_entry_id}")

        transaction_id = self.db.create_transaction(
            company_id=company_id,
            date=date,
            currency=currency,
            lines=resolved,
            memo=memo,
            invoice_id=invoice_id,
            time_entry_id=time_entry_id,
        )
        logger.info(
            "transaction_posted",
            company_id=company_id,
            transaction_id=transaction_id,
            lines=len(resolved),
            currency=currency,
        )
        return transaction_id

    @staticmethod
    def _rounded_lines(raw_lines: list[tuple[int, Decimal]], currency: str) -> list[tuple[int, Decimal]]:
        """Round lines to the minor unit, putting any rounding residue on the largest line."""
        rounded = [(account_id, quantize(amount, currency)) for account_id, amount in raw_lines]
        residue = sum((amount for _, amount in rounded), Decimal("0"))
        if residue != 0:
            largest = max(range(len(rounded)), key=lambda i: abs(rounded[i][1]))
            account_id, amount = rounded[largest]
            rounded[largest] = (account_id, amount - residue)
        return rounded

    def _require_company_project(self, project_id: int, company_id: int, label: str) -> None:
        project = self.db.get_project(project_id)
        if project is None or project.company_id != company_id:
            raise ValidationError(f"{label} does not belong to company {company_id}")

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self, company_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[TransactionEntity]:
        """List a company's transactions, newest first."""
        return self.db.list_transactions(company_id, start_date=start_date, end_date=end_date)

    def query_cash_lines(
        self,
        company_id: int,
        account_code_prefix: str = CASH_CODE_PREFIX,
        limit: int = DEFAULT_CASH_LEDGER_LIMIT,
        order: str = "desc",
    ) -> list[LedgerLine]:
        """Return lines posted to accounts whose code starts with a prefix.

        Args:
            company_id: Company ID
            account_code_prefix: Code prefix, "10" selects the cash accounts
            limit: Maximum number of lines
            order: "desc" (newest first) or "asc"

        Raises:
            ValidationError: If limit is not positive or order is unknown
        """
        if limit <= 0:
            raise ValidationError("Limit must be positive")
        order = order.lower()
        if order not in ("asc", "desc"):
            raise ValidationError(f"Unknown order '{order}'. Use 'asc' or 'desc'")
        return self.db.list_ledger_lines(
            company_id=company_id,
            code_prefix=account_code_prefix,
            limit=limit,
            descending=order == "desc",
        )

    def delete_transactions_for_project(self, project_id: int) -> int:
        """Delete every transaction tied to a project's invoices or time entries.

        Returns:
            Number of transactions deleted

        Raises:
            NotFoundError: If the project does not exist
        """
        if self.db.get_project(project_id) is None:
            raise NotFoundError(errors.project_not_found(project_id))
        transactions_deleted, lines_deleted = self.db.delete_project_transactions(project_id)
        logger.info(
            "project_transactions_deleted",
            project_id=project_id,
            transactions=transactions_deleted,
            lines=lines_deleted,
        )
        return transactions_deleted

    def account_balances(self, company_id: int) -> list[AccountBalance]:
        """Net balance of each account per currency, ordered by code."""
        accounts = {acc.id: acc for acc in self.db.list_accounts(company_id)}
        totals: dict[tuple[int, str], Decimal] = defaultdict(Decimal)
        for line in self.db.list_ledger_lines(company_id=company_id):
            totals[(line.account_id, line.currency)] += line.amount

        balances = []
        for (account_id, currency), balance in totals.items():
            account = accounts.get(account_id)
            if account is None:
                continue
            balances.append(
                AccountBalance(
                    account_id=account_id,
                    code=account.code,
                    name=account.name,
                    type=account.type,
                    currency=currency,
                    balance=balance,
                )
            )
        return sorted(balances, key=lambda b: (b.code, b.currency))

    def account_ledger(
        self, account_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> AccountLedger:
        """Opening balance and lines of one account over a period.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the start date is after the end date
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(errors.account_not_found(account_id))
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")

        opening: dict[str, Decimal] = {}
        if start_date is not None:
            for line in self.db.list_ledger_lines(account_id=account_id, before=start_date):
                opening[line.currency] = opening.get(line.currency, Decimal("0")) + line.amount

        lines = self.db.list_ledger_lines(account_id=account_id, start_date=start_date, end_date=end_date)
        return AccountLedger(account=account, start=start_date, end=end_date, opening=opening, lines=lines)

    def trial_balance(self, company_id: int, as_of: Optional[date] = None) -> TrialBalance:
        """Debit/credit trial balance of every account with activity."""
        accounts = {acc.id: acc for acc in self.db.list_accounts(company_id)}
        totals: dict[tuple[int, str], Decimal] = defaultdict(Decimal)
        for line in self.db.list_ledger_lines(company_id=company_id, end_date=as_of):
            totals[(line.account_id, line.currency)] += line.amount

        rows = []
        for (account_id, currency), net in totals.items():
            account = accounts.get(account_id)
            if account is None or net == 0:
                continue
            rows.append(
                TrialBalanceRow(
                    code=account.code,
                    name=account.name,
                    type=account.type,
                    currency=currency,
                    debit=net if net > 0 else Decimal("0"),
                    credit=-net if net < 0 else Decimal("0"),
                )
            )
        rows.sort(key=lambda r: (r.currency, r.code))
        return TrialBalance(company_id=company_id, as_of=as_of, rows=rows)
