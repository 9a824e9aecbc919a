"""Trust subledger domain service."""

from typing import Mapping, Optional
from datetime import date
from decimal import Decimal

import structlog

from lexledger.database.base import Database
from lexledger.domain import errors
from lexledger.domain.chart import TRUST_CASH_CODE, TRUST_LIABILITY_CODE
from lexledger.domain.currency import normalize_currency, quantize
from lexledger.domain.entities import (
    PurgeReport,
    TrustAccount as TrustAccountEntity,
    TrustAccountType,
    TrustReconciliation,
    TrustTransaction as TrustTransactionEntity,
)
from lexledger.domain.errors import (
    ConflictError,
    DomainError,
    NegativeBalanceError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from lexledger.domain.transaction import TransactionService
from lexledger.utils.amount_parser import to_decimal

logger = structlog.get_logger(__name__)

# Whether a trust account type may go below zero. Retainers hold client money
# and must not be overdrawn; expense accounts may carry costs the firm advanced.
DEFAULT_NEGATIVE_BALANCE_POLICY: dict[TrustAccountType, bool] = {
    TrustAccountType.RETAINER: False,
    TrustAccountType.EXPENSE: True,
}

MAX_CREATE_ATTEMPTS = 3


def coerce_trust_account_type(value: TrustAccountType | str) -> TrustAccountType:
    """Return a TrustAccountType from a member or its (case-insensitive) name."""
    if isinstance(value, TrustAccountType):
        return value
    try:
        return TrustAccountType(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in TrustAccountType)
        raise ValidationError(f"Unknown trust account type '{value}'. Expected one of: {allowed}")


class TrustService:
    """Service for per-project trust accounts."""

    def __init__(self, db: Database, allow_negative: Optional[Mapping[TrustAccountType, bool]] = None):
        """Initialize trust service.

        Args:
            db: Database instance
            allow_negative: Per-type overrides of DEFAULT_NEGATIVE_BALANCE_POLICY
        """
        self.db = db
        self.allow_negative = dict(DEFAULT_NEGATIVE_BALANCE_POLICY)
        if allow_negative:
            self.allow_negative.update(allow_negative)

    def get_or_create_trust_account(
        self,
        project_id: int,
        client_id: int,
        account_type: TrustAccountType | str = TrustAccountType.EXPENSE,
        currency: str = "USD",
    ) -> TrustAccountEntity:
        """Return the trust account for (project, type, currency), creating it if missing.

        A concurrent caller inserting the same key first makes our insert hit
        the unique constraint; the loser re-reads and returns the winner's row.

        Raises:
            NotFoundError: If the project or client does not exist
            ValidationError: If the project belongs to another client
        """
        account_type = coerce_trust_account_type(account_type)
        currency = normalize_currency(currency)

        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(errors.project_not_found(project_id))
        if self.db.get_client(client_id) is None:
            raise NotFoundError(errors.client_not_found(client_id))
        if project.client_id != client_id:
            raise ValidationError(f"Project {project_id} does not belong to client {client_id}")

        for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
            existing = self.db.find_trust_account(project_id, account_type, currency)
            if existing is not None:
                return existing
            try:
                account = self.db.create_trust_account(
                    client_id=client_id, project_id=project_id, account_type=account_type, currency=currency
                )
            except ConflictError:
                logger.info(
                    "trust_account_create_conflict",
                    project_id=project_id,
                    account_type=account_type.value,
                    currency=currency,
                    attempt=attempt,
                )
                continue
            logger.info(
                "trust_account_created",
                trust_account_id=account.id,
                project_id=project_id,
                account_type=account_type.value,
                currency=currency,
            )
            return account

        raise StorageError(
            f"Could not create or find trust account for project {project_id} "
            f"({account_type.value}, {currency}) after {MAX_CREATE_ATTEMPTS} attempts"
        )

    def get_trust_account(self, trust_account_id: int) -> Optional[TrustAccountEntity]:
        """Get trust account by ID."""
        return self.db.get_trust_account(trust_account_id)

    def list_trust_accounts(
        self,
        company_id: Optional[int] = None,
        client_id: Optional[int] = None,
        project_id: Optional[int] = None,
        account_type: Optional[TrustAccountType | str] = None,
        currency: Optional[str] = None,
    ) -> list[TrustAccountEntity]:
        """List trust accounts with optional filters."""
        return self.db.list_trust_accounts(
            company_id=company_id,
            client_id=client_id,
            project_id=project_id,
            account_type=coerce_trust_account_type(account_type) if account_type is not None else None,
            currency=normalize_currency(currency) if currency is not None else None,
        )

    def list_trust_transactions(self, trust_account_id: int) -> list[TrustTransactionEntity]:
        """List a trust account's transactions, newest first."""
        if self.db.get_trust_account(trust_account_id) is None:
            raise NotFoundError(errors.trust_account_not_found(trust_account_id))
        return self.db.list_trust_transactions(trust_account_id)

    def post_trust_transaction(
        self,
        trust_account_id: int,
        amount: object,
        memo: Optional[str] = None,
        txn_date: Optional[date] = None,
    ) -> int:
        """Record a deposit (positive) or withdrawal (negative) on a trust account.

        Returns:
            Trust transaction ID

        Raises:
            NotFoundError: If the trust account does not exist
            ValidationError: If the amount is not numeric or is zero
            NegativeBalanceError: If the account type forbids the resulting balance
        """
        try:
            value = to_decimal(amount)
        except ValueError as e:
            raise ValidationError(f"Invalid amount: {e}")

        with self.db.atomic():
            account = self.db.get_trust_account(trust_account_id)
            if account is None:
                raise NotFoundError(errors.trust_account_not_found(trust_account_id))
            value = quantize(value, account.currency)
            if value == 0:
                raise ValidationError("Trust transaction amount cannot be zero")
            if account.balance + value < 0 and not self.allow_negative[account.account_type]:
                raise NegativeBalanceError(errors.negative_trust_balance(account.id, account.balance, value))

            txn_id = self.db.add_trust_transaction(
                trust_account_id, value, txn_date or date.today(), memo
            )

        logger.info("trust_transaction_posted", trust_account_id=trust_account_id, amount=str(value))
        return txn_id

    def find_orphan_trust_accounts(self) -> list[TrustAccountEntity]:
        """Trust accounts whose project is unset or no longer exists."""
        return self.db.list_orphan_trust_accounts()

    def purge_orphan_trust_accounts(self) -> PurgeReport:
        """Delete every orphan trust account together with its transactions.

        Each account is removed in its own atomic unit; a failure is recorded
        in the report and the remaining orphans are still processed.
        """
        report = PurgeReport()
        for orphan in self.find_orphan_trust_accounts():
            try:
                deleted = self.db.delete_trust_account(orphan.id)
            except (StorageError, DomainError) as exc:
                logger.warning("orphan_purge_failed", trust_account_id=orphan.id, error=str(exc))
                report.failures[orphan.id] = str(exc)
                continue
            report.purged_account_ids.append(orphan.id)
            report.transactions_deleted += deleted

        logger.info(
            "orphan_trust_accounts_purged",
            purged=len(report.purged_account_ids),
            transactions=report.transactions_deleted,
            failures=len(report.failures),
        )
        return report

    def refund_to_client(
        self,
        client_id: int,
        amount: object,
        currency: str,
        project_id: Optional[int] = None,
        refund_date: Optional[date] = None,
    ) -> int:
        """Return trust funds to a client.

        Draws from the client's trust accounts with a positive balance in ID
        order and posts the matching ledger entry (debit trust liability,
        credit trust cash) in the same atomic unit.

        Returns:
            ID of the general ledger transaction

        Raises:
            NotFoundError: If the client or the trust ledger accounts are missing
            ValidationError: If the amount is not a positive number
            NegativeBalanceError: If the trust balance does not cover the refund
        """
        currency = normalize_currency(currency)
        try:
            value = quantize(to_decimal(amount), currency)
        except ValueError as e:
            raise ValidationError(f"Invalid amount: {e}")
        if value <= 0:
            raise ValidationError("Refund amount must be positive")

        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(errors.client_not_found(client_id))
        trust_cash = self.db.get_account_by_code(client.company_id, TRUST_CASH_CODE)
        trust_liability = self.db.get_account_by_code(client.company_id, TRUST_LIABILITY_CODE)
        if trust_cash is None:
            raise NotFoundError(errors.account_code_not_found(client.company_id, TRUST_CASH_CODE))
        if trust_liability is None:
            raise NotFoundError(errors.account_code_not_found(client.company_id, TRUST_LIABILITY_CODE))

        refund_date = refund_date or date.today()
        memo = f"Refund trust funds to client #{client_id}"

        with self.db.atomic():
            accounts = self.db.list_trust_accounts(
                client_id=client_id,
                project_id=project_id,
                currency=currency,
            )
            available = sum((acc.balance for acc in accounts if acc.balance > 0), Decimal("0"))
            if available < value:
                raise NegativeBalanceError(errors.insufficient_trust_funds(client_id, available, value, currency))

            remaining = value
            for account in accounts:
                if remaining <= 0:
                    break
                deduct = min(account.balance, remaining)
                if deduct <= 0:
                    continue
                self.db.add_trust_transaction(account.id, -deduct, refund_date, "Refund to client")
                remaining -= deduct

            transaction_id = TransactionService(self.db).post_transaction(
                company_id=client.company_id,
                date=refund_date,
                lines=[(trust_liability.id, value), (trust_cash.id, -value)],
                memo=memo,
                currency=currency,
            )

        logger.info("trust_refund_posted", client_id=client_id, amount=str(value), currency=currency)
        return transaction_id

    def reconcile(self, company_id: int, currency: str = "USD") -> TrustReconciliation:
        """Compare trust account balances with ledger lines on the trust cash account."""
        currency = normalize_currency(currency)
        if self.db.get_company(company_id) is None:
            raise NotFoundError(errors.company_not_found(company_id))

        subledger_total = sum(
            (acc.balance for acc in self.db.list_trust_accounts(company_id=company_id, currency=currency)),
            Decimal("0"),
        )
        ledger_total = sum(
            (
                line.amount
                for line in self.db.list_ledger_lines(
                    company_id=company_id, code_prefix=TRUST_CASH_CODE, currency=currency
                )
            ),
            Decimal("0"),
        )
        return TrustReconciliation(
            company_id=company_id,
            currency=currency,
            subledger_total=subledger_total,
            ledger_total=ledger_total,
        )
