"""Account registry domain service."""

from typing import Optional, Sequence

import structlog

from lexledger.database.base import Database
from lexledger.domain import errors
from lexledger.domain.chart import LEGACY_CODE_MAP, ROOT_CHART, STANDARD_CHART
from lexledger.domain.entities import Account as AccountEntity, AccountSeed, AccountType
from lexledger.domain.errors import (
    DependencyError,
    DuplicateCodeError,
    ForeignKeyViolation,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def coerce_account_type(value: AccountType | str) -> AccountType:
    """Return an AccountType from a member or its (case-insensitive) name."""
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in AccountType)
        raise ValidationError(f"Unknown account type '{value}'. Expected one of: {allowed}")


class AccountService:
    """Service for managing a company's chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_company(self, company_id: int) -> None:
        if self.db.get_company(company_id) is None:
            raise NotFoundError(errors.company_not_found(company_id))

    def create_account(self, company_id: int, code: str, name: str, type: AccountType | str) -> int:
        """Create a new account.

        Args:
            company_id: Owning company ID
            code: Account code, unique within the company
            name: Account name
            type: Account type

        Returns:
            Account ID

        Raises:
            NotFoundError: If the company does not exist
            ValidationError: If code or name is empty or the type is unknown
            DuplicateCodeError: If the code already exists for the company
        """
        code = (code or "").strip()
        name = (name or "").strip()
        if not code or not name:
            raise ValidationError("Account code and name are required")
        account_type = coerce_account_type(type)
        self._require_company(company_id)

        if self.db.get_account_by_code(company_id, code) is not None:
            raise DuplicateCodeError(errors.duplicate_account_code(company_id, code))

        account_id = self.db.create_account(company_id=company_id, code=code, name=name, type=account_type)
        logger.info("account_created", company_id=company_id, account_id=account_id, code=code)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_code(self, company_id: int, code: str) -> Optional[AccountEntity]:
        """Get account by company and code."""
        return self.db.get_account_by_code(company_id, code)

    def list_accounts(self, company_id: int) -> list[AccountEntity]:
        """List a company's accounts ordered by code."""
        return self.db.list_accounts(company_id)

    def update_account(
        self, account_id: int, name: Optional[str] = None, type: Optional[AccountType | str] = None
    ) -> None:
        """Rename an account or change its type.

        The type of an account can only change while no transaction line
        references it.

        Raises:
            NotFoundError: If the account does not exist
            DependencyError: If the type changes on an account with lines
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(errors.account_not_found(account_id))

        new_type = coerce_account_type(type) if type is not None else None
        if new_type is not None and new_type != account.type:
            if self.db.count_account_lines(account_id) > 0:
                raise DependencyError(errors.account_type_locked(account_id))

        if name is not None and not name.strip():
            raise ValidationError("Account name cannot be empty")

        self.db.update_account(account_id, name=name.strip() if name else None, type=new_type)

    def delete_account(self, account_id: int) -> None:
        """Delete an account that has no transaction lines.

        Raises:
            NotFoundError: If the account does not exist
            ForeignKeyViolation: If transaction lines reference it
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(errors.account_not_found(account_id))

        line_count = self.db.count_account_lines(account_id)
        if line_count > 0:
            raise ForeignKeyViolation(errors.account_delete_blocked(account_id, line_count))

        self.db.delete_account(account_id)

    def reset_chart_of_accounts(
        self, company_id: int, entries: Optional[Sequence[AccountSeed]] = None
    ) -> list[AccountEntity]:
        """Replace a company's chart of accounts in one atomic step.

        Args:
            company_id: Company whose chart is replaced
            entries: New chart, inserted in the given order. Defaults to ROOT_CHART.

        Returns:
            The created accounts in insertion order

        Raises:
            NotFoundError: If the company does not exist
            DuplicateCodeError: If entries repeat a code
            ForeignKeyViolation: If any existing account has transaction lines
        """
        entries = list(ROOT_CHART if entries is None else entries)
        self._require_company(company_id)

        seen: set[str] = set()
        for entry in entries:
            if not entry.code or not entry.name:
                raise ValidationError("Account code and name are required")
            if entry.code in seen:
                raise DuplicateCodeError(errors.duplicate_account_code(company_id, entry.code))
            seen.add(entry.code)
            coerce_account_type(entry.type)

        line_count = self.db.count_company_account_lines(company_id)
        if line_count > 0:
            raise ForeignKeyViolation(errors.accounts_referenced(company_id, line_count))

        with self.db.atomic():
            removed = self.db.delete_company_records("accounts", company_id)
            account_ids = [
                self.db.create_account(
                    company_id=company_id,
                    code=entry.code,
                    name=entry.name,
                    type=coerce_account_type(entry.type),
                )
                for entry in entries
            ]

        logger.info("chart_reset", company_id=company_id, removed=removed, created=len(account_ids))
        return [self.db.get_account(account_id) for account_id in account_ids]

    def ensure_standard_chart(self, company_id: int) -> dict[str, int]:
        """Bring a company's chart in line with STANDARD_CHART.

        Seeds the missing standard accounts first, so every legacy-coded
        account is merged into its standard replacement (lines moved, legacy
        account deleted). Unused non-standard accounts are dropped last.
        Safe to re-run.

        Returns:
            Counts of accounts created, merged and removed
        """
        self._require_company(company_id)
        stats = {"created": 0, "merged": 0, "removed": 0}

        with self.db.atomic():
            for seed in STANDARD_CHART:
                if self.db.get_account_by_code(company_id, seed.code) is None:
                    self.db.create_account(company_id=company_id, code=seed.code, name=seed.name, type=seed.type)
                    stats["created"] += 1

            for legacy_code, standard_code in LEGACY_CODE_MAP.items():
                legacy = self.db.get_account_by_code(company_id, legacy_code)
                if legacy is None:
                    continue
                standard = self.db.get_account_by_code(company_id, standard_code)
                self.db.move_account_lines(legacy.id, standard.id)
                self.db.delete_account(legacy.id)
                stats["merged"] += 1

            standard_codes = {seed.code for seed in STANDARD_CHART}
            for account in self.db.list_accounts(company_id):
                if account.code in standard_codes:
                    continue
                if self.db.count_account_lines(account.id) == 0:
                    self.db.delete_account(account.id)
                    stats["removed"] += 1

        logger.info("standard_chart_ensured", company_id=company_id, **stats)
        return stats
