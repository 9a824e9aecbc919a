"""Domain model entities for lexledger.

These are pure data classes representing accounting concepts, independent of
the database schema. Services and the CLI only ever see these types.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """General ledger account classification."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TrustAccountType(str, Enum):
    """Kind of funds a trust account holds."""

    RETAINER = "RETAINER"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class Company:
    """Company (law firm) owning a chart of accounts."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    company_id: int
    code: str
    name: str
    type: AccountType
    created_at: datetime


@dataclass(frozen=True)
class AccountSeed:
    """Account definition used when seeding or resetting a chart."""

    code: str
    name: str
    type: AccountType


@dataclass(frozen=True)
class TransactionLine:
    """One signed leg of a transaction. Debits are positive, credits negative."""

    id: int
    transaction_id: int
    account_id: int
    amount: Decimal
    position: int = 0

    @property
    def debit(self) -> Decimal:
        return self.amount if self.amount > 0 else Decimal("0")

    @property
    def credit(self) -> Decimal:
        return -self.amount if self.amount < 0 else Decimal("0")


@dataclass(frozen=True)
class LineInput:
    """A transaction line as supplied by a caller, before it is persisted."""

    account_id: int
    amount: Decimal


@dataclass(frozen=True)
class Transaction:
    """Balanced general-ledger transaction."""

    id: int
    company_id: int
    date: date
    currency: str
    memo: Optional[str]
    invoice_id: Optional[int]
    time_entry_id: Optional[int]
    created_at: datetime
    lines: tuple[TransactionLine, ...] = ()


@dataclass(frozen=True)
class LedgerLine:
    """A transaction line joined with its transaction and account."""

    line_id: int
    transaction_id: int
    date: date
    memo: Optional[str]
    currency: str
    account_id: int
    account_code: str
    account_name: str
    amount: Decimal


@dataclass(frozen=True)
class AccountBalance:
    """Net balance (debits minus credits) of one account in one currency."""

    account_id: int
    code: str
    name: str
    type: AccountType
    currency: str
    balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """Opening balance per currency plus the lines inside a period."""

    account: Account
    start: Optional[date]
    end: Optional[date]
    opening: dict[str, Decimal]
    lines: list[LedgerLine]

    @property
    def closing(self) -> dict[str, Decimal]:
        result = dict(self.opening)
        for line in self.lines:
            result[line.currency] = result.get(line.currency, Decimal("0")) + line.amount
        return result


@dataclass(frozen=True)
class TrialBalanceRow:
    """Trial balance row for one account and currency."""

    code: str
    name: str
    type: AccountType
    currency: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Trial balance report."""

    company_id: int
    as_of: Optional[date]
    rows: list[TrialBalanceRow]

    def totals(self) -> dict[str, tuple[Decimal, Decimal]]:
        """Return (debit, credit) totals per currency."""
        result: dict[str, tuple[Decimal, Decimal]] = {}
        for row in self.rows:
            debit, credit = result.get(row.currency, (Decimal("0"), Decimal("0")))
            result[row.currency] = (debit + row.debit, credit + row.credit)
        return result

    @property
    def is_balanced(self) -> bool:
        return all(debit == credit for debit, credit in self.totals().values())


@dataclass(frozen=True)
class Client:
    """Client of the firm."""

    id: int
    company_id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Project:
    """Matter/project handled for a client."""

    id: int
    company_id: int
    client_id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Invoice:
    """Invoice issued on a project."""

    id: int
    project_id: int
    number: str
    amount: Decimal
    currency: str
    issued_on: date


@dataclass(frozen=True)
class TimeEntry:
    """Hours a lawyer logged on a project."""

    id: int
    project_id: int
    lawyer: str
    hours: Decimal
    date: date
    description: Optional[str]


@dataclass(frozen=True)
class ProjectAssignment:
    """Lawyer assigned to a project."""

    id: int
    project_id: int
    lawyer: str
    role: Optional[str]


@dataclass(frozen=True)
class TrustAccount:
    """Per-project, per-currency trust account."""

    id: int
    client_id: int
    project_id: Optional[int]
    currency: str
    account_type: TrustAccountType
    balance: Decimal
    created_at: datetime

    @property
    def is_orphaned(self) -> bool:
        return self.project_id is None


@dataclass(frozen=True)
class TrustTransaction:
    """Signed movement on a trust account. Deposits are positive."""

    id: int
    trust_account_id: int
    amount: Decimal
    date: date
    memo: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class TrustReconciliation:
    """Trust subledger total compared to the general ledger trust cash."""

    company_id: int
    currency: str
    subledger_total: Decimal
    ledger_total: Decimal

    @property
    def difference(self) -> Decimal:
        return self.subledger_total - self.ledger_total

    @property
    def is_reconciled(self) -> bool:
        return self.difference == 0


@dataclass(frozen=True)
class Setting:
    """Keyed application setting."""

    key: str
    value: str
    updated_at: datetime


@dataclass
class PurgeReport:
    """Outcome of purging orphan trust accounts."""

    purged_account_ids: list[int] = field(default_factory=list)
    transactions_deleted: int = 0
    failures: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class DeletionReport:
    """Row counts removed by a maintenance operation, in deletion order."""

    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())
