"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from lexledger.domain.entities import (
    Company,
    Account,
    AccountType,
    Client,
    Project,
    Invoice,
    TimeEntry,
    ProjectAssignment,
    Transaction,
    LedgerLine,
    TrustAccount,
    TrustAccountType,
    TrustTransaction,
    Setting,
)

# Tables removed when a company's financials are wiped, deepest children first.
COMPANY_RECORD_KINDS = (
    "transaction_lines",
    "transactions",
    "trust_transactions",
    "trust_accounts",
    "invoices",
    "time_entries",
    "project_assignments",
    "projects",
    "clients",
    "accounts",
)

# Tables hanging off a single project, deleted before the project itself.
PROJECT_RECORD_KINDS = ("time_entries", "project_assignments", "invoices")


class Database(ABC):
    """Abstract database interface for lexledger.

    Write methods commit on their own unless they run inside ``atomic()``,
    in which case everything commits together when the outermost block exits
    and nothing commits if any exception escapes it.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[Any]:
        """Return a context manager grouping writes into one all-or-nothing unit."""
        pass

    # Company operations
    @abstractmethod
    def create_company(self, name: str) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, name: str) -> Optional[Company]:
        """Get company by name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies ordered by name."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, company_id: int, code: str, name: str, type: AccountType) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, company_id: int, code: str) -> Optional[Account]:
        """Get account by company and code."""
        pass

    @abstractmethod
    def list_accounts(self, company_id: int) -> list[Account]:
        """List a company's accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        type: Optional[AccountType] = None,
    ) -> None:
        """Update account fields that are not None."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def count_account_lines(self, account_id: int) -> int:
        """Count transaction lines posted to an account."""
        pass

    @abstractmethod
    def count_company_account_lines(self, company_id: int) -> int:
        """Count transaction lines posted to any of a company's accounts."""
        pass

    @abstractmethod
    def move_account_lines(self, from_account_id: int, to_account_id: int) -> int:
        """Repoint all lines from one account to another. Returns lines moved."""
        pass

    # Practice records
    @abstractmethod
    def create_client(self, company_id: int, name: str) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_clients(self, company_id: int) -> list[Client]:
        """List a company's clients."""
        pass

    @abstractmethod
    def create_project(self, company_id: int, client_id: int, name: str) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def list_projects(self, company_id: int, client_id: Optional[int] = None) -> list[Project]:
        """List projects, optionally filtered by client."""
        pass

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project row."""
        pass

    @abstractmethod
    def create_invoice(
        self, project_id: int, number: str, amount: Decimal, currency: str, issued_on: date
    ) -> int:
        """Create an invoice. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def create_time_entry(
        self, project_id: int, lawyer: str, hours: Decimal, entry_date: date, description: Optional[str] = None
    ) -> int:
        """Create a time entry. Returns time entry ID."""
        pass

    @abstractmethod
    def get_time_entry(self, time_entry_id: int) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        pass

    @abstractmethod
    def create_assignment(self, project_id: int, lawyer: str, role: Optional[str] = None) -> int:
        """Assign a lawyer to a project. Returns assignment ID."""
        pass

    @abstractmethod
    def list_assignments(self, project_id: int) -> list[ProjectAssignment]:
        """List a project's assignments."""
        pass

    @abstractmethod
    def delete_project_records(self, kind: str, project_id: int) -> int:
        """Delete one kind of PROJECT_RECORD_KINDS for a project. Returns rows deleted."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        company_id: int,
        date: date,
        currency: str,
        lines: Sequence[tuple[int, Decimal]],
        memo: Optional[str] = None,
        invoice_id: Optional[int] = None,
        time_entry_id: Optional[int] = None,
    ) -> int:
        """Create a transaction with its (account_id, amount) lines. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction (with lines) by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List a company's transactions, newest first."""
        pass

    @abstractmethod
    def list_ledger_lines(
        self,
        company_id: Optional[int] = None,
        account_id: Optional[int] = None,
        code_prefix: Optional[str] = None,
        currency: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        before: Optional[date] = None,
        limit: Optional[int] = None,
        descending: bool = False,
    ) -> list[LedgerLine]:
        """List transaction lines joined with transaction and account.

        Args:
            company_id: Only lines of this company's transactions
            account_id: Only lines posted to this account
            code_prefix: Only lines whose account code starts with this prefix
            currency: Only lines of transactions in this currency
            start_date: Inclusive lower bound on transaction date
            end_date: Inclusive upper bound on transaction date
            before: Exclusive upper bound on transaction date
            limit: Maximum number of lines
            descending: Order by transaction date newest first
        """
        pass

    @abstractmethod
    def delete_project_transactions(self, project_id: int) -> tuple[int, int]:
        """Delete lines and transactions tied to a project's invoices or time entries.

        Returns (transactions deleted, lines deleted).
        """
        pass

    # Trust operations
    @abstractmethod
    def find_trust_account(
        self, project_id: int, account_type: TrustAccountType, currency: str
    ) -> Optional[TrustAccount]:
        """Find the trust account for a (project, type, currency) key."""
        pass

    @abstractmethod
    def create_trust_account(
        self, client_id: int, project_id: int, account_type: TrustAccountType, currency: str
    ) -> TrustAccount:
        """Insert a zero-balance trust account.

        Raises:
            ConflictError: If the (project, type, currency) key already exists
        """
        pass

    @abstractmethod
    def get_trust_account(self, trust_account_id: int) -> Optional[TrustAccount]:
        """Get trust account by ID."""
        pass

    @abstractmethod
    def list_trust_accounts(
        self,
        company_id: Optional[int] = None,
        client_id: Optional[int] = None,
        project_id: Optional[int] = None,
        account_type: Optional[TrustAccountType] = None,
        currency: Optional[str] = None,
    ) -> list[TrustAccount]:
        """List trust accounts with optional filters, ordered by ID."""
        pass

    @abstractmethod
    def list_orphan_trust_accounts(self) -> list[TrustAccount]:
        """List trust accounts whose project is unset or no longer exists."""
        pass

    @abstractmethod
    def add_trust_transaction(
        self, trust_account_id: int, amount: Decimal, txn_date: date, memo: Optional[str] = None
    ) -> int:
        """Insert a trust transaction and add its amount to the balance. Returns ID."""
        pass

    @abstractmethod
    def list_trust_transactions(self, trust_account_id: int) -> list[TrustTransaction]:
        """List a trust account's transactions, newest first."""
        pass

    @abstractmethod
    def delete_trust_account(self, trust_account_id: int) -> int:
        """Delete a trust account after its transactions. Returns transactions deleted."""
        pass

    @abstractmethod
    def detach_trust_accounts(self, project_id: int) -> int:
        """Unset project_id on a project's trust accounts. Returns accounts detached."""
        pass

    # Company-wide maintenance
    @abstractmethod
    def count_company_records(self, kind: str, company_id: int) -> int:
        """Count rows of one of COMPANY_RECORD_KINDS belonging to a company."""
        pass

    @abstractmethod
    def delete_company_records(self, kind: str, company_id: int) -> int:
        """Delete rows of one of COMPANY_RECORD_KINDS belonging to a company."""
        pass

    # Settings
    @abstractmethod
    def get_setting(self, key: str) -> Optional[Setting]:
        """Get setting by key."""
        pass

    @abstractmethod
    def upsert_setting(self, key: str, value: str) -> None:
        """Create the setting or update its value in place."""
        pass
