"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the services never touch ORM
instances, and so ORM rows never leak outside a session.
"""

from decimal import Decimal

from lexledger.domain import entities as domain
from lexledger.database.models import (
    Company as ORMCompany,
    Account as ORMAccount,
    Client as ORMClient,
    Project as ORMProject,
    Invoice as ORMInvoice,
    TimeEntry as ORMTimeEntry,
    ProjectAssignment as ORMProjectAssignment,
    Transaction as ORMTransaction,
    TransactionLine as ORMTransactionLine,
    TrustAccount as ORMTrustAccount,
    TrustTransaction as ORMTrustTransaction,
    Setting as ORMSetting,
)


def _money(value) -> Decimal:
    """Normalize a stored numeric into a Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        created_at=orm_company.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        company_id=orm_account.company_id,
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        created_at=orm_account.created_at,
    )


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        company_id=orm_client.company_id,
        name=orm_client.name,
        created_at=orm_client.created_at,
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        company_id=orm_project.company_id,
        client_id=orm_project.client_id,
        name=orm_project.name,
        created_at=orm_project.created_at,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        project_id=orm_invoice.project_id,
        number=orm_invoice.number,
        amount=_money(orm_invoice.amount),
        currency=orm_invoice.currency,
        issued_on=orm_invoice.issued_on,
    )


def time_entry_to_domain(orm_entry: ORMTimeEntry) -> domain.TimeEntry:
    """Convert SQLAlchemy TimeEntry model to domain TimeEntry entity."""
    return domain.TimeEntry(
        id=orm_entry.id,
        project_id=orm_entry.project_id,
        lawyer=orm_entry.lawyer,
        hours=_money(orm_entry.hours),
        date=orm_entry.date,
        description=orm_entry.description,
    )


def assignment_to_domain(orm_assignment: ORMProjectAssignment) -> domain.ProjectAssignment:
    """Convert SQLAlchemy ProjectAssignment model to domain entity."""
    return domain.ProjectAssignment(
        id=orm_assignment.id,
        project_id=orm_assignment.project_id,
        lawyer=orm_assignment.lawyer,
        role=orm_assignment.role,
    )


def transaction_line_to_domain(orm_line: ORMTransactionLine) -> domain.TransactionLine:
    """Convert SQLAlchemy TransactionLine model to domain TransactionLine entity."""
    return domain.TransactionLine(
        id=orm_line.id,
        transaction_id=orm_line.transaction_id,
        account_id=orm_line.account_id,
        amount=_money(orm_line.amount),
        position=orm_line.position,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with lines) to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        company_id=orm_transaction.company_id,
        date=orm_transaction.date,
        currency=orm_transaction.currency,
        memo=orm_transaction.memo,
        invoice_id=orm_transaction.invoice_id,
        time_entry_id=orm_transaction.time_entry_id,
        created_at=orm_transaction.created_at,
        lines=tuple(transaction_line_to_domain(line) for line in orm_transaction.lines),
    )


def ledger_line_to_domain(
    orm_line: ORMTransactionLine, orm_transaction: ORMTransaction, orm_account: ORMAccount
) -> domain.LedgerLine:
    """Convert a joined line/transaction/account row to a domain LedgerLine."""
    return domain.LedgerLine(
        line_id=orm_line.id,
        transaction_id=orm_transaction.id,
        date=orm_transaction.date,
        memo=orm_transaction.memo,
        currency=orm_transaction.currency,
        account_id=orm_account.id,
        account_code=orm_account.code,
        account_name=orm_account.name,
        amount=_money(orm_line.amount),
    )


def trust_account_to_domain(orm_account: ORMTrustAccount) -> domain.TrustAccount:
    """Convert SQLAlchemy TrustAccount model to domain TrustAccount entity."""
    return domain.TrustAccount(
        id=orm_account.id,
        client_id=orm_account.client_id,
        project_id=orm_account.project_id,
        currency=orm_account.currency,
        account_type=domain.TrustAccountType(orm_account.account_type),
        balance=_money(orm_account.balance),
        created_at=orm_account.created_at,
    )


def trust_transaction_to_domain(orm_txn: ORMTrustTransaction) -> domain.TrustTransaction:
    """Convert SQLAlchemy TrustTransaction model to domain TrustTransaction entity."""
    return domain.TrustTransaction(
        id=orm_txn.id,
        trust_account_id=orm_txn.trust_account_id,
        amount=_money(orm_txn.amount),
        date=orm_txn.date,
        memo=orm_txn.memo,
        created_at=orm_txn.created_at,
    )


def setting_to_domain(orm_setting: ORMSetting) -> domain.Setting:
    """Convert SQLAlchemy Setting model to domain Setting entity."""
    return domain.Setting(
        key=orm_setting.key,
        value=orm_setting.value,
        updated_at=orm_setting.updated_at,
    )
