"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class DuplicateCodeError(ConflictError):
    """An account code is already used within the company."""


class UnbalancedTransactionError(ValidationError):
    """Transaction lines do not sum to zero."""


class NegativeBalanceError(ValidationError):
    """A trust posting would take the balance below what its policy allows."""


class InvalidRateError(ValidationError):
    """Exchange rate is not a positive finite number."""


class ForeignKeyViolation(DependencyError):
    """Rows still reference the record being removed."""


class StorageError(RuntimeError):
    """The store failed, e.g. lost connection or a constraint violation at commit.

    Raised by the database layer after rolling back. Not a DomainError.
    """


def company_not_found(company_id: int) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(company_id: int, code: str) -> str:
    """Return message for missing account code."""
    return f"Account with code '{code}' not found for company {company_id}"


def duplicate_account_code(company_id: int, code: str) -> str:
    """Return message for a code already used in the company."""
    return f"Account code '{code}' already exists for company {company_id}"


def accounts_referenced(company_id: int, line_count: int) -> str:
    """Return message when chart reset is blocked by ledger lines."""
    return (
        f"Cannot reset chart of accounts for company {company_id}: "
        f"{line_count} transaction line{'s' if line_count != 1 else ''} "
        "still reference its accounts"
    )


def account_delete_blocked(account_id: int, line_count: int) -> str:
    """Return message when an account has ledger lines."""
    return (
        f"Cannot delete account {account_id}: it has {line_count} "
        f"transaction line{'s' if line_count != 1 else ''}"
    )


def account_type_locked(account_id: int) -> str:
    """Return message when changing the type of a used account."""
    return f"Cannot change type of account {account_id}: transactions reference it"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def unbalanced_transaction(total: Decimal, currency: str) -> str:
    """Return message for lines that do not net to zero."""
    return f"Transaction not balanced: lines sum to {total} {currency}"


def client_not_found(client_id: int) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def trust_account_not_found(trust_account_id: int) -> str:
    """Return message for missing trust account."""
    return f"Trust account {trust_account_id} not found"


def negative_trust_balance(trust_account_id: int, balance: Decimal, amount: Decimal) -> str:
    """Return message for a posting that overdraws a trust account."""
    return (
        f"Trust account {trust_account_id} has balance {balance}; "
        f"posting {amount} would make it negative"
    )


def insufficient_trust_funds(client_id: int, available: Decimal, amount: Decimal, currency: str) -> str:
    """Return message when a refund exceeds the client's trust funds."""
    return (
        f"Insufficient trust balance for client {client_id}: "
        f"{available} {currency} available, {amount} {currency} requested"
    )


def invalid_rate(rate: object) -> str:
    """Return message for a rejected exchange rate."""
    return f"Invalid exchange rate {rate!r}: must be a number greater than zero"


def exchange_rate_not_found(from_currency: str, to_currency: str) -> str:
    """Return message when no stored rate links two currencies."""
    return f"No exchange rate stored for {from_currency} -> {to_currency}"
