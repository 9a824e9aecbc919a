"""Utility for resolving account references to IDs."""

from lexledger.domain import errors
from lexledger.domain.account import AccountService
from lexledger.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, company_id: int, account: str | int) -> int:
    """Resolve an account code or ID to an account ID within a company.

    Strings are looked up as account codes first, since codes such as "1020"
    look like IDs. "#12" always means account ID 12. A bare int is an ID.

    Raises:
        NotFoundError: If no account of the company matches
    """
    if isinstance(account, int):
        return _by_id(account_service, company_id, account)

    ref = str(account).strip()
    if ref.startswith("#") and ref[1:].isdigit():
        return _by_id(account_service, company_id, int(ref[1:]))

    found = account_service.get_account_by_code(company_id, ref)
    if found is not None:
        return found.id

    raise NotFoundError(errors.account_code_not_found(company_id, ref))


def _by_id(account_service: AccountService, company_id: int, account_id: int) -> int:
    found = account_service.get_account(account_id)
    if found is None or found.company_id != company_id:
        raise NotFoundError(errors.account_not_found(account_id))
    return found.id
