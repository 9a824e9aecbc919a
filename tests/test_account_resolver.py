"""Tests for account reference resolution."""

import pytest

from lexledger.domain.errors import NotFoundError
from lexledger.utils.account_resolver import resolve_account


def test_resolve_by_code(account_service, standard_company, accounts):
    assert resolve_account(account_service, standard_company.id, "1020") == accounts["1020"].id


def test_resolve_by_hash_id(account_service, standard_company, accounts):
    account_id = accounts["4000"].id

    assert resolve_account(account_service, standard_company.id, f"#{account_id}") == account_id
    assert resolve_account(account_service, standard_company.id, account_id) == account_id


def test_id_of_other_company(account_service, practice_service, standard_company, accounts):
    other = practice_service.create_company("Other Firm")

    with pytest.raises(NotFoundError):
        resolve_account(account_service, other, accounts["1000"].id)


def test_unknown_code(account_service, standard_company):
    with pytest.raises(NotFoundError):
        resolve_account(account_service, standard_company.id, "9999")
