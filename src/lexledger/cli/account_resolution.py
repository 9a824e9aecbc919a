"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from lexledger.domain.account import AccountService
from lexledger.domain.errors import NotFoundError
from lexledger.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, company_id: int, account: str | int
) -> int:
    """Resolve an account code or #ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, company_id, account)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
