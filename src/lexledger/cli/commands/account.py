"""Chart of accounts commands."""

import click
from lexledger.cli.account_resolution import resolve_account_or_exit
from lexledger.cli.date_filters import PERIOD_HELP, parse_date_or_exit, resolve_cli_date_range
from lexledger.cli.error_handling import reporting_errors
from lexledger.domain.account import AccountService
from lexledger.domain.entities import AccountType
from lexledger.domain.transaction import TransactionService

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage a company's chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False), required=True)
@click.pass_context
def create_account(ctx, code: str, name: str, company_id: int, account_type: str):
    """Create a new account.

    Examples:
        lexledger account create 1030 "Bank - Savings" --company 1 --type ASSET
    """
    service = AccountService(ctx.obj["db"])
    with reporting_errors(ctx):
        account_id = service.create_account(company_id, code, name, account_type)
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.pass_context
def list_accounts(ctx, company_id: int):
    """List a company's accounts ordered by code."""
    with reporting_errors(ctx):
        accounts = AccountService(ctx.obj["db"]).list_accounts(company_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.code:>6s} | {acc.name:30s} | {acc.type.value}")


@account_group.command("update")
@click.argument("account")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False))
@click.pass_context
def update_account(ctx, account: str, company_id: int, name: str | None, account_type: str | None):
    """Rename an account or change its type.

    ACCOUNT is an account code or #ID.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, company_id, account)
    with reporting_errors(ctx):
        service.update_account(account_id, name=name, type=account_type)
        click.echo(f"Updated account {account}")


@account_group.command("delete")
@click.argument("account")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.pass_context
def delete_account(ctx, account: str, company_id: int):
    """Delete an account with no transaction lines.

    ACCOUNT is an account code or #ID.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, company_id, account)
    with reporting_errors(ctx):
        service.delete_account(account_id)
        click.echo(f"Deleted account {account}")


@account_group.command("reset-chart")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--confirm", is_flag=True, help="Required: replaces every account of the company")
@click.pass_context
def reset_chart(ctx, company_id: int, confirm: bool):
    """Replace the chart of accounts with the five root accounts.

    Refused while any account still has transaction lines.
    """
    if not confirm:
        click.echo("Error: reset-chart deletes every account of the company; pass --confirm.", err=True)
        ctx.exit(1)

    service = AccountService(ctx.obj["db"])
    with reporting_errors(ctx):
        accounts = service.reset_chart_of_accounts(company_id)
        click.echo(f"Chart reset: {len(accounts)} accounts created")
        for acc in accounts:
            click.echo(f"  {acc.code:>6s} {acc.name}")


@account_group.command("ensure-standard")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.pass_context
def ensure_standard(ctx, company_id: int):
    """Seed the standard law-firm chart and migrate legacy codes."""
    service = AccountService(ctx.obj["db"])
    with reporting_errors(ctx):
        stats = service.ensure_standard_chart(company_id)
        click.echo(
            f"Created {stats['created']}, "
            f"merged {stats['merged']}, removed {stats['removed']} accounts"
        )


@account_group.command("balances")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.pass_context
def balances(ctx, company_id: int):
    """Show the net balance of each account."""
    with reporting_errors(ctx):
        rows = TransactionService(ctx.obj["db"]).account_balances(company_id)
    if not rows:
        click.echo("No postings found.")
        return

    for row in rows:
        click.echo(f"{row.code:>6s} {row.name:30s} {row.currency} {row.balance:>15,.2f}")


@account_group.command("ledger")
@click.argument("account")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help=PERIOD_HELP)
@click.pass_context
def account_ledger(ctx, account: str, company_id: int, start_date: str | None, end_date: str | None, period: str | None):
    """Show an account's lines with opening and closing balances."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), company_id, account)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    with reporting_errors(ctx):
        ledger = TransactionService(db).account_ledger(account_id, start, end)

    click.echo(f"\n{ledger.account.code} {ledger.account.name}")
    click.echo("-" * 80)
    for currency, amount in sorted(ledger.opening.items()):
        click.echo(f"{'Opening':>48s} {currency} {amount:>15,.2f}")
    for line in ledger.lines:
        memo = (line.memo or "")[:30]
        click.echo(f"{line.date} #{line.transaction_id:<6d} {memo:30s} {line.currency} {line.amount:>15,.2f}")
    for currency, amount in sorted(ledger.closing.items()):
        click.echo(f"{'Closing':>48s} {currency} {amount:>15,.2f}")


@account_group.command("trial-balance")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--as-of", help="Include postings up to this date")
@click.pass_context
def trial_balance(ctx, company_id: int, as_of: str | None):
    """Show the trial balance."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    with reporting_errors(ctx):
        report = TransactionService(ctx.obj["db"]).trial_balance(company_id, as_of_date)

    click.echo(f"\n{'Code':>6s} {'Account':30s} {'Cur':3s} {'Debit':>15s} {'Credit':>15s}")
    click.echo("-" * 75)
    for row in report.rows:
        click.echo(f"{row.code:>6s} {row.name:30s} {row.currency} {row.debit:>15,.2f} {row.credit:>15,.2f}")
    click.echo("-" * 75)
    for currency, (debit, credit) in sorted(report.totals().items()):
        click.echo(f"{'Total':>37s} {currency} {debit:>15,.2f} {credit:>15,.2f}")
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
