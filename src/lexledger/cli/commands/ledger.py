"""General ledger posting and query commands."""

from datetime import date

import click
from lexledger.cli.account_resolution import resolve_account_or_exit
from lexledger.cli.date_filters import PERIOD_HELP, parse_date_or_exit, resolve_cli_date_range
from lexledger.cli.error_handling import reporting_errors
from lexledger.domain.account import AccountService
from lexledger.domain.chart import CASH_CODE_PREFIX
from lexledger.domain.transaction import DEFAULT_CASH_LEDGER_LIMIT, TransactionService


def _split_line(ctx, spec: str) -> tuple[str, str]:
    account, sep, amount = spec.rpartition("=")
    if not sep or not account or not amount:
        click.echo(f"Error: Invalid line '{spec}'. Use ACCOUNT=AMOUNT, e.g. 1000=-250.00", err=True)
        ctx.exit(1)
    return account.strip(), amount.strip()


@click.group()
def ledger_group():
    """Post and query general ledger transactions."""
    pass


@ledger_group.command("post")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option(
    "--line",
    "line_specs",
    multiple=True,
    required=True,
    help="ACCOUNT=AMOUNT; debits positive, credits negative. Repeat for each line.",
)
@click.option("--date", "txn_date", help="Transaction date (defaults to today)")
@click.option("--memo", help="Transaction memo")
@click.option("--currency", default="USD", show_default=True)
@click.option("--invoice", "invoice_id", type=int, help="Invoice the posting belongs to")
@click.option("--time-entry", "time_entry_id", type=int, help="Time entry the posting belongs to")
@click.pass_context
def post(
    ctx,
    company_id: int,
    line_specs: tuple[str, ...],
    txn_date: str | None,
    memo: str | None,
    currency: str,
    invoice_id: int | None,
    time_entry_id: int | None,
):
    """Post a balanced transaction.

    Examples:
        lexledger ledger post --company 1 --line 1100=500 --line 4000=-500 --memo "Invoice 17"
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    lines = []
    for spec in line_specs:
        account, amount = _split_line(ctx, spec)
        lines.append((resolve_account_or_exit(ctx, account_service, company_id, account), amount))

    posted_on = parse_date_or_exit(ctx, txn_date, "date") or date.today()
    with reporting_errors(ctx):
        transaction_id = TransactionService(db).post_transaction(
            company_id=company_id,
            date=posted_on,
            lines=lines,
            memo=memo,
            currency=currency,
            invoice_id=invoice_id,
            time_entry_id=time_entry_id,
        )
        click.echo(f"Posted transaction {transaction_id} ({len(lines)} lines)")


@ledger_group.command("list")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help=PERIOD_HELP)
@click.pass_context
def list_transactions(ctx, company_id: int, start_date: str | None, end_date: str | None, period: str | None):
    """List transactions with their lines, newest first."""
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)
    with reporting_errors(ctx):
        transactions = TransactionService(db).list_transactions(company_id, start, end)
    if not transactions:
        click.echo("No transactions found.")
        return

    with reporting_errors(ctx):
        accounts = {acc.id: acc for acc in AccountService(db).list_accounts(company_id)}
    for txn in transactions:
        click.echo(f"\n#{txn.id} {txn.date} {txn.currency} {txn.memo or ''}")
        for line in txn.lines:
            code = accounts[line.account_id].code if line.account_id in accounts else "?"
            click.echo(f"    {code:>6s} {line.debit:>15,.2f} {line.credit:>15,.2f}")


@ledger_group.command("cash-lines")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--prefix", default=CASH_CODE_PREFIX, show_default=True, help="Account code prefix")
@click.option("--limit", default=DEFAULT_CASH_LEDGER_LIMIT, show_default=True, type=int)
@click.option("--order", type=click.Choice(["asc", "desc"]), default="desc", show_default=True)
@click.pass_context
def cash_lines(ctx, company_id: int, prefix: str, limit: int, order: str):
    """Show lines posted to cash accounts."""
    with reporting_errors(ctx):
        lines = TransactionService(ctx.obj["db"]).query_cash_lines(company_id, prefix, limit, order)
    if not lines:
        click.echo("No cash lines found.")
        return

    for line in lines:
        memo = (line.memo or "")[:30]
        click.echo(
            f"{line.date} #{line.transaction_id:<6d} {line.account_code:>6s} {memo:30s} "
            f"{line.currency} {line.amount:>15,.2f}"
        )


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
