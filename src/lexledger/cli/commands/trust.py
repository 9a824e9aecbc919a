"""Client trust account commands."""

import click
from lexledger.cli.date_filters import parse_date_or_exit
from lexledger.cli.error_handling import reporting_errors
from lexledger.domain.entities import TrustAccountType
from lexledger.domain.trust import TrustService

TRUST_TYPES = [t.value for t in TrustAccountType]


def _print_accounts(accounts) -> None:
    click.echo("-" * 75)
    for acc in accounts:
        project = acc.project_id if acc.project_id is not None else "-"
        click.echo(
            f"ID: {acc.id:3d} | Client: {acc.client_id:3d} | Project: {project!s:>3s} | "
            f"{acc.account_type.value:8s} | {acc.currency} {acc.balance:>14,.2f}"
        )


@click.group()
def trust_group():
    """Manage per-project client trust accounts."""
    pass


@trust_group.command("open")
@click.option("--project", "project_id", type=int, required=True, help="Project ID")
@click.option("--client", "client_id", type=int, required=True, help="Client ID")
@click.option("--type", "account_type", type=click.Choice(TRUST_TYPES, case_sensitive=False), default="EXPENSE", show_default=True)
@click.option("--currency", default="USD", show_default=True)
@click.pass_context
def open_account(ctx, project_id: int, client_id: int, account_type: str, currency: str):
    """Find or create the trust account for a project, type and currency."""
    with reporting_errors(ctx):
        account = TrustService(ctx.obj["db"]).get_or_create_trust_account(project_id, client_id, account_type, currency)
        click.echo(f"Trust account {account.id} ({account.account_type.value}, {account.currency})")


@trust_group.command("post")
@click.argument("trust_account_id", type=int)
@click.argument("amount")
@click.option("--memo", help="Memo")
@click.option("--date", "txn_date", help="Date (defaults to today)")
@click.pass_context
def post(ctx, trust_account_id: int, amount: str, memo: str | None, txn_date: str | None):
    """Deposit (positive AMOUNT) or withdraw (negative AMOUNT) trust funds.

    Examples:
        lexledger trust post 4 2500 --memo "Retainer received"
        lexledger trust post 4 -- -300 --memo "Court filing fee"
    """
    posted_on = parse_date_or_exit(ctx, txn_date, "date")
    service = TrustService(ctx.obj["db"])
    with reporting_errors(ctx):
        txn_id = service.post_trust_transaction(trust_account_id, amount, memo, posted_on)
        account = service.get_trust_account(trust_account_id)
        click.echo(f"Recorded trust transaction {txn_id}; balance {account.currency} {account.balance:,.2f}")


@trust_group.command("list")
@click.option("--company", "company_id", type=int, help="Company ID")
@click.option("--client", "client_id", type=int, help="Client ID")
@click.option("--project", "project_id", type=int, help="Project ID")
@click.option("--type", "account_type", type=click.Choice(TRUST_TYPES, case_sensitive=False))
@click.option("--currency", help="Currency code")
@click.pass_context
def list_accounts(ctx, company_id, client_id, project_id, account_type, currency):
    """List trust accounts."""
    with reporting_errors(ctx):
        accounts = TrustService(ctx.obj["db"]).list_trust_accounts(
            company_id=company_id,
            client_id=client_id,
            project_id=project_id,
            account_type=account_type,
            currency=currency,
        )
    if not accounts:
        click.echo("No trust accounts found.")
        return
    click.echo("\nTrust accounts:")
    _print_accounts(accounts)


@trust_group.command("history")
@click.argument("trust_account_id", type=int)
@click.pass_context
def history(ctx, trust_account_id: int):
    """Show a trust account's transactions, newest first."""
    with reporting_errors(ctx):
        txns = TrustService(ctx.obj["db"]).list_trust_transactions(trust_account_id)
    if not txns:
        click.echo("No trust transactions found.")
        return
    for txn in txns:
        click.echo(f"{txn.date} #{txn.id:<6d} {(txn.memo or '')[:40]:40s} {txn.amount:>14,.2f}")


@trust_group.command("orphans")
@click.pass_context
def orphans(ctx):
    """List trust accounts whose project no longer exists."""
    with reporting_errors(ctx):
        accounts = TrustService(ctx.obj["db"]).find_orphan_trust_accounts()
    if not accounts:
        click.echo("No orphan trust accounts.")
        return
    click.echo(f"\n{len(accounts)} orphan trust account(s):")
    _print_accounts(accounts)


@trust_group.command("purge-orphans")
@click.option("--confirm", is_flag=True, help="Required: deletes orphan accounts and their transactions")
@click.pass_context
def purge_orphans(ctx, confirm: bool):
    """Delete orphan trust accounts and their transactions."""
    if not confirm:
        click.echo("Error: purge-orphans deletes trust accounts and their history; pass --confirm.", err=True)
        ctx.exit(1)

    with reporting_errors(ctx):
        report = TrustService(ctx.obj["db"]).purge_orphan_trust_accounts()
    click.echo(
        f"Purged {len(report.purged_account_ids)} trust account(s), "
        f"{report.transactions_deleted} trust transaction(s)"
    )
    if not report.ok:
        for account_id, reason in sorted(report.failures.items()):
            click.echo(f"Error: trust account {account_id}: {reason}", err=True)
        ctx.exit(1)


@trust_group.command("refund")
@click.argument("client_id", type=int)
@click.argument("amount")
@click.option("--currency", default="USD", show_default=True)
@click.option("--project", "project_id", type=int, help="Only draw from this project's accounts")
@click.option("--date", "refund_date", help="Refund date (defaults to today)")
@click.pass_context
def refund(ctx, client_id: int, amount: str, currency: str, project_id: int | None, refund_date: str | None):
    """Refund trust funds to a client and post the ledger entry."""
    refunded_on = parse_date_or_exit(ctx, refund_date, "date")
    with reporting_errors(ctx):
        transaction_id = TrustService(ctx.obj["db"]).refund_to_client(
            client_id, amount, currency, project_id=project_id, refund_date=refunded_on
        )
        click.echo(f"Refunded {amount} {currency.upper()} to client {client_id} (ledger transaction {transaction_id})")


@trust_group.command("reconcile")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--currency", default="USD", show_default=True)
@click.pass_context
def reconcile(ctx, company_id: int, currency: str):
    """Compare trust balances with the trust cash account."""
    with reporting_errors(ctx):
        result = TrustService(ctx.obj["db"]).reconcile(company_id, currency)
    click.echo(f"Trust accounts:     {result.currency} {result.subledger_total:>14,.2f}")
    click.echo(f"Trust cash ledger:  {result.currency} {result.ledger_total:>14,.2f}")
    click.echo(f"Difference:         {result.currency} {result.difference:>14,.2f}")
    if not result.is_reconciled:
        click.echo("Error: trust accounts do not reconcile with the ledger", err=True)
        ctx.exit(1)
    click.echo("Reconciled")


def register_commands(cli):
    """Register trust commands with main CLI."""
    cli.add_command(trust_group, name="trust")
