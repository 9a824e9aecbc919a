"""Destructive maintenance commands."""

import click
from lexledger.cli.error_handling import reporting_errors
from lexledger.domain.entities import DeletionReport
from lexledger.domain.maintenance import LEGACY_TRUST_CURRENCY, MaintenanceService


def _print_counts(report: DeletionReport) -> None:
    for kind, count in report.counts.items():
        click.echo(f"  {kind:25s} {count:>8d}")
    click.echo(f"  {'total':25s} {report.total:>8d}")


@click.command("wipe-company")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--confirm", is_flag=True, help="Required: deletes all of the company's records")
@click.pass_context
def wipe_company(ctx, company_id: int, confirm: bool):
    """Delete every ledger, trust and practice record of a company.

    Without --confirm, only shows what would be deleted.
    """
    service = MaintenanceService(ctx.obj["db"])
    with reporting_errors(ctx):
        if not confirm:
            click.echo(f"Would delete from company {company_id}:")
            _print_counts(service.preview_company_wipe(company_id))
            click.echo("Error: pass --confirm to delete.", err=True)
            ctx.exit(1)

        report = service.wipe_company_financials(company_id)
        click.echo(f"Deleted from company {company_id}:")
        _print_counts(report)


@click.command("delete-project")
@click.argument("project_id", type=int)
@click.option("--confirm", is_flag=True, help="Required: deletes the project and its records")
@click.pass_context
def delete_project(ctx, project_id: int, confirm: bool):
    """Delete a project, its postings, time, assignments and invoices.

    Trust accounts are kept and become orphans.
    """
    if not confirm:
        click.echo("Error: delete-project removes the project and its records; pass --confirm.", err=True)
        ctx.exit(1)

    with reporting_errors(ctx):
        report = MaintenanceService(ctx.obj["db"]).delete_project(project_id)
        click.echo(f"Deleted project {project_id}:")
        _print_counts(report)


@click.command("clear-trust")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--confirm", is_flag=True, help="Required: deletes all trust accounts of the company")
@click.pass_context
def clear_trust(ctx, company_id: int, confirm: bool):
    """Delete all trust transactions and trust accounts of a company."""
    if not confirm:
        click.echo("Error: clear-trust deletes every trust account of the company; pass --confirm.", err=True)
        ctx.exit(1)

    with reporting_errors(ctx):
        report = MaintenanceService(ctx.obj["db"]).clear_trust_accounts(company_id)
        click.echo(f"Cleared trust records of company {company_id}:")
        _print_counts(report)


@click.command("move-trust-cash")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--currency", default=LEGACY_TRUST_CURRENCY, show_default=True, help="Currency of the balance")
@click.pass_context
def move_trust_cash(ctx, company_id: int, currency: str):
    """Move a positive bank (1010) balance to client trust cash (1020)."""
    with reporting_errors(ctx):
        moved = MaintenanceService(ctx.obj["db"]).move_legacy_trust_cash(company_id, currency=currency)
        if moved == 0:
            click.echo("No positive balance to move")
        else:
            click.echo(f"Moved {moved} {currency.upper()} from 1010 to 1020")


def register_commands(cli):
    """Register maintenance commands with main CLI."""
    cli.add_command(wipe_company)
    cli.add_command(delete_project)
    cli.add_command(clear_trust)
    cli.add_command(move_trust_cash)
