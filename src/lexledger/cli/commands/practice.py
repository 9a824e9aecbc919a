"""Company, client and project commands."""

import click
from lexledger.cli.date_filters import parse_date_or_exit
from lexledger.cli.error_handling import reporting_errors
from lexledger.domain.practice import PracticeService


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("create")
@click.argument("name", metavar="COMPANY_NAME")
@click.pass_context
def create_company(ctx, name: str):
    """Create a new company.

    Examples:
        lexledger company create "Hassan & Partners"
    """
    service = PracticeService(ctx.obj["db"])
    with reporting_errors(ctx):
        company_id = service.create_company(name)
        click.echo(f"Created company '{name}' (ID: {company_id})")


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    with reporting_errors(ctx):
        companies = PracticeService(ctx.obj["db"]).list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 50)
    for company in companies:
        click.echo(f"ID: {company.id:3d} | {company.name}")


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("create")
@click.argument("name", metavar="CLIENT_NAME")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.pass_context
def create_client(ctx, name: str, company_id: int):
    """Create a client of a company."""
    service = PracticeService(ctx.obj["db"])
    with reporting_errors(ctx):
        client_id = service.create_client(company_id, name)
        click.echo(f"Created client '{name}' (ID: {client_id})")


@client_group.command("list")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.pass_context
def list_clients(ctx, company_id: int):
    """List a company's clients."""
    with reporting_errors(ctx):
        clients = PracticeService(ctx.obj["db"]).list_clients(company_id)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 50)
    for client in clients:
        click.echo(f"ID: {client.id:3d} | {client.name}")


@click.group()
def project_group():
    """Manage projects (matters)."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--client", "client_id", type=int, required=True, help="Client ID")
@click.pass_context
def create_project(ctx, name: str, client_id: int):
    """Open a project for a client.

    Examples:
        lexledger project create "Lease dispute" --client 3
    """
    service = PracticeService(ctx.obj["db"])
    with reporting_errors(ctx):
        project_id = service.create_project(client_id, name)
        click.echo(f"Created project '{name}' (ID: {project_id})")


@project_group.command("list")
@click.option("--company", "company_id", type=int, required=True, help="Company ID")
@click.option("--client", "client_id", type=int, help="Only projects of this client")
@click.pass_context
def list_projects(ctx, company_id: int, client_id: int | None):
    """List projects."""
    with reporting_errors(ctx):
        projects = PracticeService(ctx.obj["db"]).list_projects(company_id, client_id=client_id)
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 60)
    for project in projects:
        click.echo(f"ID: {project.id:3d} | Client: {project.client_id:3d} | {project.name}")


@project_group.command("assign")
@click.argument("project_id", type=int)
@click.argument("lawyer")
@click.option("--role", help="Role on the project, e.g. lead")
@click.pass_context
def assign_lawyer(ctx, project_id: int, lawyer: str, role: str | None):
    """Assign a lawyer to a project."""
    service = PracticeService(ctx.obj["db"])
    with reporting_errors(ctx):
        assignment_id = service.assign_lawyer(project_id, lawyer, role)
        click.echo(f"Assigned {lawyer} to project {project_id} (ID: {assignment_id})")


@project_group.command("invoice")
@click.argument("project_id", type=int)
@click.argument("number")
@click.argument("amount")
@click.option("--currency", default="USD", show_default=True)
@click.option("--date", "issued_on", help="Issue date (defaults to today)")
@click.pass_context
def create_invoice(ctx, project_id: int, number: str, amount: str, currency: str, issued_on: str | None):
    """Record an invoice issued on a project."""
    issued = parse_date_or_exit(ctx, issued_on, "date")
    service = PracticeService(ctx.obj["db"])
    with reporting_errors(ctx):
        invoice_id = service.create_invoice(project_id, number, amount, currency, issued)
        click.echo(f"Recorded invoice {number} (ID: {invoice_id})")


@project_group.command("time")
@click.argument("project_id", type=int)
@click.argument("lawyer")
@click.argument("hours")
@click.option("--date", "entry_date", help="Date worked (defaults to today)")
@click.option("--description", help="Work description")
@click.pass_context
def log_time(ctx, project_id: int, lawyer: str, hours: str, entry_date: str | None, description: str | None):
    """Log hours worked on a project."""
    worked_on = parse_date_or_exit(ctx, entry_date, "date")
    service = PracticeService(ctx.obj["db"])
    with reporting_errors(ctx):
        entry_id = service.create_time_entry(project_id, lawyer, hours, worked_on, description)
        click.echo(f"Logged {hours}h for {lawyer} (ID: {entry_id})")


def register_commands(cli):
    """Register practice commands with main CLI."""
    cli.add_command(company_group, name="company")
    cli.add_command(client_group, name="client")
    cli.add_command(project_group, name="project")
