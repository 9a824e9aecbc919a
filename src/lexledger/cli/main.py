"""Main CLI entry point."""

import click
from lexledger.database.factories import create_database
from lexledger.logging_config import LOG_FORMATS, LOG_LEVELS, configure_logging

# Import and register all commands at module level
from lexledger.cli.commands import (
    practice,
    account,
    ledger,
    trust,
    maintenance,
    settings,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides LEXLEDGER_DB_PATH environment variable)",
    envvar="LEXLEDGER_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="LEXLEDGER_DATABASE_URL",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar="LEXLEDGER_LOG_LEVEL",
    help="Log level for diagnostics on stderr (default WARNING)",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    envvar="LEXLEDGER_LOG_FORMAT",
    help="Log output format (default console)",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str | None, log_format: str | None):
    """Lexledger - Ledger and trust accounting for law firms.

    Keep a double-entry general ledger per company alongside per-project
    client trust accounts, and reconcile the two.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level.upper() if log_level else None, format=log_format)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
practice.register_commands(cli)
account.register_commands(cli)
ledger.register_commands(cli)
trust.register_commands(cli)
maintenance.register_commands(cli)
settings.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
