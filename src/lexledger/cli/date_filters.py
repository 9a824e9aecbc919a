"""CLI helpers for date range resolution."""

from datetime import date

import click

from lexledger.utils.date_parser import get_date_range, parse_date

PERIOD_HELP = "Accounting period: this-month, last-quarter, 2024, 2024-03, 2024-Q2, ..."


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse an optional CLI date, or exit with a CLI error."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from --period or explicit dates."""
    if period and (start_date or end_date):
        click.echo("Error: --period cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    if period:
        try:
            return get_date_range(period)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    return start, end
