"""CLI error handling helpers."""

from contextlib import contextmanager
from typing import Iterator

import click
import structlog

from lexledger.domain.errors import DomainError, StorageError

logger = structlog.get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_storage_error(ctx: click.Context, error: StorageError) -> None:
    """Log a storage failure with its context and exit with a generic message."""
    logger.error("command_failed", command=ctx.command_path, error=str(error))
    click.echo("Error: the database operation failed; no changes were saved.", err=True)
    ctx.exit(2)


@contextmanager
def reporting_errors(ctx: click.Context) -> Iterator[None]:
    """Turn domain and storage errors raised by a command body into exits 1 and 2."""
    try:
        yield
    except DomainError as e:
        handle_domain_error(ctx, e)
    except StorageError as e:
        handle_storage_error(ctx, e)
