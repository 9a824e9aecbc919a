"""Structured logging configuration for lexledger."""

import logging
import os
import sys
from typing import Literal, Optional

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS = ("console", "json")


def configure_logging(
    level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None,
    format: Optional[Literal["console", "json"]] = None,
) -> None:
    """Configure structured logging for the application.

    Log records go to stderr so command output on stdout stays parseable.

    Args:
        level: Log level. Defaults to LEXLEDGER_LOG_LEVEL, then WARNING.
        format: Output format. Defaults to LEXLEDGER_LOG_FORMAT, then console.
    """
    log_level = (level or os.environ.get("LEXLEDGER_LOG_LEVEL") or "WARNING").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{log_level}'. Expected one of: {', '.join(LOG_LEVELS)}")
    log_format = (format or os.environ.get("LEXLEDGER_LOG_FORMAT") or "console").lower()
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{log_format}'. Expected one of: {', '.join(LOG_FORMATS)}")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
