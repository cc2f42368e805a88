"""Structured logging for traffic2postman, built on structlog.

Events are written to stderr so they never mix with the collection JSON
that ``t2p convert --dry-run`` prints on stdout.
"""

import logging as stdlib_logging
import sys
from typing import Any

import structlog

DEFAULT_LEVEL = "WARNING"


def level_for_verbosity(verbose: int, default: str = DEFAULT_LEVEL) -> str:
    """Map a ``-v`` count to a level name; zero keeps ``default``."""
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return default


def _renderer(json_output: bool) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(level: str = DEFAULT_LEVEL, json_output: bool = False) -> None:
    """Configure structlog for traffic2postman.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to WARNING.
        json_output: Render one JSON object per event instead of console lines.
    """
    threshold = getattr(stdlib_logging, level.upper(), stdlib_logging.WARNING)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a logger bound to ``name`` (usually the module's ``__name__``)."""
    return structlog.get_logger(name)
