"""Terminal output for the ``t2p`` command.

Status lines and the warning summary go to stderr. Collection JSON from a
dry run and the version/config panels go to stdout so they can be piped.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape

from traffic2postman.models import ParseWarning

err_console = Console(stderr=True)
out_console = Console()

MAX_WARNINGS_SHOWN = 3


def success(message: str) -> None:
    err_console.print(f"[green]  ✓ {message}[/green]")


def error(message: str) -> None:
    err_console.print(f"[red]  ✗ {message}[/red]")


def warn(message: str) -> None:
    err_console.print(f"[yellow]  ⚠ {message}[/yellow]")


def info(message: str) -> None:
    err_console.print(f"[dim]  {message}[/dim]")


def print_collection_json(text: str) -> None:
    """Write collection JSON to stdout unchanged: no markup, highlighting or wrapping."""
    out_console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_warnings(warnings: Sequence[ParseWarning], limit: int = MAX_WARNINGS_SHOWN) -> None:
    """Summarize non-fatal warnings, listing at most ``limit`` of them."""
    if not warnings:
        return

    warn(f"{len(warnings)} inputs or items could not be converted")
    for warning in warnings[:limit]:
        info(escape(str(warning)))
    if len(warnings) > limit:
        info(f"... and {len(warnings) - limit} more")
