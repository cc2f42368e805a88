"""traffic2postman CLI - turn captured HTTP traffic into Postman collections.

Converts a file of cURL commands, or a directory of Burp Suite XML exports,
into a single Postman collection v2.1.0 file.
"""

import os
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.markup import escape
from rich.panel import Panel

import traffic2postman
from traffic2postman.collection import write_collection
from traffic2postman.config import get_settings
from traffic2postman.console import (
    err_console,
    error,
    info,
    out_console,
    print_collection_json,
    print_warnings,
    success,
    warn,
)
from traffic2postman.convert import convert_burp_directory, convert_curl_file
from traffic2postman.exceptions import OutputWriteError
from traffic2postman.logging import configure_logging, get_logger, level_for_verbosity

# Configure logging early using env vars directly; -v/-vv and --log-format
# in main_callback() may reconfigure later.
configure_logging(
    level=os.environ.get("TRAFFIC2POSTMAN_LOG_LEVEL", "WARNING"),
    json_output=os.environ.get("TRAFFIC2POSTMAN_LOG_FORMAT", "console") == "json",
)

LOG = get_logger(__name__)

USAGE_EXAMPLES = """\
[bold]Examples:[/bold]
  t2p convert -c list-of-curl-commands.txt -o postman-out-collection.json
  t2p convert --curl-in list-of-curl-commands.txt --postman-out postman-out-collection.json
  t2p convert -b BURP_XML_FILES/ --postman-out postman-out-collection.json

[dim]Only one input is allowed: a list of cURL commands OR a directory of Burp XML
files, not both.[/dim]"""

app = typer.Typer(
    name="traffic2postman",
    help="""
    traffic2postman - turn captured HTTP traffic into Postman collections

    \b
    Quick start:
      t2p convert -c commands.txt        Convert cURL commands
      t2p convert -b burp_exports/       Convert Burp XML exports
      t2p config                         Show current configuration
    """,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v for info, -vv for debug)",
        ),
    ] = 0,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            click_type=click.Choice(["console", "json"]),
            help="Log output format: console (human-readable) or json (structured)",
        ),
    ] = None,
) -> None:
    """traffic2postman - turn captured HTTP traffic into Postman collections."""
    settings = get_settings()
    json_output = (log_format or settings.log_format) == "json"

    if verbose or log_format is not None:
        configure_logging(
            level=level_for_verbosity(verbose, settings.log_level),
            json_output=json_output,
        )


@app.command("version")
def version() -> None:
    """Show traffic2postman version."""
    out_console.print(
        Panel(
            f"[bold cyan]traffic2postman[/bold cyan] v{traffic2postman.__version__}",
            title="Captured traffic to Postman",
            border_style="cyan",
        )
    )


@app.command("config")
def config() -> None:
    """Show current traffic2postman configuration."""
    settings = get_settings()
    details = f"""
[dim]Default output:[/dim]  {settings.output_file}
[dim]Schema URL:[/dim]      {settings.schema_url}
[dim]JSON indent:[/dim]     {settings.json_indent}
[dim]Sniff bytes:[/dim]     {settings.sniff_bytes}
[dim]Log level:[/dim]       {settings.log_level}
[dim]Log format:[/dim]      {settings.log_format}"""

    out_console.print(Panel(details.strip(), title="⚙ Configuration", border_style="cyan"))


@app.command("convert")
def convert(
    curl_in: Annotated[
        Path | None,
        typer.Option(
            "--curl-in",
            "-c",
            help="Text file with cURL commands, one per line",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    burp_dir: Annotated[
        Path | None,
        typer.Option(
            "--burp-dir",
            "-b",
            help='Directory of Burp Repeater "saved item" XML files (searched recursively)',
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
        ),
    ] = None,
    postman_out: Annotated[
        Path | None,
        typer.Option(
            "--postman-out",
            "-o",
            help="Output collection file (default: postman_out.json)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Print the collection JSON instead of writing it",
        ),
    ] = False,
) -> None:
    """Convert cURL commands or Burp XML exports into a Postman collection.

    \b
    Examples:
        t2p convert -c commands.txt -o collection.json
        t2p convert -b burp_exports/ --dry-run
    """
    if (curl_in is None) == (burp_dir is None):
        error("Specify exactly one of --curl-in or --burp-dir")
        err_console.print(USAGE_EXAMPLES)
        raise typer.Exit(2)

    if curl_in is not None:
        info(f"Processing cURL commands file: {escape(str(curl_in))}")
        result = convert_curl_file(curl_in)
    else:
        info(f"Processing Burp XML directory: {escape(str(burp_dir))}")
        result = convert_burp_directory(burp_dir)

    print_warnings(result.warnings)

    collection = result.collection
    LOG.info("conversion_finished", requests=len(collection), warnings=len(result.warnings))
    if not len(collection):
        warn("No items were found to convert")
        raise typer.Exit(1)

    if dry_run:
        print_collection_json(collection.dumps())
        return

    output_path = postman_out or Path(get_settings().output_file)
    try:
        write_collection(collection, output_path)
    except OutputWriteError as exc:
        error(escape(str(exc)))
        raise typer.Exit(1) from None

    success(
        f"Converted {len(collection)} requests to Postman collection: {escape(str(output_path))}"
    )


if __name__ == "__main__":
    app()
