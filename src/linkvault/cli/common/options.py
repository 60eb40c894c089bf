"""
Reusable Typer Options Module

Common option definitions shared by the main callback. Each is a
``typer.Option`` used as ``Annotated`` metadata::

    verbose: Annotated[int, verbose_option] = 0
"""

from __future__ import annotations

import typer

from linkvault.shared.constants import CLIDefaults, CLIHelp


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit

verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO.",
)

json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)

config_option = typer.Option(
    "--config",
    "-c",
    help=CLIHelp.CONFIG_HELP,
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)
