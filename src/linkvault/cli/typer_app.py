"""
LinkVault Typer CLI Application

Command line front end of the table cache: rebuild it, clear it and
inspect what is cached.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from linkvault.cli.common.context import CliContext, LogLevel, get_cli_context, set_cli_context
from linkvault.cli.common.options import (
    config_option,
    json_output_option,
    log_level_option,
    verbose_option,
    version_option,
)
from linkvault.cli.refresh_handler import handle_clear_command, handle_refresh_command
from linkvault.cli.show_handler import handle_show_command
from linkvault.cli.status_handler import handle_status_command
from linkvault.shared.constants import CLICommands, CLIDefaults, CLIHelp

app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.INFO,
    json_output: Annotated[bool, json_output_option] = False,
    config: Annotated[Optional[Path], config_option] = None,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Process the global options shared by every command.

    ``--version`` is handled by its eager callback before any command runs.
    """
    set_cli_context(
        CliContext(
            verbose=verbose,
            log_level=log_level,
            json_output=json_output,
            config_path=config,
        )
    )


def _exit_with(exit_code: int) -> None:
    if exit_code != CLIDefaults.EXIT_SUCCESS:
        raise typer.Exit(exit_code)


@app.command(CLICommands.REFRESH, help=CLIHelp.REFRESH_HELP)
def refresh_command() -> None:
    """
    Rebuild the whole cache from the remote base.

    Examples:
        linkvault refresh
        linkvault --json refresh
    """
    _exit_with(handle_refresh_command(get_cli_context()))


@app.command(CLICommands.CLEAR, help=CLIHelp.CLEAR_HELP)
def clear_command() -> None:
    _exit_with(handle_clear_command(get_cli_context()))


@app.command(CLICommands.STATUS, help=CLIHelp.STATUS_HELP)
def status_command() -> None:
    _exit_with(handle_status_command(get_cli_context()))


@app.command(CLICommands.SHOW, help=CLIHelp.SHOW_HELP)
def show_command(
    table: str = typer.Argument(..., help=CLIHelp.SHOW_TABLE_HELP),
    path: Optional[str] = typer.Option(None, "--path", "-p", help=CLIHelp.SHOW_PATH_HELP),
) -> None:
    """
    Print a cached table, or one value inside it.

    Examples:
        linkvault show courses
        linkvault show courses --path "0.fields.lessons[1].fields.name"
    """
    _exit_with(handle_show_command(get_cli_context(), table, path))


if __name__ == "__main__":
    app()
