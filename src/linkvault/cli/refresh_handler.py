"""Refresh and clear command handlers."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console
from rich.table import Table

from linkvault.cli.common.context import CliContext
from linkvault.cli.common.error_handler import handle_cli_errors
from linkvault.cli.common.setup import open_service
from linkvault.cli.json_formatter import format_json_output, write_json_output
from linkvault.shared.constants import CLICommands, CLIDefaults, CLIMessages

logger = logging.getLogger(__name__)


@handle_cli_errors(command_name=CLICommands.REFRESH)
def handle_refresh_command(context: CliContext, console: Console | None = None) -> int:
    """Rebuild the cache and print a per-table summary.

    Returns:
        Exit code (0 for success)
    """
    console = console or Console()

    with open_service(context) as service:
        if not context.json_output:
            console.print(f"[cyan]{CLIMessages.REFRESH_STARTED}[/cyan]")

        resolved = asyncio.run(service.refresh())
        anchor = service.schema.anchor_table
        status = service.status()

    summary = {
        "anchor_table": anchor,
        "records": len(resolved),
        "tables": status["tables"],
        "unavailable_tables": status["unavailable_tables"],
    }

    if context.json_output:
        warnings = [
            f"Table '{table}' unavailable; its links were dropped"
            for table in status["unavailable_tables"]
        ]
        write_json_output(
            format_json_output(
                success=True,
                command=CLICommands.REFRESH,
                data=summary,
                warnings=warnings,
            )
        )
        return CLIDefaults.EXIT_SUCCESS

    table = Table(title="Cached tables")
    table.add_column("Table", style="cyan")
    table.add_column("Records", justify="right")
    for name, count in status["tables"].items():
        table.add_row(name, str(count))
    console.print(table)

    for name in status["unavailable_tables"]:
        console.print(f"[yellow]Table '{name}' unavailable; its links were dropped[/yellow]")

    console.print(
        f"[green]{CLIMessages.REFRESH_COMPLETED.format(count=len(resolved), table=anchor)}[/green]"
    )
    return CLIDefaults.EXIT_SUCCESS


@handle_cli_errors(command_name=CLICommands.CLEAR)
def handle_clear_command(context: CliContext, console: Console | None = None) -> int:
    """Invalidate the in-memory and persisted cache."""
    console = console or Console()

    with open_service(context) as service:
        service.clear_all()

    if context.json_output:
        write_json_output(
            format_json_output(
                success=True,
                command=CLICommands.CLEAR,
                data={"cleared": True},
            )
        )
    else:
        console.print(f"[green]{CLIMessages.CACHE_CLEARED}[/green]")
    return CLIDefaults.EXIT_SUCCESS
