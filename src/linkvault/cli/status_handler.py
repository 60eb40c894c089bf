"""Status command handler."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.table import Table

from linkvault.cli.common.context import CliContext
from linkvault.cli.common.error_handler import handle_cli_errors
from linkvault.cli.common.setup import open_service
from linkvault.cli.json_formatter import format_json_output, write_json_output
from linkvault.shared.constants import CLICommands, CLIDefaults, CLIMessages

logger = logging.getLogger(__name__)


@handle_cli_errors(command_name=CLICommands.STATUS)
def handle_status_command(context: CliContext, console: Console | None = None) -> int:
    """Show the persisted cache: tables, record counts and slot sizes."""
    console = console or Console()

    with open_service(context) as service:
        restored = service.restore()
        status = service.status()

    data = {
        "restored": restored,
        "tables": status["tables"],
        "slots": status["slots"],
    }

    if context.json_output:
        write_json_output(
            format_json_output(success=True, command=CLICommands.STATUS, data=data)
        )
        return CLIDefaults.EXIT_SUCCESS

    if not restored:
        console.print(f"[yellow]{CLIMessages.CACHE_EMPTY}[/yellow]")
        return CLIDefaults.EXIT_SUCCESS

    tables = Table(title="Cached tables")
    tables.add_column("Table", style="cyan")
    tables.add_column("Records", justify="right")
    for name, count in status["tables"].items():
        tables.add_row(name, str(count))
    console.print(tables)

    slots = Table(title="Persisted slots")
    slots.add_column("Slot", style="cyan")
    slots.add_column("Bytes", justify="right")
    slots.add_column("Updated")
    for slot in status["slots"]:
        slots.add_row(slot["slot"], str(slot["payload_size"]), slot["updated_at"] or "-")
    console.print(slots)
    return CLIDefaults.EXIT_SUCCESS
