"""Show command handler."""

from __future__ import annotations

import logging

import orjson
from rich.console import Console

from linkvault.cli.common.context import CliContext
from linkvault.cli.common.error_handler import handle_cli_errors
from linkvault.cli.common.setup import open_service
from linkvault.cli.json_formatter import format_json_output, write_json_output
from linkvault.core.models import records_to_dicts
from linkvault.shared.constants import CLICommands, CLIDefaults, CLIMessages
from linkvault.shared.errors import ErrorCode, create_cli_error

logger = logging.getLogger(__name__)


@handle_cli_errors(command_name=CLICommands.SHOW)
def handle_show_command(
    context: CliContext,
    table: str,
    path: str | None = None,
    console: Console | None = None,
) -> int:
    """Print a cached table, or the value at ``path`` inside it.

    Raises:
        CliError: If the table is not in the persisted cache
    """
    console = console or Console()

    with open_service(context) as service:
        service.restore()
        records = service.read_table(table)
        if records is None:
            raise create_cli_error(
                message=CLIMessages.TABLE_NOT_CACHED.format(table=table),
                command=CLICommands.SHOW,
                code=ErrorCode.CLI_TABLE_NOT_CACHED,
            )
        value = service.get_path(table, path) if path else records_to_dicts(records)

    if context.json_output:
        write_json_output(
            format_json_output(
                success=True,
                command=CLICommands.SHOW,
                data={"table": table, "path": path, "value": value},
            )
        )
    else:
        console.print_json(orjson.dumps(value).decode("utf-8"))
    return CLIDefaults.EXIT_SUCCESS
