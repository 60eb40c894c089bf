"""
CLI Error Handling Utilities

Maps exceptions raised by commands to CLI errors, logs them and prints
them in the selected output format.
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import Any, Callable, TypeVar

from linkvault.cli.common.context import get_cli_context
from linkvault.cli.json_formatter import format_json_output, write_json_output
from linkvault.shared.constants import CLIDefaults
from linkvault.shared.errors import (
    CliError,
    ErrorCode,
    LinkVaultError,
    SecurityError,
    create_cli_error,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle a CLI error with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    cli_error = _map_error_to_cli_error(error, command)
    _log_error(error, command, cli_error)

    if json_output:
        write_json_output(
            format_json_output(
                success=False,
                command=command,
                errors=[cli_error.message],
                data={
                    "error_code": cli_error.code.value,
                    "error_type": type(error).__name__,
                    "exit_code": cli_error.exit_code,
                },
            )
        )
    else:
        sys.stderr.write(f"Error: {cli_error.message}\n")

    return cli_error.exit_code


def _map_error_to_cli_error(error: BaseException, command: str) -> CliError:
    if isinstance(error, CliError):
        return error

    if isinstance(error, KeyboardInterrupt):
        return create_cli_error(
            message="Command interrupted by user",
            command=command,
            code=ErrorCode.CLI_COMMAND_INTERRUPTED,
            exit_code=CLIDefaults.EXIT_INTERRUPTED,
        )

    original = error if isinstance(error, Exception) else None

    if isinstance(error, SecurityError):
        return create_cli_error(
            message=f"Configuration error: {error.message}",
            command=command,
            code=error.code,
            original_error=original,
        )

    if isinstance(error, LinkVaultError):
        return create_cli_error(
            message=error.message,
            command=command,
            code=error.code,
            original_error=original,
        )

    if isinstance(error, OSError):
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=original,
        )

    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=original,
    )


def _log_error(error: BaseException, command: str, cli_error: CliError) -> None:
    context = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": cli_error.code.value,
    }
    if isinstance(error, KeyboardInterrupt):
        logger.warning("Command interrupted: %s", cli_error.message, extra={"context": context})
    elif isinstance(error, LinkVaultError):
        logger.error("CLI error in %s: %s", command, cli_error.message, extra={"context": context})
    else:
        logger.exception("CLI error in %s: %s", command, cli_error.message, extra={"context": context})


def handle_cli_errors(command_name: str) -> Callable[[F], F]:
    """Decorator turning exceptions of a command handler into an exit code.

    Example:
        >>> @handle_cli_errors(command_name="refresh")
        ... def handle_refresh_command(context) -> int:
        ...     ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except (Exception, KeyboardInterrupt) as e:
                return handle_cli_error(
                    e,
                    command_name,
                    json_output=get_cli_context().json_output,
                )

        return wrapper  # type: ignore[return-value]

    return decorator
