"""
JSON Output Formatter for LinkVault CLI

Produces the machine-readable envelope printed when --json is given.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any

import orjson


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """
    Format command output as JSON.

    Args:
        success: Whether the command executed successfully
        command: The command name (e.g., "refresh", "show")
        data: The command's output data
        errors: List of error messages
        warnings: List of warning messages

    Returns:
        JSON-encoded bytes ready for output

    Example:
        >>> output = format_json_output(
        ...     success=True,
        ...     command="refresh",
        ...     data={"anchor_table": "courses", "records": 2},
        ... )
    """
    errors = errors or []
    warnings = warnings or []
    if errors:
        success = False

    json_data = {
        "success": success,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": data,
        "errors": errors,
        "warnings": warnings,
    }

    return orjson.dumps(
        json_data,
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
        default=str,
    )


def write_json_output(payload: bytes) -> None:
    sys.stdout.buffer.write(payload)
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()
