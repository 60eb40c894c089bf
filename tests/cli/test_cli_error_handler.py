"""Tests for CLI error mapping and JSON output."""

import orjson
import pytest

from linkvault.cli.common.context import CliContext, LogLevel, clear_cli_context, get_cli_context
from linkvault.cli.common.error_handler import handle_cli_error, handle_cli_errors
from linkvault.cli.json_formatter import format_json_output
from linkvault.shared.errors import (
    ErrorCode,
    InfrastructureError,
    SecurityError,
    create_cli_error,
)


class TestHandleCliError:
    def test_linkvault_error_human(self, capsys):
        # Given
        error = InfrastructureError(ErrorCode.CACHE_WRITE_FAILED, "disk full")

        # When
        exit_code = handle_cli_error(error, "refresh")

        # Then
        assert exit_code == 1
        assert "Error: disk full\n" in capsys.readouterr().err

    def test_security_error_prefixed(self, capsys):
        error = SecurityError(ErrorCode.MISSING_CONFIG, "Airtable API key not configured")

        handle_cli_error(error, "refresh")

        assert "Configuration error: Airtable API key" in capsys.readouterr().err

    def test_keyboard_interrupt(self, capsys):
        assert handle_cli_error(KeyboardInterrupt(), "refresh") == 130

    def test_cli_error_keeps_exit_code(self):
        error = create_cli_error("nope", "show", exit_code=3)

        assert handle_cli_error(error, "show") == 3

    def test_json_output(self, capsysbinary):
        # When
        handle_cli_error(ValueError("odd"), "status", json_output=True)

        # Then
        payload = orjson.loads(capsysbinary.readouterr().out)
        assert payload["success"] is False
        assert payload["errors"] == ["Unexpected error: odd"]
        assert payload["data"]["error_code"] == "CLI_UNEXPECTED_ERROR"
        assert payload["data"]["error_type"] == "ValueError"

    def test_os_error(self, capsys):
        handle_cli_error(PermissionError("denied"), "clear")

        assert "File system error" in capsys.readouterr().err


class TestHandleCliErrorsDecorator:
    def test_success_passes_through(self):
        @handle_cli_errors(command_name="status")
        def command():
            return 0

        assert command() == 0

    def test_exception_becomes_exit_code(self, capsys):
        @handle_cli_errors(command_name="status")
        def command():
            raise InfrastructureError(ErrorCode.CACHE_READ_FAILED, "locked")

        assert command() == 1
        assert "locked" in capsys.readouterr().err


class TestFormatJsonOutput:
    def test_envelope(self):
        payload = orjson.loads(
            format_json_output(success=True, command="refresh", data={"records": 1})
        )

        assert payload["success"] is True
        assert payload["command"] == "refresh"
        assert payload["data"] == {"records": 1}
        assert payload["errors"] == []
        assert "timestamp" in payload

    def test_errors_force_failure(self):
        payload = orjson.loads(format_json_output(success=True, command="show", errors=["x"]))

        assert payload["success"] is False


class TestCliContext:
    def test_verbose_overrides_level(self):
        assert CliContext(verbose=1, log_level=LogLevel.ERROR).get_effective_log_level() == "DEBUG"
        assert CliContext(log_level=LogLevel.ERROR).get_effective_log_level() == "ERROR"

    def test_default_context_when_unset(self):
        clear_cli_context()

        assert get_cli_context() == CliContext()

    def test_negative_verbose_rejected(self):
        with pytest.raises(ValueError):
            CliContext(verbose=-1)
