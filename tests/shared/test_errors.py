"""Tests for the LinkVault error hierarchy."""

from pathlib import Path

import pytest

from linkvault.shared.errors import (
    ApplicationError,
    CacheCorruptionError,
    ErrorCode,
    ErrorContext,
    FetchError,
    InfrastructureError,
    LinkVaultError,
    RefreshError,
    create_api_error,
    create_cache_corruption_error,
    create_cli_error,
    create_config_error,
    create_path_error,
)


class TestErrorContext:
    def test_additional_data_coerced(self):
        context = ErrorContext(additional_data={"path": Path("a/b"), "code": ErrorCode.CACHE_CORRUPTION})

        assert context.additional_data == {"path": str(Path("a/b")), "code": "CACHE_CORRUPTION"}

    def test_non_primitive_rejected(self):
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"records": [1, 2]})

    def test_safe_dict_masks_api_key(self):
        context = ErrorContext(
            operation="fetch_all",
            table="verbs",
            additional_data={"api_key": "patSECRET", "status_code": 401},
        )

        assert context.safe_dict() == {
            "operation": "fetch_all",
            "table": "verbs",
            "additional_data": {"status_code": 401},
        }


class TestErrors:
    def test_str_and_dict(self):
        error = LinkVaultError(ErrorCode.VALIDATION_ERROR, "bad input")

        assert str(error) == "VALIDATION_ERROR: bad input"
        assert error.to_dict()["code"] == "VALIDATION_ERROR"
        assert error.to_dict()["original_error"] is None

    def test_fetch_error_keeps_cause(self):
        cause = ConnectionError("reset")

        error = FetchError("verbs", cause)

        assert isinstance(error, InfrastructureError)
        assert error.code == ErrorCode.TABLE_FETCH_FAILED
        assert error.table == "verbs"
        assert error.cause is cause
        assert "verbs" in error.message
        assert error.context.table == "verbs"

    def test_refresh_error_message_uses_cause_message(self):
        fetch_error = FetchError("courses", ConnectionError("reset"))

        error = RefreshError("courses", fetch_error)

        assert error.code == ErrorCode.REFRESH_FAILED
        assert error.message.startswith("Failed to refresh cache: anchor table 'courses'")
        assert "TABLE_FETCH_FAILED" not in error.message
        assert error.original_error is fetch_error


class TestFactories:
    def test_api_error_status(self):
        error = create_api_error("denied", ErrorCode.API_AUTHENTICATION_FAILED, "verbs", 401)

        assert error.context.additional_data == {"status_code": 401}
        assert error.context.table == "verbs"

    def test_cache_corruption_error(self):
        error = create_cache_corruption_error("bad blob", "airtable_cache")

        assert isinstance(error, CacheCorruptionError)
        assert error.context.additional_data == {"slot": "airtable_cache"}

    def test_path_error(self):
        error = create_path_error("a..b", "malformed segment ''")

        assert error.code == ErrorCode.INVALID_PATH_EXPRESSION
        assert "a..b" in error.message

    def test_cli_error(self):
        error = create_cli_error("boom", "show", exit_code=2)

        assert error.command == "show"
        assert error.exit_code == 2
        assert error.code == ErrorCode.CLI_UNEXPECTED_ERROR

    def test_config_error_defaults(self):
        error = create_config_error("no base id", config_key="api.airtable.base_id")

        assert isinstance(error, ApplicationError)
        assert error.code == ErrorCode.CONFIG_ERROR
        assert error.context.additional_data == {"config_key": "api.airtable.base_id"}

    def test_config_error_with_code_and_file(self):
        error = create_config_error(
            "missing", code=ErrorCode.MISSING_CONFIG, file_path="config.toml"
        )

        assert error.code == ErrorCode.MISSING_CONFIG
        assert error.context.file_path == "config.toml"
