"""LinkVault Error Handling Module

This module defines the error handling system for LinkVault, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("api_key",)


class ErrorCode(str, Enum):
    """Error codes for the LinkVault application.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FILE_ACCESS_ERROR = "FILE_ACCESS_ERROR"

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_RATE_LIMIT = "API_RATE_LIMIT"
    API_AUTHENTICATION_FAILED = "API_AUTHENTICATION_FAILED"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"
    API_TABLE_NOT_FOUND = "API_TABLE_NOT_FOUND"

    # Table cache errors
    TABLE_FETCH_FAILED = "TABLE_FETCH_FAILED"
    REFRESH_FAILED = "REFRESH_FAILED"
    UNRESOLVED_REFERENCE = "UNRESOLVED_REFERENCE"

    # Cache Errors
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_CORRUPTION = "CACHE_CORRUPTION"
    CACHE_SHAPE_MISMATCH = "CACHE_SHAPE_MISMATCH"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PATH_EXPRESSION = "INVALID_PATH_EXPRESSION"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    MISSING_CONFIG = "MISSING_CONFIG"
    INVALID_CONFIG = "INVALID_CONFIG"

    # CLI Errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_COMMAND_INTERRUPTED = "CLI_COMMAND_INTERRUPTED"
    CLI_TABLE_NOT_CACHED = "CLI_TABLE_NOT_CACHED"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization.

    Attributes:
        operation: Optional operation name that caused the error
        table: Optional table name the operation was working on
        file_path: Optional file path associated with the error
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    table: str | None = None
    file_path: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with sensitive keys masked.

        Args:
            mask_keys: Keys to drop from additional_data. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with a guaranteed additional_data key.

        Example:
            >>> ErrorContext(operation="fetch", table="courses").safe_dict()
            {'operation': 'fetch', 'table': 'courses', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.table is not None:
            data["table"] = self.table
        if self.file_path is not None:
            data["file_path"] = self.file_path

        additional = dict(self.additional_data or {})
        for key in mask_keys:
            additional.pop(key, None)
        data["additional_data"] = additional

        return data


class LinkVaultError(Exception):
    """Base exception class for all LinkVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize LinkVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(LinkVaultError):
    """Domain-specific errors.

    Raised when record or schema rules are violated, e.g. a malformed
    record payload or an invalid path expression.
    """


class InfrastructureError(LinkVaultError):
    """Infrastructure-related errors.

    Raised when interacting with external systems like the remote
    table API or the local SQLite store.
    """


class ApplicationError(LinkVaultError):
    """Application-level errors (configuration, application flow)."""


class SecurityError(LinkVaultError):
    """Security-related errors such as missing API credentials."""


class FetchError(InfrastructureError):
    """A table could not be fetched from the table reader.

    The table stays absent from the cache; a later call retries.

    Attributes:
        table: Name of the table whose fetch failed
        cause: The underlying exception raised by the reader
    """

    def __init__(
        self,
        table: str,
        cause: Exception,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.TABLE_FETCH_FAILED,
            f"Failed to fetch table '{table}': {cause}",
            context or ErrorContext(operation="fetch_table", table=table),
            original_error=cause,
        )
        self.table = table
        self.cause = cause


class RefreshError(InfrastructureError):
    """A full cache refresh was aborted because the anchor fetch failed."""

    def __init__(
        self,
        anchor_table: str,
        cause: Exception,
    ) -> None:
        super().__init__(
            ErrorCode.REFRESH_FAILED,
            f"Failed to refresh cache: anchor table '{anchor_table}' unavailable: "
            f"{cause.message if isinstance(cause, LinkVaultError) else cause}",
            ErrorContext(operation="refresh", table=anchor_table),
            original_error=cause,
        )
        self.anchor_table = anchor_table
        self.cause = cause


class CacheCorruptionError(InfrastructureError):
    """Persisted cache data could not be read back.

    Never surfaced to callers: the cache store downgrades it to an
    empty cache and a forced refresh.
    """


class CliError(ApplicationError):
    """CLI-specific error with an exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


# Convenience functions for common error scenarios
def create_api_error(
    message: str,
    code: ErrorCode = ErrorCode.API_REQUEST_FAILED,
    table: str | None = None,
    status_code: int | None = None,
    original_error: Exception | None = None,
) -> InfrastructureError:
    """Create an API error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"status_code": status_code} if status_code is not None else None
    )
    context = ErrorContext(
        operation="fetch_all",
        table=table,
        additional_data=additional_data,
    )
    return InfrastructureError(code, message, context, original_error)


def create_cache_corruption_error(
    message: str,
    slot: str,
    original_error: Exception | None = None,
) -> CacheCorruptionError:
    """Create a cache corruption error for an unreadable persisted slot."""
    context = ErrorContext(
        operation="restore_cache",
        additional_data={"slot": slot},
    )
    return CacheCorruptionError(
        ErrorCode.CACHE_CORRUPTION,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    code: ErrorCode = ErrorCode.CONFIG_ERROR,
    config_key: str | None = None,
    file_path: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        file_path=file_path,
        additional_data=additional_data,
    )
    return ApplicationError(
        code,
        message,
        context,
        original_error,
    )


def create_path_error(
    path: str,
    reason: str,
) -> DomainError:
    """Create an error for a path expression that cannot be evaluated."""
    context = ErrorContext(
        operation="get_path",
        additional_data={"path": path},
    )
    return DomainError(
        ErrorCode.INVALID_PATH_EXPRESSION,
        f"Invalid path '{path}': {reason}",
        context,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation="cli",
        additional_data=additional_data,
    )
    return CliError(
        code,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
