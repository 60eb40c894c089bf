"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from linkvault.shared.constants import Application, Logging

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseModel):
    """Application configuration."""

    name: str = Field(default=Application.NAME, description="Application name")
    version: str = Field(default=Application.VERSION, description="Application version")
    description: str = Field(
        default=Application.DESCRIPTION,
        description="Application description",
    )
    debug: bool = Field(default=False, description="Enable debug mode")


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, file output,
    rotation and console output settings.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(
        default=None,
        description="Log file path (rotating JSON lines); disabled when unset",
    )
    max_bytes: int = Field(
        default=Logging.MAX_BYTES,
        gt=0,
        description="Maximum log file size in bytes",
    )
    backup_count: int = Field(
        default=Logging.BACKUP_COUNT,
        ge=0,
        description="Number of backup log files to keep",
    )
    console_output: bool = Field(default=True, description="Use rich console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            msg = f"level must be one of {', '.join(_LOG_LEVELS)}, got {v!r}"
            raise ValueError(msg)
        return level


__all__ = [
    "AppSettings",
    "LoggingSettings",
]
