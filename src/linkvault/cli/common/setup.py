"""
CLI Setup Helpers

Loads settings for the current invocation, configures logging and builds
the table cache service through the DI container.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from dependency_injector import providers

from linkvault.cli.common.context import CliContext
from linkvault.config.loader import load_settings
from linkvault.config.models.settings import Settings
from linkvault.containers import Container
from linkvault.services.table_cache_service import TableCacheService
from linkvault.shared.logging import setup_structured_logger

logger = logging.getLogger(__name__)


def load_cli_settings(context: CliContext) -> Settings:
    """Settings for this invocation, honoring --config."""
    return load_settings(context.config_path)


def setup_cli_logging(context: CliContext, settings: Settings) -> logging.Logger:
    """Configure the package logger from the CLI options and settings.

    The CLI log level wins over the configured one when given explicitly.
    """
    return setup_structured_logger(
        level=context.get_effective_log_level(),
        log_file=settings.logging.file,
        use_rich_console=settings.logging.console_output,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )


@contextmanager
def open_service(context: CliContext) -> Generator[TableCacheService, None, None]:
    """Build a table cache service for one command and close it afterwards.

    Example:
        >>> with open_service(get_cli_context()) as service:
        ...     service.restore()
    """
    settings = load_cli_settings(context)
    setup_cli_logging(context, settings)

    container = Container()
    container.config.override(providers.Object(settings))
    service = container.table_cache_service()
    try:
        yield service
    finally:
        service.close()
