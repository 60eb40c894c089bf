"""Dependency Injection container for LinkVault.

This module wires the table cache services from Settings using
dependency-injector:
- Settings (Singleton)
- Table schema built from the relationship settings
- Rate limiter and Airtable table reader
- SQLite slot store and the TableCacheService facade
"""

from __future__ import annotations

from dependency_injector import containers, providers

from linkvault.config.loader import load_settings
from linkvault.config.models.settings import Settings
from linkvault.core.schema import TableSchema
from linkvault.services import (
    AirtableTableReader,
    SQLiteKeyValueStore,
    TableCacheService,
    TokenBucketRateLimiter,
)


def build_schema(config: Settings) -> TableSchema:
    """Relationship schema described by ``config``."""
    return TableSchema(
        config.tables.relationships,
        config.tables.anchor_table,
        back_references=config.tables.back_references,
        reference_prefix=config.cache.reference_prefix,
    )


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for LinkVault services.

    The service is a Factory: every call builds an independent cache that
    its caller owns and closes.

    Example:
        >>> container = Container()
        >>> container.config.override(providers.Object(settings))
        >>> service = container.table_cache_service()
        >>> service.restore()
    """

    config = providers.Singleton(load_settings)

    schema = providers.Singleton(build_schema, config=config)

    rate_limiter = providers.Factory(
        TokenBucketRateLimiter,
        capacity=providers.Callable(
            lambda config: max(1, int(config.api.airtable.rate_limit_rps)),
            config=config,
        ),
        refill_rate=providers.Callable(
            lambda config: config.api.airtable.rate_limit_rps,
            config=config,
        ),
    )

    table_reader = providers.Factory(
        AirtableTableReader,
        settings=providers.Callable(lambda config: config.api.airtable, config=config),
        rate_limiter=rate_limiter,
    )

    kv_store = providers.Factory(
        SQLiteKeyValueStore,
        db_path=providers.Callable(lambda config: config.cache.db_path, config=config),
    )

    table_cache_service = providers.Factory(
        TableCacheService,
        reader=table_reader,
        kv_store=kv_store,
        schema=schema,
        data_slot=providers.Callable(lambda config: config.cache.data_slot, config=config),
        schema_slot=providers.Callable(lambda config: config.cache.schema_slot, config=config),
    )


__all__ = ["Container", "build_schema"]
