"""Table cache service.

Single-owner facade over the store, the fetch coordinator, the resolver
and the refresh orchestrator. Built explicitly (by the container or by
hand) and closed by its owner.
"""

from __future__ import annotations

import logging
from typing import Any

from linkvault.core.link_resolver import LinkResolver
from linkvault.core.models import Record
from linkvault.core.schema import TableSchema
from linkvault.services.cache_store import CacheStore
from linkvault.services.fetch_coordinator import FetchCoordinator
from linkvault.services.refresh_orchestrator import RefreshOrchestrator
from linkvault.services.sqlite_cache_db import SQLiteKeyValueStore
from linkvault.services.table_reader import TableReader
from linkvault.shared.constants import CacheSlots

logger = logging.getLogger(__name__)


class TableCacheService:
    """Linked-record cache of a remote base.

    Args:
        reader: Remote table reader
        kv_store: Persistent slot store, owned and closed by the service
        schema: Relationship schema (default: the lessons base)
        data_slot: Slot holding the serialized tables
        schema_slot: Slot holding the schema metadata

    Example:
        >>> async with TableCacheService(reader, SQLiteKeyValueStore(path)) as cache:
        ...     if not cache.restore():
        ...         await cache.refresh()
        ...     courses = cache.read_table("courses")
    """

    def __init__(
        self,
        reader: TableReader,
        kv_store: SQLiteKeyValueStore,
        schema: TableSchema | None = None,
        data_slot: str = CacheSlots.DATA,
        schema_slot: str = CacheSlots.SCHEMA,
    ) -> None:
        self.schema = schema or TableSchema.default()
        self.reader = reader
        self.kv_store = kv_store
        self.store = CacheStore(kv_store, self.schema, data_slot, schema_slot)
        self.coordinator = FetchCoordinator(reader, self.store, self.schema)
        self.resolver = LinkResolver(self.schema, self.coordinator)
        self.orchestrator = RefreshOrchestrator(
            self.store,
            self.coordinator,
            self.resolver,
            self.schema,
        )
        self._closed = False

    async def refresh(self) -> list[Record]:
        """Rebuild the whole cache; see ``RefreshOrchestrator.refresh``."""
        return await self.orchestrator.refresh()

    def clear_all(self) -> None:
        """Invalidate the in-memory and persisted cache."""
        self.store.clear_all()

    def read_table(self, name: str) -> list[Record] | None:
        """Cached records of ``name`` without any I/O."""
        return self.store.read_table(name)

    async def get(self, table_name: str) -> list[Record]:
        """Records of ``table_name``, fetched on first use.

        Raises:
            FetchError: If the table cannot be fetched
        """
        return await self.coordinator.get(table_name)

    def restore(self) -> bool:
        """Load the persisted snapshot; False means a refresh is needed."""
        return self.store.restore()

    def get_path(self, table_name: str, path: str) -> Any:
        return self.store.get_path(table_name, path)

    def status(self) -> dict[str, Any]:
        """Cached tables, fetch statistics and persisted slot sizes."""
        return {
            **self.store.stats(),
            "fetch_counts": self.coordinator.fetch_counts(),
            "slots": self.kv_store.slot_info(),
            "unavailable_tables": sorted(self.orchestrator.last_unavailable),
        }

    def close(self) -> None:
        """Release the slot store and the reader's HTTP session."""
        if self._closed:
            return
        self._closed = True
        self.kv_store.close()
        close_reader = getattr(self.reader, "close", None)
        if callable(close_reader):
            close_reader()
        logger.debug("Table cache service closed")

    async def __aenter__(self) -> TableCacheService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
