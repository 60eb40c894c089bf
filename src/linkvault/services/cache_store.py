"""In-memory table store mirrored to the persistent slot store.

The store exclusively owns the authoritative record list of every cached
table. Each commit rewrites two slots in one transaction: the data slot
(all tables, serialized) and the schema slot (the relationship graph the
data was built against).
"""

from __future__ import annotations

import logging
import time
from typing import Any

import orjson

from linkvault.core.models import Record, records_to_dicts
from linkvault.core.paths import get_nested_value
from linkvault.core.schema import TableSchema
from linkvault.services.sqlite_cache_db import SQLiteKeyValueStore
from linkvault.shared.constants import CacheSlots
from linkvault.shared.errors import (
    CacheCorruptionError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    LinkVaultError,
    create_cache_corruption_error,
)
from linkvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


class CacheStore:
    """Table cache with whole-cache invalidation.

    Args:
        kv_store: Persistent slot store
        schema: Relationship schema used to ingest restored data
        data_slot: Slot holding the serialized tables
        schema_slot: Slot holding the schema metadata

    Attributes:
        generation: Incremented by every ``clear_all``; fetches started in
            an older generation must not commit
    """

    def __init__(
        self,
        kv_store: SQLiteKeyValueStore,
        schema: TableSchema,
        data_slot: str = CacheSlots.DATA,
        schema_slot: str = CacheSlots.SCHEMA,
    ) -> None:
        self.kv_store = kv_store
        self.schema = schema
        self.data_slot = data_slot
        self.schema_slot = schema_slot
        self.generation = 0
        self._tables: dict[str, list[Record]] = {}
        self._schema_meta: dict[str, Any] | None = None

    def read_table(self, name: str) -> list[Record] | None:
        """Committed records of ``name``, or None if the table is not cached."""
        return self._tables.get(name)

    def commit_table(self, name: str, records: list[Record]) -> None:
        """Store ``records`` as the complete content of ``name`` and persist.

        A failed write is logged; the in-memory cache stays authoritative
        for the rest of the process.
        """
        self._tables[name] = list(records)
        self._schema_meta = self.schema.to_dict()
        self._persist()

    def clear_all(self) -> None:
        """Drop every table from memory and from the persistent store."""
        self._tables = {}
        self._schema_meta = None
        self.generation += 1

        try:
            self.kv_store.delete(self.data_slot)
            self.kv_store.delete(self.schema_slot)
        except InfrastructureError as e:
            log_operation_error(logger=logger, error=e, operation="clear_cache")

        logger.info("Cache cleared (generation %d)", self.generation)

    def restore(self) -> bool:
        """Load the persisted snapshot into memory.

        Returns:
            True if a complete snapshot matching the current schema was
            restored. False means the cache is empty and needs a refresh;
            anything unusable was cleared.
        """
        start = time.perf_counter()

        try:
            raw_data = self.kv_store.get(self.data_slot)
            raw_schema = self.kv_store.get(self.schema_slot)
        except InfrastructureError as e:
            log_operation_error(logger=logger, error=e, operation="restore_cache")
            self.clear_all()
            return False

        if raw_data is None:
            logger.info("No persisted cache found")
            self.clear_all()
            return False

        try:
            tables = self._decode_tables(raw_data)
        except CacheCorruptionError as e:
            logger.warning("Discarding persisted cache: %s", e.message)
            self.clear_all()
            return False

        missing = [name for name in self.schema.required_tables() if name not in tables]
        if missing:
            logger.info(
                "Persisted cache is missing tables %s; refresh required",
                ", ".join(missing),
            )
            self.clear_all()
            return False

        schema_meta = self._decode_schema(raw_schema)
        if schema_meta is not None and schema_meta != self.schema.to_dict():
            logger.info("Persisted cache was built for a different schema; refresh required")
            self.clear_all()
            return False

        self._tables = tables
        self._schema_meta = self.schema.to_dict()
        if schema_meta is None:
            self._persist()

        log_operation_success(
            logger=logger,
            operation="restore_cache",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={
                "tables": len(tables),
                "records": sum(len(records) for records in tables.values()),
            },
        )
        return True

    def _decode_tables(self, raw_data: str) -> dict[str, list[Record]]:
        try:
            data = orjson.loads(raw_data)
        except orjson.JSONDecodeError as e:
            raise create_cache_corruption_error(
                "Persisted cache is not valid JSON", self.data_slot, e
            ) from e

        if not isinstance(data, dict):
            raise CacheCorruptionError(
                ErrorCode.CACHE_SHAPE_MISMATCH,
                "Persisted cache is not a table mapping",
                ErrorContext(
                    operation="restore_cache",
                    additional_data={"slot": self.data_slot},
                ),
            )

        tables: dict[str, list[Record]] = {}
        for name, payload in data.items():
            if not isinstance(payload, list):
                raise CacheCorruptionError(
                    ErrorCode.CACHE_SHAPE_MISMATCH,
                    f"Persisted table '{name}' is not a record list",
                    ErrorContext(
                        operation="restore_cache",
                        table=name,
                        additional_data={"slot": self.data_slot},
                    ),
                )
            try:
                tables[name] = self.schema.records_from_payload(name, payload)
            except LinkVaultError as e:
                raise create_cache_corruption_error(
                    f"Persisted table '{name}' holds malformed records: {e.message}",
                    self.data_slot,
                    e,
                ) from e
        return tables

    def _decode_schema(self, raw_schema: str | None) -> dict[str, Any] | None:
        """Parse the schema slot; unreadable metadata counts as absent."""
        if raw_schema is None:
            return None
        try:
            meta = orjson.loads(raw_schema)
        except orjson.JSONDecodeError:
            logger.warning("Schema metadata unreadable; resetting it")
            return None
        if not isinstance(meta, dict):
            logger.warning("Schema metadata malformed; resetting it")
            return None
        return meta

    def _persist(self) -> None:
        start = time.perf_counter()
        try:
            data_blob = orjson.dumps(
                {name: records_to_dicts(records) for name, records in self._tables.items()}
            ).decode("utf-8")
            schema_blob = orjson.dumps(self._schema_meta or {}).decode("utf-8")
        except TypeError as e:
            error = InfrastructureError(
                ErrorCode.CACHE_SERIALIZATION_ERROR,
                f"Failed to serialize cache: {e}",
                ErrorContext(operation="persist_cache"),
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="persist_cache")
            return

        try:
            self.kv_store.put_many({self.data_slot: data_blob, self.schema_slot: schema_blob})
        except InfrastructureError as e:
            log_operation_error(logger=logger, error=e, operation="persist_cache")
            return

        log_operation_success(
            logger=logger,
            operation="persist_cache",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={"tables": len(self._tables), "bytes": len(data_blob)},
        )

    def table_names(self) -> list[str]:
        """Names of the cached tables, sorted."""
        return sorted(self._tables)

    def cached_records(self, name: str) -> list[Record]:
        """Records of ``name``, or an empty list when it is not cached."""
        return list(self._tables.get(name) or [])

    def record_map(self, name: str) -> dict[str, Record]:
        """Id to record lookup for ``name``."""
        return {record.id: record for record in self._tables.get(name) or []}

    def lookup(self, name: str, record_id: str) -> Record | None:
        for record in self._tables.get(name) or []:
            if record.id == record_id:
                return record
        return None

    def get_path(self, name: str, path: str) -> Any:
        """Value at ``path`` inside the serialized records of ``name``.

        Example:
            >>> store.get_path("courses", "0.fields.lessons[1].fields.name")
            'Greetings'

        Raises:
            DomainError: If the path expression is malformed
        """
        return get_nested_value(records_to_dicts(self._tables.get(name) or []), path)

    def stats(self) -> dict[str, Any]:
        """Cached table sizes and the current generation."""
        return {
            "generation": self.generation,
            "tables": {name: len(records) for name, records in sorted(self._tables.items())},
            "schema": self._schema_meta is not None,
        }
