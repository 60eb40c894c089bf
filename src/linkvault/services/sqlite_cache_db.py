"""SQLite key-value slot store.

This module provides the local persistent key-value store behind the
table cache: a handful of named slots, each holding one serialized
snapshot, kept in a WAL-mode SQLite file.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from linkvault.security.permissions import set_secure_file_permissions
from linkvault.services.cache_models import SlotEntry
from linkvault.services.sqlite_cache.migration.manager import MigrationManager
from linkvault.services.sqlite_cache.operations.delete import DeleteOperations
from linkvault.services.sqlite_cache.operations.insert import InsertOperations
from linkvault.services.sqlite_cache.operations.query import QueryOperations
from linkvault.services.sqlite_cache.transaction.manager import TransactionManager
from linkvault.shared.constants import SQLiteStore
from linkvault.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
)
from linkvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """Named-slot store persisted in SQLite.

    Attributes:
        db_path: Path to the SQLite database file, or ":memory:"
        conn: SQLite database connection

    Example:
        >>> store = SQLiteKeyValueStore(Path("linkvault_cache.db"))
        >>> store.put_many({"airtable_cache": "{}", "airtable_schema_cache": "{}"})
        >>> store.get("airtable_cache")
        '{}'
        >>> store.close()
    """

    def __init__(self, db_path: Path | str = SQLiteStore.MEMORY_PATH) -> None:
        """Open (and create if needed) the slot store.

        Args:
            db_path: Path to SQLite database file, ":memory:" for a private
                in-memory store

        Raises:
            InfrastructureError: If database initialization fails
        """
        self.in_memory = str(db_path) == SQLiteStore.MEMORY_PATH
        self.db_path = Path(db_path) if not self.in_memory else None
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        context = ErrorContext(
            operation="initialize_db",
            additional_data={"db_path": str(self.db_path or SQLiteStore.MEMORY_PATH)},
        )
        start = time.perf_counter()

        try:
            db_is_new = False
            if self.db_path is not None:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                db_is_new = not self.db_path.exists()
                target = str(self.db_path)
            else:
                target = SQLiteStore.MEMORY_PATH

            self.conn = sqlite3.connect(
                target,
                check_same_thread=False,
                isolation_level=None,
            )

            if db_is_new and self.db_path is not None:
                try:
                    set_secure_file_permissions(self.db_path)
                except ApplicationError as e:
                    logger.warning(
                        "Failed to set secure permissions for DB file %s: %s",
                        self.db_path,
                        e.message,
                    )

            if not self.in_memory:
                self.conn.execute("PRAGMA journal_mode=WAL")
                self.conn.execute("PRAGMA synchronous=NORMAL")

            self._migration = MigrationManager(self.conn)
            self._migration.create_tables()
            if not self._migration.validate_schema():
                self.conn.close()
                error = InfrastructureError(
                    code=ErrorCode.CACHE_CORRUPTION,
                    message="Slot store schema is incomplete",
                    context=context,
                )
                log_operation_error(logger=logger, error=error, operation="initialize_db")
                raise error

            self._query_ops = QueryOperations(self.conn)
            self._insert_ops = InsertOperations(self.conn)
            self._delete_ops = DeleteOperations(self.conn)
            self._transactions = TransactionManager(self.conn)

        except (sqlite3.Error, OSError) as e:
            error = InfrastructureError(
                code=ErrorCode.FILE_ACCESS_ERROR,
                message=f"Failed to initialize slot store: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_db")
            raise error from e

        log_operation_success(
            logger=logger,
            operation="initialize_db",
            duration_ms=(time.perf_counter() - start) * 1000,
            context=context,
        )

    def _wrap(self, operation: str, code: ErrorCode, e: sqlite3.Error, **data: Any) -> InfrastructureError:
        error = InfrastructureError(
            code=code,
            message=f"Slot store {operation} failed: {e!s}",
            context=ErrorContext(operation=operation, additional_data=data or None),
            original_error=e,
        )
        log_operation_error(logger=logger, error=error, operation=operation)
        return error

    def get(self, slot: str) -> str | None:
        """Return the payload of ``slot``, or None if it was never written.

        Raises:
            InfrastructureError: If the read fails
        """
        try:
            return self._query_ops.get(slot)
        except sqlite3.Error as e:
            raise self._wrap("get", ErrorCode.CACHE_READ_FAILED, e, slot=slot) from e

    def put(self, slot: str, payload: str) -> None:
        """Overwrite ``slot`` with ``payload``.

        Raises:
            InfrastructureError: If the write fails
        """
        try:
            self._insert_ops.put(slot, payload)
        except sqlite3.Error as e:
            raise self._wrap("put", ErrorCode.CACHE_WRITE_FAILED, e, slot=slot) from e

    def put_many(self, payloads: Mapping[str, str]) -> None:
        """Overwrite several slots in one transaction.

        Either every slot is written or none is.

        Raises:
            InfrastructureError: If the write fails
        """
        try:
            with self._transactions.transaction():
                for slot, payload in payloads.items():
                    self._insert_ops.put(slot, payload)
        except sqlite3.Error as e:
            raise self._wrap(
                "put_many",
                ErrorCode.CACHE_WRITE_FAILED,
                e,
                slots=",".join(payloads),
            ) from e

    def delete(self, slot: str) -> bool:
        """Delete ``slot``.

        Returns:
            True if the slot existed
        """
        try:
            return self._delete_ops.delete(slot)
        except sqlite3.Error as e:
            raise self._wrap("delete", ErrorCode.CACHE_WRITE_FAILED, e, slot=slot) from e

    def clear(self) -> int:
        """Delete every slot.

        Returns:
            Number of deleted slots
        """
        try:
            return self._delete_ops.clear()
        except sqlite3.Error as e:
            raise self._wrap("clear", ErrorCode.CACHE_WRITE_FAILED, e) from e

    def slot_info(self) -> list[dict[str, Any]]:
        """Summary of every slot (name, size, last write) without payloads."""
        try:
            entries = self._query_ops.list_entries()
        except sqlite3.Error as e:
            raise self._wrap("slot_info", ErrorCode.CACHE_READ_FAILED, e) from e
        return [_entry_summary(entry) for entry in entries]

    @property
    def schema_version(self) -> int:
        return self._migration.get_current_version()

    def close(self) -> None:
        """Close database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            logger.debug("Slot store closed")

    def __enter__(self) -> SQLiteKeyValueStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _entry_summary(entry: SlotEntry) -> dict[str, Any]:
    return {
        "slot": entry.slot,
        "payload_size": entry.payload_size,
        "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
    }
