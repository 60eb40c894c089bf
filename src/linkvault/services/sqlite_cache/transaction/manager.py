"""Transaction manager for the SQLite slot store.

The store runs in autocommit mode; multi-slot writes go through an
explicit transaction so the data and schema slots never diverge.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import sqlite3

logger = logging.getLogger(__name__)


class TransactionManager:
    """Explicit BEGIN/COMMIT/ROLLBACK on an autocommit connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize transaction manager.

        Args:
            conn: SQLite database connection opened with ``isolation_level=None``
        """
        self.conn = conn

    def begin(self) -> None:
        self.conn.execute("BEGIN IMMEDIATE")

    def commit(self) -> None:
        self.conn.execute("COMMIT")

    def rollback(self) -> None:
        self.conn.execute("ROLLBACK")

    @property
    def in_transaction(self) -> bool:
        return self.conn.in_transaction

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Run the enclosed writes atomically.

        Commits on success, rolls back and re-raises on any exception.

        Example:
            >>> with transaction_manager.transaction():
            ...     insert_ops.put("airtable_cache", data_blob)
            ...     insert_ops.put("airtable_schema_cache", schema_blob)
        """
        self.begin()
        try:
            yield
        except Exception:
            logger.debug("Rolling back slot transaction")
            self.rollback()
            raise
        self.commit()
