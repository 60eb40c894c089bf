"""Migration manager for the SQLite slot store.

This module creates and versions the database schema.
"""

from __future__ import annotations

import logging
import sqlite3

from linkvault.shared.constants import SQLiteStore

logger = logging.getLogger(__name__)


class MigrationManager:
    """Database schema migration manager."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize migration manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn
        self._current_version = self._get_current_version()

    def get_current_version(self) -> int:
        """Get current schema version.

        Returns:
            Current schema version number (0 for an empty database)
        """
        return self._current_version

    def _get_current_version(self) -> int:
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
        )
        if cursor.fetchone() is None:
            return 0

        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def create_tables(self) -> None:
        """Create the slot schema if it is missing."""
        if self._current_version >= SQLiteStore.SCHEMA_VERSION:
            logger.debug("Slot schema already at version %d", self._current_version)
            return

        schema_sql = f"""
        CREATE TABLE IF NOT EXISTS {SQLiteStore.SLOT_TABLE} (
            slot TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            payload_size INTEGER DEFAULT 0,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,

            CHECK (length(slot) > 0)
        );

        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
        );
        """

        self.conn.executescript(schema_sql)
        self.conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SQLiteStore.SCHEMA_VERSION,),
        )
        self._current_version = SQLiteStore.SCHEMA_VERSION

        logger.info("Created slot store schema (v%d)", SQLiteStore.SCHEMA_VERSION)

    def validate_schema(self) -> bool:
        """Check that every required table exists.

        Returns:
            True if schema is valid, False otherwise
        """
        for table in (SQLiteStore.SLOT_TABLE, "schema_version"):
            cursor = self.conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
                (table,),
            )
            if cursor.fetchone() is None:
                logger.error("Required table '%s' not found", table)
                return False
        return True
