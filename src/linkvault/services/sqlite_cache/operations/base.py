"""Base operation class for SQLite slot operations."""

from __future__ import annotations

import logging
import sqlite3

from linkvault.shared.constants import SQLiteStore

logger = logging.getLogger(__name__)


class BaseOperation:
    """Base class for slot operations with shared functionality."""

    table = SQLiteStore.SLOT_TABLE

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize base operation.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn

    def _validate_connection(self) -> None:
        """Validate database connection is available.

        Raises:
            RuntimeError: If connection is not initialized
        """
        if self.conn is None:
            raise RuntimeError("Database connection not initialized")

    @staticmethod
    def _preview(slot: str) -> str:
        return slot[: SQLiteStore.SLOT_PREVIEW_LENGTH]
