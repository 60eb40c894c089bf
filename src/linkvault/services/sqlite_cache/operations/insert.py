"""Write operations for the SQLite slot store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from linkvault.services.sqlite_cache.operations.base import BaseOperation

logger = logging.getLogger(__name__)


class InsertOperations(BaseOperation):
    """Insert-or-replace operations for slots."""

    def put(self, slot: str, payload: str) -> int:
        """Write ``payload`` into ``slot``, replacing any previous value.

        Args:
            slot: Slot name
            payload: Serialized snapshot

        Returns:
            Size of the stored payload in bytes
        """
        self._validate_connection()

        payload_size = len(payload.encode("utf-8"))
        insert_sql = f"""
        INSERT OR REPLACE INTO {self.table} (slot, payload, payload_size, updated_at)
        VALUES (?, ?, ?, ?)
        """
        self.conn.execute(
            insert_sql,
            (
                slot,
                payload,
                payload_size,
                datetime.now(timezone.utc).isoformat(),
            ),
        )

        logger.debug(
            "Slot written: slot=%s, size=%d bytes",
            self._preview(slot),
            payload_size,
        )
        return payload_size
