"""Delete operations for the SQLite slot store."""

from __future__ import annotations

import logging

from linkvault.services.sqlite_cache.operations.base import BaseOperation

logger = logging.getLogger(__name__)


class DeleteOperations(BaseOperation):
    """Delete operations for slots."""

    def delete(self, slot: str) -> bool:
        """Delete a slot.

        Returns:
            True if deleted, False if the slot was empty
        """
        self._validate_connection()

        cursor = self.conn.execute(f"DELETE FROM {self.table} WHERE slot = ?", (slot,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("Slot deleted: %s", self._preview(slot))
        return deleted

    def clear(self) -> int:
        """Delete every slot.

        Returns:
            Number of deleted slots
        """
        self._validate_connection()

        cursor = self.conn.execute(f"DELETE FROM {self.table}")
        logger.info("Cleared all cache slots")
        return cursor.rowcount
