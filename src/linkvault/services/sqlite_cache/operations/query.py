"""Read operations for the SQLite slot store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from linkvault.services.cache_models import SlotEntry
from linkvault.services.sqlite_cache.operations.base import BaseOperation

logger = logging.getLogger(__name__)


def _parse_timestamp_with_tz(timestamp_str: str | None) -> datetime | None:
    """Parse ISO timestamp string and ensure timezone-aware."""
    if not timestamp_str:
        return None

    dt = datetime.fromisoformat(timestamp_str)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class QueryOperations(BaseOperation):
    """Query operations for slots."""

    def get(self, slot: str) -> str | None:
        """Return the payload stored in ``slot``, or None if it is empty."""
        entry = self.get_entry(slot)
        return entry.payload if entry is not None else None

    def get_entry(self, slot: str) -> SlotEntry | None:
        """Return the full slot entry, or None if the slot is empty."""
        self._validate_connection()

        cursor = self.conn.execute(
            f"SELECT slot, payload, payload_size, updated_at FROM {self.table} WHERE slot = ?",
            (slot,),
        )
        row = cursor.fetchone()
        if row is None:
            logger.debug("Slot miss: %s", self._preview(slot))
            return None

        return SlotEntry(
            slot=row[0],
            payload=row[1],
            payload_size=row[2] or 0,
            updated_at=_parse_timestamp_with_tz(row[3]),
        )

    def list_entries(self) -> list[SlotEntry]:
        """Return every slot ordered by name, payloads included."""
        self._validate_connection()

        cursor = self.conn.execute(
            f"SELECT slot, payload, payload_size, updated_at FROM {self.table} ORDER BY slot"
        )
        return [
            SlotEntry(
                slot=row[0],
                payload=row[1],
                payload_size=row[2] or 0,
                updated_at=_parse_timestamp_with_tz(row[3]),
            )
            for row in cursor.fetchall()
        ]
