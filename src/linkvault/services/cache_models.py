"""Persisted slot models.

This module defines the dataclass describing one slot of the SQLite
key-value store backing the table cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

__all__ = ["SlotEntry"]


@dataclass
class SlotEntry:
    """One persisted slot.

    Attributes:
        slot: Slot name (e.g. "airtable_cache")
        payload: Serialized snapshot stored in the slot
        updated_at: When the slot was last written
        payload_size: Size of payload in bytes
    """

    slot: str
    payload: str
    updated_at: datetime | None = None
    payload_size: int = 0

    def __post_init__(self) -> None:
        """Validate fields after initialization.

        Raises:
            ValueError: If the slot name is blank or the size is negative
        """
        if not self.slot or not self.slot.strip():
            msg = "slot must be non-empty"
            raise ValueError(msg)
        self.slot = self.slot.strip()

        if self.payload_size < 0:
            msg = f"payload_size must be non-negative, got {self.payload_size}"
            raise ValueError(msg)
