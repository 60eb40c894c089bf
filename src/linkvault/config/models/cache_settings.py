"""Cache configuration model.

This module contains the configuration of the persisted table cache:
where the slot store lives and which slots it uses.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from linkvault.shared.constants import AirtableConfig, CacheSlots, FileSystem


def _default_db_path() -> str:
    return str(
        Path.home()
        / FileSystem.HOME_DIR
        / FileSystem.CACHE_DIRECTORY
        / FileSystem.CACHE_DB_FILENAME
    )


class CacheSettings(BaseModel):
    """Cache configuration."""

    db_path: str = Field(
        default_factory=_default_db_path,
        description="SQLite slot store path (':memory:' for a throwaway store)",
    )
    data_slot: str = Field(
        default=CacheSlots.DATA,
        description="Slot holding the cached table data",
    )
    schema_slot: str = Field(
        default=CacheSlots.SCHEMA,
        description="Slot holding the schema metadata",
    )
    reference_prefix: str = Field(
        default=AirtableConfig.REFERENCE_PREFIX,
        min_length=1,
        description="Prefix that marks a string value as a record id",
    )

    @field_validator("data_slot", "schema_slot")
    @classmethod
    def validate_slot(cls, v: str) -> str:
        """Slot names must be non-blank."""
        if not v.strip():
            msg = "slot names must be non-empty"
            raise ValueError(msg)
        return v.strip()


__all__ = ["CacheSettings"]
