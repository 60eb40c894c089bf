"""
Cache Configuration Constants

Constants for the persisted table cache and its SQLite slot store.
"""


class CacheSlots:
    """Names of the two persisted slots."""

    DATA = "airtable_cache"
    SCHEMA = "airtable_schema_cache"


class SQLiteStore:
    """SQLite key-value store constants."""

    MEMORY_PATH = ":memory:"
    SLOT_TABLE = "cache_slots"
    SCHEMA_VERSION = 1
    SLOT_PREVIEW_LENGTH = 50
