"""
LinkVault - Linked-record resolution cache for Airtable bases

Fetches flat tables from a base, resolves linked-record fields into nested
records and keeps the result in a persistent local cache.
"""

__version__ = "0.1.0"

from linkvault.core import LinkResolver, Record, Reference, TableSchema
from linkvault.services import TableCacheService

__all__ = [
    "LinkResolver",
    "Record",
    "Reference",
    "TableCacheService",
    "TableSchema",
]
