"""SQLite slot store internals.

Separate modules handle queries, writes, schema migration and
transactions for the key-value store behind the table cache.
"""

from linkvault.services.sqlite_cache.migration.manager import MigrationManager
from linkvault.services.sqlite_cache.transaction.manager import TransactionManager

__all__ = ["MigrationManager", "TransactionManager"]
