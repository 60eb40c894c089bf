"""Schema migration for the SQLite slot store."""

from linkvault.services.sqlite_cache.migration.manager import MigrationManager

__all__ = ["MigrationManager"]
