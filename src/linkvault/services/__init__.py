"""Services module for LinkVault.

This module contains the table cache services: the remote table reader,
fetch coordination, the persisted store and the refresh orchestrator.
"""

from .cache_store import CacheStore
from .fetch_coordinator import FetchCoordinator
from .rate_limiter import TokenBucketRateLimiter
from .refresh_orchestrator import RefreshOrchestrator
from .sqlite_cache_db import SQLiteKeyValueStore
from .table_cache_service import TableCacheService
from .table_reader import AirtableTableReader, TableReader

__all__ = [
    "AirtableTableReader",
    "CacheStore",
    "FetchCoordinator",
    "RefreshOrchestrator",
    "SQLiteKeyValueStore",
    "TableCacheService",
    "TableReader",
    "TokenBucketRateLimiter",
]
