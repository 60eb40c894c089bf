"""SQLite slot operations.

Separate operation classes for reading, writing and deleting slots.
"""

from linkvault.services.sqlite_cache.operations.delete import DeleteOperations
from linkvault.services.sqlite_cache.operations.insert import InsertOperations
from linkvault.services.sqlite_cache.operations.query import QueryOperations

__all__ = ["DeleteOperations", "InsertOperations", "QueryOperations"]
