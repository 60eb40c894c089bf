"""Transaction management for the SQLite slot store."""

from linkvault.services.sqlite_cache.transaction.manager import TransactionManager

__all__ = ["TransactionManager"]
