"""Per-table fetch coordination.

Guarantees at most one underlying reader call per table per cache
generation: concurrent callers asking for a table that is already being
fetched await the same future instead of issuing their own request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from typing import TYPE_CHECKING

from linkvault.core.models import Record
from linkvault.core.schema import TableSchema
from linkvault.services.table_reader import TableReader
from linkvault.shared.errors import FetchError
from linkvault.shared.logging import log_operation_error, log_operation_success

if TYPE_CHECKING:
    from linkvault.services.cache_store import CacheStore

logger = logging.getLogger(__name__)


class FetchCoordinator:
    """Serves table records from the cache store, fetching them once.

    Args:
        reader: Remote table reader
        store: Cache store that owns the committed tables
        schema: Schema used to ingest raw payloads

    Example:
        >>> coordinator = FetchCoordinator(reader, store, schema)
        >>> verbs, again = await asyncio.gather(
        ...     coordinator.get("verbs"), coordinator.get("verbs")
        ... )
        >>> coordinator.fetch_count("verbs")
        1
    """

    def __init__(
        self,
        reader: TableReader,
        store: CacheStore,
        schema: TableSchema,
    ) -> None:
        self.reader = reader
        self.store = store
        self.schema = schema
        self._in_flight: dict[str, tuple[int, asyncio.Future[list[Record]]]] = {}
        self._fetch_counts: Counter[str] = Counter()

    async def get(self, table_name: str) -> list[Record]:
        """Return the records of ``table_name``.

        A committed table is returned without I/O. Otherwise the table is
        fetched, committed (and persisted) and returned; callers arriving
        while the fetch runs share its outcome.

        Raises:
            FetchError: If the reader fails; nothing is committed and the
                next call retries
        """
        cached = self.store.read_table(table_name)
        if cached is not None:
            return cached

        generation = self.store.generation
        pending = self._in_flight.get(table_name)
        if pending is not None and pending[0] == generation:
            logger.debug("Awaiting in-flight fetch of table '%s'", table_name)
            return await asyncio.shield(pending[1])

        future: asyncio.Future[list[Record]] = asyncio.get_running_loop().create_future()
        self._in_flight[table_name] = (generation, future)

        try:
            records = await self._fetch(table_name, generation)
        except asyncio.CancelledError:
            # Waiters were not cancelled; they get a retryable fetch failure.
            cancelled = RuntimeError(f"Fetch of table '{table_name}' was cancelled")
            self._fail(future, FetchError(table_name, cancelled))
            raise
        except Exception as e:
            self._fail(future, e)
            raise
        else:
            future.set_result(records)
            return records
        finally:
            if self._in_flight.get(table_name, (None, None))[1] is future:
                del self._in_flight[table_name]

    @staticmethod
    def _fail(future: asyncio.Future[list[Record]], error: Exception) -> None:
        future.set_exception(error)
        # Mark the exception retrieved so a future nobody awaited does
        # not log "exception was never retrieved".
        future.exception()

    async def _fetch(self, table_name: str, generation: int) -> list[Record]:
        start = time.perf_counter()
        self._fetch_counts[table_name] += 1

        try:
            payload = await self.reader.fetch_all(table_name)
            records = self.schema.records_from_payload(table_name, payload)
        except Exception as e:
            error = FetchError(table_name, e)
            log_operation_error(logger=logger, error=error, operation="fetch_table")
            raise error from e

        if generation == self.store.generation:
            self.store.commit_table(table_name, records)
        else:
            logger.info(
                "Cache cleared while fetching table '%s'; result not committed",
                table_name,
            )

        log_operation_success(
            logger=logger,
            operation="fetch_table",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={"records": len(records)},
            context={"table": table_name, "generation": generation},
        )
        return records

    def fetch_count(self, table_name: str) -> int:
        """Number of reader calls made for ``table_name``."""
        return self._fetch_counts[table_name]

    def fetch_counts(self) -> dict[str, int]:
        return dict(self._fetch_counts)

    def in_flight(self) -> list[str]:
        """Tables currently being fetched."""
        return sorted(self._in_flight)
