"""Full cache rebuild.

A refresh clears the cache, fetches the anchor table and every table it
depends on concurrently, resolves a copy of every anchor record and commits
the resolved anchor list in place of the raw one. The raw list stays
untouched until that commit.
"""

from __future__ import annotations

import asyncio
import logging
import time

from linkvault.core.link_resolver import LinkResolver, ResolutionContext
from linkvault.core.models import Record
from linkvault.core.schema import TableSchema
from linkvault.services.cache_store import CacheStore
from linkvault.services.fetch_coordinator import FetchCoordinator
from linkvault.shared.errors import FetchError, RefreshError
from linkvault.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

logger = logging.getLogger(__name__)


class RefreshOrchestrator:
    """Rebuilds the whole cache from the remote source.

    Args:
        store: Cache store to rebuild
        coordinator: Fetch coordinator serving table records
        resolver: Link resolver used on every anchor record
        schema: Relationship schema naming the anchor and its dependencies
    """

    def __init__(
        self,
        store: CacheStore,
        coordinator: FetchCoordinator,
        resolver: LinkResolver,
        schema: TableSchema,
    ) -> None:
        self.store = store
        self.coordinator = coordinator
        self.resolver = resolver
        self.schema = schema
        self.last_unavailable: set[str] = set()

    async def refresh(self) -> list[Record]:
        """Rebuild the cache and return the resolved anchor records.

        A dependency that fails to fetch does not abort the refresh: links
        into it are dropped from the resolved records.

        Raises:
            RefreshError: If the anchor table cannot be fetched
        """
        anchor = self.schema.anchor_table
        dependencies = self.schema.dependencies()
        start = time.perf_counter()
        log_operation_start(
            logger,
            "refresh",
            {"anchor": anchor, "dependencies": dependencies},
        )

        self.store.clear_all()

        results = await asyncio.gather(
            self.coordinator.get(anchor),
            *(self.coordinator.get(table) for table in dependencies),
            return_exceptions=True,
        )

        anchor_result = results[0]
        if isinstance(anchor_result, FetchError):
            error = RefreshError(anchor, anchor_result)
            log_operation_error(logger=logger, error=error, operation="refresh")
            raise error from anchor_result
        if isinstance(anchor_result, BaseException):
            raise anchor_result

        root_ctx = ResolutionContext()
        for table, result in zip(dependencies, results[1:]):
            if isinstance(result, FetchError):
                logger.warning(
                    "Dependency '%s' unavailable, its links will be dropped: %s",
                    table,
                    result.cause,
                )
                root_ctx.unavailable_tables.add(table)
            elif isinstance(result, BaseException):
                raise result

        resolved = await asyncio.gather(
            *(
                self.resolver.resolve(record.copy(), anchor, root_ctx.fork())
                for record in anchor_result
            )
        )

        self.store.commit_table(anchor, list(resolved))
        self.last_unavailable = set(root_ctx.unavailable_tables)

        log_operation_success(
            logger=logger,
            operation="refresh",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={
                "records": len(resolved),
                "unavailable_tables": sorted(root_ctx.unavailable_tables),
            },
            context={"anchor": anchor},
        )
        return list(resolved)
