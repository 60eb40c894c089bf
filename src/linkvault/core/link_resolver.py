"""Linked record resolution.

Expands the link fields of a record into the referenced records, pulling
each referenced table in on demand. Two guards keep the traversal finite
and cheap:

- visited records: a record is expanded at most once per top-level call;
  reaching it again embeds an id-only ``Reference`` leaf
- visited relationships: once ``table -> field`` (or its reverse) has been
  traversed, later occurrences of that relationship are left unexpanded
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from linkvault.core.models import Record, Reference, is_reference_value, reference_ids
from linkvault.core.schema import TableSchema
from linkvault.shared.errors import FetchError
from linkvault.shared.logging import log_operation_success, log_unresolved_reference

logger = logging.getLogger(__name__)


class TableSource(Protocol):
    """Anything that can hand out the records of a table."""

    async def get(self, table_name: str) -> list[Record]: ...


@dataclass
class ResolutionContext:
    """State of one top-level resolve call.

    Attributes:
        visited_records: Ids of records already expanded
        visited_edges: ``(source_table, field_name)`` pairs already traversed
        unavailable_tables: Tables whose fetch failed; their fields are dropped
        indexes: Per-table id lookup built from fetched records
    """

    visited_records: set[str] = field(default_factory=set)
    visited_edges: set[tuple[str, str]] = field(default_factory=set)
    unavailable_tables: set[str] = field(default_factory=set)
    indexes: dict[str, dict[str, Record]] = field(default_factory=dict)

    def fork(self) -> ResolutionContext:
        """New context with fresh visited sets.

        The unavailable-table set and lookup indexes are shared with the
        parent, so a failed table is not retried by every record of a run.
        """
        return ResolutionContext(
            unavailable_tables=self.unavailable_tables,
            indexes=self.indexes,
        )

    def edge_visited(self, source_table: str, field_name: str) -> bool:
        return (
            (source_table, field_name) in self.visited_edges
            or (field_name, source_table) in self.visited_edges
        )


class LinkResolver:
    """Resolves link fields into nested records.

    Args:
        schema: Table relationship schema
        source: Table source used to pull referenced tables in

    Example:
        >>> resolver = LinkResolver(schema, fetch_coordinator)
        >>> course = await resolver.resolve(course, "courses")
        >>> course.fields["lessons"][0].fields["name"]
        'Intro'
    """

    def __init__(self, schema: TableSchema, source: TableSource) -> None:
        self.schema = schema
        self.source = source

    async def resolve(
        self,
        record: Record,
        table_name: str,
        ctx: ResolutionContext | None = None,
    ) -> Record:
        """Expand the link fields of ``record`` in place.

        Failures to fetch a referenced table are contained: the affected
        field is dropped and resolution of the record continues.

        Args:
            record: Record to resolve
            table_name: Table the record belongs to
            ctx: Resolution state; a fresh one is created when omitted

        Returns:
            The same record, with eligible fields replaced
        """
        ctx = ctx or ResolutionContext()
        if record.id in ctx.visited_records:
            return record

        start = time.perf_counter()
        ctx.visited_records.add(record.id)
        await self._expand_fields(record, table_name, ctx)

        log_operation_success(
            logger=logger,
            operation="resolve_record",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={
                "record_id": record.id,
                "visited_records": len(ctx.visited_records),
            },
            context={"table": table_name},
        )
        return record

    async def _expand_fields(
        self,
        record: Record,
        table_name: str,
        ctx: ResolutionContext,
    ) -> None:
        for field_name, value in list(record.fields.items()):
            if not self.schema.is_link_field(table_name, field_name):
                continue
            if not is_reference_value(value):
                continue

            if field_name in ctx.unavailable_tables:
                del record.fields[field_name]
                continue

            if ctx.edge_visited(table_name, field_name):
                logger.debug(
                    "Skipping already traversed relationship %s -> %s on %s",
                    table_name,
                    field_name,
                    record.id,
                )
                continue

            ctx.visited_edges.add((table_name, field_name))

            index = await self._table_index(field_name, ctx)
            if index is None:
                del record.fields[field_name]
                continue

            resolved = await self._resolve_links(
                value, table_name, field_name, index, ctx
            )

            if isinstance(value, Reference):
                if resolved:
                    record.fields[field_name] = resolved[0]
                else:
                    del record.fields[field_name]
            else:
                record.fields[field_name] = resolved

    async def _resolve_links(
        self,
        value: Any,
        parent_table: str,
        field_name: str,
        index: dict[str, Record],
        ctx: ResolutionContext,
    ) -> list[Record | Reference]:
        resolved: list[Record | Reference] = []

        for record_id in reference_ids(value):
            linked = index.get(record_id)
            if linked is None:
                log_unresolved_reference(logger, parent_table, field_name, record_id)
                continue

            if record_id in ctx.visited_records:
                resolved.append(Reference(record_id))
                continue

            ctx.visited_records.add(record_id)
            child = linked.copy()
            await self._expand_fields(child, field_name, ctx)
            for stripped in self.schema.back_reference_fields(parent_table, field_name):
                child.fields.pop(stripped, None)
            resolved.append(child)

        return resolved

    async def _table_index(
        self,
        table_name: str,
        ctx: ResolutionContext,
    ) -> dict[str, Record] | None:
        index = ctx.indexes.get(table_name)
        if index is not None:
            return index

        try:
            records = await self.source.get(table_name)
        except FetchError as e:
            logger.warning(
                "Table '%s' unavailable, dropping its links: %s",
                table_name,
                e.cause,
            )
            ctx.unavailable_tables.add(table_name)
            return None

        index = {record.id: record for record in records}
        ctx.indexes[table_name] = index
        return index
