"""Table relationship schema.

The base has no explicit schema: a link field is named after the table it
references and holds record ids that start with a reserved prefix. This
module turns that convention into an explicit adjacency structure, built
once, and uses it to ingest raw payloads into tagged ``Record`` values.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from typing import Any

from linkvault.core.models import Record, Reference
from linkvault.shared.constants import AirtableConfig, Tables
from linkvault.shared.errors import DomainError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

# Separator used in back-reference override keys: "<parent_table>.<field>"
EDGE_KEY_SEPARATOR = "."


class TableSchema:
    """Explicit table relationship graph.

    Args:
        relationships: Table name to the names of its link fields
        anchor_table: Top-level table a full refresh resolves
        back_references: Optional overrides of the fields stripped from a
            child record, keyed by "<parent_table>.<field>"
        reference_prefix: Prefix that marks a string as a record id

    Example:
        >>> schema = TableSchema({"courses": ["lessons"], "lessons": []}, "courses")
        >>> schema.is_link_field("courses", "lessons")
        True
        >>> schema.dependencies()
        ['lessons']
    """

    def __init__(
        self,
        relationships: Mapping[str, Iterable[str]],
        anchor_table: str = Tables.ANCHOR,
        *,
        back_references: Mapping[str, Iterable[str]] | None = None,
        reference_prefix: str = AirtableConfig.REFERENCE_PREFIX,
    ) -> None:
        if not reference_prefix:
            raise DomainError(
                ErrorCode.VALIDATION_ERROR,
                "reference_prefix must be non-empty",
                ErrorContext(operation="build_schema"),
            )

        adjacency: dict[str, frozenset[str]] = {
            table: frozenset(fields) for table, fields in relationships.items()
        }
        # Tables that are only ever referenced still need an entry.
        for fields in list(adjacency.values()):
            for target in fields:
                adjacency.setdefault(target, frozenset())

        if anchor_table not in adjacency:
            raise DomainError(
                ErrorCode.VALIDATION_ERROR,
                f"Anchor table '{anchor_table}' is not part of the relationship graph",
                ErrorContext(operation="build_schema", table=anchor_table),
            )

        overrides: dict[tuple[str, str], frozenset[str]] = {}
        for key, fields in (back_references or {}).items():
            parent, sep, field_name = key.partition(EDGE_KEY_SEPARATOR)
            if not sep or not parent or not field_name:
                raise DomainError(
                    ErrorCode.VALIDATION_ERROR,
                    f"Back-reference key must look like 'table.field', got '{key}'",
                    ErrorContext(operation="build_schema"),
                )
            overrides[(parent, field_name)] = frozenset(fields)

        self._relationships = adjacency
        self._back_references = overrides
        self.anchor_table = anchor_table
        self.reference_prefix = reference_prefix

    @classmethod
    def default(cls) -> TableSchema:
        """Schema of the lessons base."""
        return cls(Tables.RELATIONSHIPS, Tables.ANCHOR)

    @property
    def tables(self) -> frozenset[str]:
        """All table names known to the schema."""
        return frozenset(self._relationships)

    def link_fields(self, table: str) -> frozenset[str]:
        """Names of the fields of ``table`` that link to other tables."""
        return self._relationships.get(table, frozenset())

    def is_link_field(self, table: str, field_name: str) -> bool:
        return field_name in self._relationships and field_name in self.link_fields(table)

    def dependencies(self, table: str | None = None) -> list[str]:
        """Tables reachable from ``table`` (the anchor by default), excluding it.

        Returned in breadth-first order.
        """
        start = table or self.anchor_table
        seen = {start}
        order: list[str] = []
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for target in sorted(self.link_fields(current)):
                if target not in seen:
                    seen.add(target)
                    order.append(target)
                    queue.append(target)
        return order

    def required_tables(self) -> list[str]:
        """Anchor plus every dependency: the tables a complete cache holds."""
        return [self.anchor_table, *self.dependencies()]

    def back_reference_fields(self, parent_table: str, field_name: str) -> frozenset[str]:
        """Fields to strip from a child reached through ``parent_table.field_name``.

        Without an explicit override the parent's own table name is stripped,
        and only when the child table declares a link back to the parent.
        """
        override = self._back_references.get((parent_table, field_name))
        if override is not None:
            return override
        if parent_table in self.link_fields(field_name):
            return frozenset({parent_table})
        return frozenset()

    def is_reference(self, value: Any) -> bool:
        return isinstance(value, str) and value.startswith(self.reference_prefix)

    def classify(self, table: str, field_name: str, value: Any) -> Any:
        """Tag a raw field value of ``table``.

        Only link fields are classified; other values are returned unchanged.
        """
        if not self.is_link_field(table, field_name):
            return value

        if isinstance(value, (Reference, Record)):
            return value
        if self.is_reference(value):
            return Reference(value)
        if _is_record_payload(value):
            return self.record_from_dict(field_name, value)
        if isinstance(value, list) and value:
            if all(self.is_reference(item) for item in value):
                return [Reference(item) for item in value]
            if all(_is_record_payload(item) or self.is_reference(item) for item in value):
                return [
                    Reference(item)
                    if self.is_reference(item)
                    else self.record_from_dict(field_name, item)
                    for item in value
                ]
        return value

    def record_from_dict(self, table: str, data: Mapping[str, Any]) -> Record:
        """Ingest one raw record payload of ``table``.

        Args:
            table: Table the record belongs to
            data: ``{"id": ..., "fields": {...}}``, optionally with ``createdTime``

        Returns:
            Record with link fields tagged

        Raises:
            DomainError: If the payload has no string id or fields is not a mapping
        """
        record_id = data.get(AirtableConfig.ID_KEY) if isinstance(data, Mapping) else None
        if not isinstance(record_id, str) or not record_id:
            raise DomainError(
                ErrorCode.VALIDATION_ERROR,
                f"Record payload in table '{table}' has no id",
                ErrorContext(operation="ingest_record", table=table),
            )

        raw_fields = data.get(AirtableConfig.FIELDS_KEY) or {}
        if not isinstance(raw_fields, Mapping):
            raise DomainError(
                ErrorCode.VALIDATION_ERROR,
                f"Record '{record_id}' in table '{table}' has malformed fields",
                ErrorContext(operation="ingest_record", table=table),
            )

        return Record(
            id=record_id,
            fields={
                name: self.classify(table, name, value)
                for name, value in raw_fields.items()
            },
            created_time=data.get(AirtableConfig.CREATED_TIME_KEY),
        )

    def records_from_payload(
        self,
        table: str,
        payload: Iterable[Mapping[str, Any]],
    ) -> list[Record]:
        """Ingest a whole table payload."""
        return [self.record_from_dict(table, item) for item in payload]

    def to_dict(self) -> dict[str, Any]:
        """Schema metadata persisted next to the cached data."""
        return {
            "anchor_table": self.anchor_table,
            "reference_prefix": self.reference_prefix,
            "relationships": {
                table: sorted(fields)
                for table, fields in sorted(self._relationships.items())
            },
            "back_references": {
                f"{parent}{EDGE_KEY_SEPARATOR}{field_name}": sorted(fields)
                for (parent, field_name), fields in sorted(self._back_references.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableSchema:
        return cls(
            data["relationships"],
            data["anchor_table"],
            back_references=data.get("back_references") or {},
            reference_prefix=data.get("reference_prefix", AirtableConfig.REFERENCE_PREFIX),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TableSchema):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.anchor_table)

    def __repr__(self) -> str:
        return (
            f"TableSchema(anchor_table={self.anchor_table!r}, "
            f"tables={sorted(self._relationships)!r})"
        )


def _is_record_payload(value: Any) -> bool:
    """A dict shaped like a serialized record (already resolved link)."""
    return (
        isinstance(value, Mapping)
        and isinstance(value.get(AirtableConfig.ID_KEY), str)
        and isinstance(value.get(AirtableConfig.FIELDS_KEY), Mapping)
    )
