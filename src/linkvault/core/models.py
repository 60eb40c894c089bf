"""Record and field value models.

A record is an id plus a mapping of field names to values. Link fields
hold tagged values decided once when a payload is ingested:

- ``Reference``: a single linked record id
- ``list[Reference]``: several linked record ids
- ``Record`` / ``list[Record]``: linked records after resolution

Every other field keeps its plain JSON value (scalar or list of scalars).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class Reference:
    """Identifier of a record in another table."""

    record_id: str

    def __str__(self) -> str:
        return self.record_id


@dataclass
class Record:
    """A table record.

    Attributes:
        id: Record identifier (unique across the base)
        fields: Field name to value mapping
        created_time: Creation timestamp reported by the source, if any
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    created_time: str | None = None

    def copy(self) -> Record:
        """Return a copy whose fields can be replaced without touching this record."""
        return Record(
            id=self.id,
            fields={
                name: list(value) if isinstance(value, list) else value
                for name, value in self.fields.items()
            },
            created_time=self.created_time,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the record, nested records included.

        References are written back as their raw id strings.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "fields": {
                name: serialize_field_value(value)
                for name, value in self.fields.items()
            },
        }
        if self.created_time is not None:
            data["createdTime"] = self.created_time
        return data


def is_reference_value(value: Any) -> bool:
    """Return True for a Reference or a non-empty list of References."""
    if isinstance(value, Reference):
        return True
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(item, Reference) for item in value)
    )


def reference_ids(value: Any) -> list[str]:
    """Return the linked ids held by a reference value, in order."""
    if isinstance(value, Reference):
        return [value.record_id]
    if isinstance(value, list):
        return [item.record_id for item in value if isinstance(item, Reference)]
    return []


def serialize_field_value(value: Any) -> Any:
    """Convert a field value to plain JSON data."""
    if isinstance(value, Reference):
        return value.record_id
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, list):
        return [serialize_field_value(item) for item in value]
    return value


def records_to_dicts(records: list[Record]) -> list[dict[str, Any]]:
    """Serialize a list of records."""
    return [record.to_dict() for record in records]
