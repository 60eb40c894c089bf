"""Table relationship configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from linkvault.shared.constants import Tables


def _default_relationships() -> dict[str, list[str]]:
    return {table: list(fields) for table, fields in Tables.RELATIONSHIPS.items()}


class SchemaSettings(BaseModel):
    """Relationship graph of the base.

    ``relationships`` maps every table to the fields that link to other
    tables; a link field is named after the table it references.
    ``back_references`` overrides the fields stripped from a child record
    reached through ``"<parent_table>.<field>"``.
    """

    anchor_table: str = Field(
        default=Tables.ANCHOR,
        description="Top-level table a full refresh resolves",
    )
    relationships: dict[str, list[str]] = Field(
        default_factory=_default_relationships,
        description="Table name to link field names",
    )
    back_references: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Back-reference strip overrides keyed by 'table.field'",
    )

    @model_validator(mode="after")
    def validate_anchor(self) -> SchemaSettings:
        """The anchor must be one of the configured tables."""
        referenced = {target for fields in self.relationships.values() for target in fields}
        if self.anchor_table not in self.relationships and self.anchor_table not in referenced:
            msg = f"anchor_table {self.anchor_table!r} is not in relationships"
            raise ValueError(msg)
        return self


__all__ = ["SchemaSettings"]
