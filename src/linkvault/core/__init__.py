"""Core record model, relationship schema and link resolution."""

from .link_resolver import LinkResolver, ResolutionContext, TableSource
from .models import Record, Reference, is_reference_value, reference_ids
from .schema import TableSchema

__all__ = [
    "LinkResolver",
    "Record",
    "Reference",
    "ResolutionContext",
    "TableSchema",
    "TableSource",
    "is_reference_value",
    "reference_ids",
]
