"""Mapping: column resolution, cell coercion and row materialization (pure)."""

from rowmap_ingestion.mapping.coercion import coerce_cell
from rowmap_ingestion.mapping.engine import RowOutcome, materialize_row
from rowmap_ingestion.mapping.resolver import (
    ResolvedColumn,
    find_field,
    flatten,
    position_origin,
    resolve_columns,
    resolve_declaration_order,
    resolve_header,
    resolve_positions,
)

__all__ = [
    "ResolvedColumn",
    "RowOutcome",
    "coerce_cell",
    "find_field",
    "flatten",
    "materialize_row",
    "position_origin",
    "resolve_columns",
    "resolve_declaration_order",
    "resolve_header",
    "resolve_positions",
]
