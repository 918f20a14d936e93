"""
rowmap_ingestion.domain -- Pure types, schema descriptor and validators.

ZERO I/O.
"""

from rowmap_ingestion.domain.schema import clear_schema_cache, schema_for
from rowmap_ingestion.domain.types import (
    ColumnSpec,
    FieldDescriptor,
    MappingResult,
    Schema,
    TypeKind,
    ValidationIssue,
    column,
)
from rowmap_ingestion.domain.validators import validate_cell, validate_cells

__all__ = [
    "ColumnSpec",
    "FieldDescriptor",
    "MappingResult",
    "Schema",
    "TypeKind",
    "ValidationIssue",
    "clear_schema_cache",
    "column",
    "schema_for",
    "validate_cell",
    "validate_cells",
]
