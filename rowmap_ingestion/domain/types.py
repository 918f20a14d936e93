"""
rowmap_ingestion.domain.types -- Pure frozen dataclasses for the mapping engine.

ZERO I/O. Describes target schemas (FieldDescriptor, Schema), the
per-cell diagnostic (ValidationIssue) and the per-read outcome
(MappingResult).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

# Field metadata keys written by column()
COLUMN_ALIAS_KEY = "rowmap.column_alias"
COLUMN_POSITION_KEY = "rowmap.position"
COLUMN_IGNORE_KEY = "rowmap.ignore"

# FieldDescriptor.default when the field declares none
NO_DEFAULT: Any = object()


# =============================================================================
# Type kinds
# =============================================================================


class TypeKind(str, Enum):
    """Declared kind of a target field."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    DATE = "date"
    DATETIME = "datetime"
    UUID = "uuid"
    ENUM = "enum"
    COMPOSITE = "composite"


def qualified_type_name(tp: type) -> str:
    """``int`` for builtins, ``module.QualName`` for everything else."""
    if tp.__module__ == "builtins":
        return tp.__qualname__
    return f"{tp.__module__}.{tp.__qualname__}"


# =============================================================================
# Column registration
# =============================================================================


@dataclass(frozen=True)
class ColumnSpec:
    """Addressing metadata for one field: header alias, position, exclusion."""

    alias: str | None = None
    position: int | None = None
    ignore: bool = False


def column(
    alias: str | None = None,
    position: int | None = None,
    *,
    ignore: bool = False,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """
    Declare a dataclass field with a column alias and/or explicit position.

        @dataclass
        class Person:
            name: str = column("First_Name", 0, default="")
            birth_date: date | None = column(position=2, default=None)
    """
    metadata: dict[str, Any] = {}
    if alias is not None:
        metadata[COLUMN_ALIAS_KEY] = alias
    if position is not None:
        metadata[COLUMN_POSITION_KEY] = position
    if ignore:
        metadata[COLUMN_IGNORE_KEY] = True
    return field(default=default, default_factory=default_factory, metadata=metadata)


# =============================================================================
# Schema
# =============================================================================


@dataclass(frozen=True)
class FieldDescriptor:
    """Schema-level metadata for one target field."""

    name: str
    kind: TypeKind
    python_type: type
    nullable: bool = False
    column_alias: str | None = None
    explicit_position: int | None = None
    nested_schema: Schema | None = None
    default: Any = NO_DEFAULT
    default_factory: Callable[[], Any] | None = None

    @property
    def is_composite(self) -> bool:
        return self.kind is TypeKind.COMPOSITE

    @property
    def declared_type_name(self) -> str:
        return qualified_type_name(self.python_type)

    @property
    def header_text(self) -> str:
        """Text written to (and preferred when matching) a header row."""
        return self.column_alias or self.name

    def make_default(self) -> Any:
        """Value for a field no input column populated."""
        if self.default is not NO_DEFAULT:
            return self.default
        if self.default_factory is not None:
            return self.default_factory()
        return None


@dataclass(frozen=True)
class Schema:
    """Ordered, immutable field descriptors of one target type."""

    record_type: type
    fields: tuple[FieldDescriptor, ...]

    @property
    def composites(self) -> tuple[FieldDescriptor, ...]:
        return tuple(d for d in self.fields if d.is_composite)

    @property
    def is_positional(self) -> bool:
        """True if any descriptor, nested ones included, declares a position."""
        for d in self.fields:
            if d.explicit_position is not None:
                return True
            if d.nested_schema is not None and d.nested_schema.is_positional:
                return True
        return False


# =============================================================================
# Diagnostics and results
# =============================================================================


@dataclass(frozen=True)
class ValidationIssue:
    """Why one cell of one data row could not be safely coerced."""

    row_number: int = column("RowNumber", default=0)
    field_name: str = column("PropertyName", default="")
    message: str = column("ConversionError", default="")


@dataclass(frozen=True)
class MappingResult(Generic[T]):
    """Accepted records plus the issues of one read; rows with issues yield no record."""

    records: tuple[T, ...] = ()
    issues: tuple[ValidationIssue, ...] = ()
    error_report: Path | None = None

    @property
    def success(self) -> bool:
        return not self.issues
