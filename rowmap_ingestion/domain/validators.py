"""
Per-cell validator: classifies a raw cell before coercion.

A cell is acceptable, acceptably empty (nullable field), or a conversion
failure reported as a ValidationIssue. Nothing here raises. The message
wording is parsed by downstream tooling and must not change.

Architecture: rowmap_ingestion/domain. ZERO I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

from rowmap_ingestion.domain.parsing import (
    is_blank,
    parse_boolean,
    parse_date,
    parse_datetime,
    parse_decimal,
    parse_float,
    parse_integer,
)
from rowmap_ingestion.domain.types import FieldDescriptor, TypeKind, ValidationIssue

if TYPE_CHECKING:
    from rowmap_ingestion.mapping.resolver import ResolvedColumn


def null_or_empty_message(field_name: str) -> str:
    return f"The value for {field_name} cannot be null or empty."


def cannot_convert_message(value: str, declared_type: str) -> str:
    return f"Cannot convert '{value}' to {declared_type}."


# Kinds with a type-specific check; every other kind only gets the emptiness check.
_CHECKS: dict[TypeKind, Callable[[str, str | None], object]] = {
    TypeKind.BOOLEAN: lambda value, _fmt: parse_boolean(value),
    TypeKind.INTEGER: lambda value, _fmt: parse_integer(value),
    TypeKind.DECIMAL: lambda value, _fmt: parse_decimal(value),
    TypeKind.FLOAT: lambda value, _fmt: parse_float(value),
    TypeKind.DATE: parse_date,
    TypeKind.DATETIME: parse_datetime,
}


def validate_cell(
    value: str | None,
    descriptor: FieldDescriptor,
    row_number: int,
    date_format: str | None = None,
) -> ValidationIssue | None:
    """
    Validate one raw cell against its field descriptor.

    Returns None when the cell can be coerced (or is an acceptable empty
    value for a nullable field), otherwise the issue describing why not.
    """
    if is_blank(value):
        if descriptor.nullable:
            return None
        return ValidationIssue(
            row_number=row_number,
            field_name=descriptor.name,
            message=null_or_empty_message(descriptor.name),
        )

    check = _CHECKS.get(descriptor.kind)
    if check is None or check(value, date_format) is not None:
        return None
    return ValidationIssue(
        row_number=row_number,
        field_name=descriptor.name,
        message=cannot_convert_message(value, descriptor.declared_type_name),
    )


def validate_cells(
    cells: Sequence[str],
    columns: Sequence[ResolvedColumn],
    row_number: int,
    date_format: str | None = None,
) -> list[ValidationIssue]:
    """Validate every resolved column of one row, in column order."""
    issues: list[ValidationIssue] = []
    for col in columns:
        value = cells[col.index] if col.index < len(cells) else ""
        issue = validate_cell(value, col.descriptor, row_number, date_format)
        if issue is not None:
            issues.append(issue)
    return issues

