"""
Coercion engine: one raw cell -> one typed field value.

One coercion function per TypeKind, selected through a single dispatch
table. A function either returns the typed value or raises
CellConversionError; nothing falls through to another kind.

Date and datetime fields are lenient: text that does not parse becomes
None (nullable) or the type's minimum value, never an error. Validation
mode reports the same text as an issue before coercion runs.

ZERO I/O.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable

from rowmap_kernel.exceptions import CellConversionError

from rowmap_ingestion.domain.parsing import (
    is_blank,
    parse_boolean,
    parse_date,
    parse_datetime,
    parse_decimal,
    parse_enum,
    parse_float,
    parse_integer,
    parse_uuid,
)
from rowmap_ingestion.domain.types import FieldDescriptor, TypeKind

Coercer = Callable[[str, FieldDescriptor, "str | None"], Any]


def _decline(value: str, descriptor: FieldDescriptor) -> CellConversionError:
    return CellConversionError(value, descriptor.name, descriptor.declared_type_name)


def _parsed_or_decline(parsed: Any, value: str, descriptor: FieldDescriptor) -> Any:
    if parsed is None:
        raise _decline(value, descriptor)
    return parsed


def _coerce_string(value: str, descriptor: FieldDescriptor, date_format: str | None) -> str:
    return value


def _coerce_boolean(value: str, descriptor: FieldDescriptor, date_format: str | None) -> bool:
    return _parsed_or_decline(parse_boolean(value), value, descriptor)


def _coerce_integer(value: str, descriptor: FieldDescriptor, date_format: str | None) -> int:
    return _parsed_or_decline(parse_integer(value), value, descriptor)


def _coerce_decimal(value: str, descriptor: FieldDescriptor, date_format: str | None) -> Any:
    return _parsed_or_decline(parse_decimal(value), value, descriptor)


def _coerce_float(value: str, descriptor: FieldDescriptor, date_format: str | None) -> float:
    return _parsed_or_decline(parse_float(value), value, descriptor)


def _coerce_date(value: str, descriptor: FieldDescriptor, date_format: str | None) -> date | None:
    parsed = parse_date(value, date_format)
    if parsed is not None:
        return parsed
    return None if descriptor.nullable else date.min


def _coerce_datetime(value: str, descriptor: FieldDescriptor, date_format: str | None) -> datetime | None:
    parsed = parse_datetime(value, date_format)
    if parsed is not None:
        return parsed
    return None if descriptor.nullable else datetime.min


def _coerce_uuid(value: str, descriptor: FieldDescriptor, date_format: str | None) -> Any:
    return _parsed_or_decline(parse_uuid(value), value, descriptor)


def _coerce_enum(value: str, descriptor: FieldDescriptor, date_format: str | None) -> Any:
    return _parsed_or_decline(parse_enum(value, descriptor.python_type), value, descriptor)


def _coerce_composite(value: str, descriptor: FieldDescriptor, date_format: str | None) -> Any:
    # Composite fields are never bound to a column; their leaves are.
    raise _decline(value, descriptor)


_COERCERS: dict[TypeKind, Coercer] = {
    TypeKind.STRING: _coerce_string,
    TypeKind.BOOLEAN: _coerce_boolean,
    TypeKind.INTEGER: _coerce_integer,
    TypeKind.DECIMAL: _coerce_decimal,
    TypeKind.FLOAT: _coerce_float,
    TypeKind.DATE: _coerce_date,
    TypeKind.DATETIME: _coerce_datetime,
    TypeKind.UUID: _coerce_uuid,
    TypeKind.ENUM: _coerce_enum,
    TypeKind.COMPOSITE: _coerce_composite,
}


def coerce_cell(value: str, descriptor: FieldDescriptor, date_format: str | None = None) -> Any:
    """
    Convert one raw cell to the descriptor's declared type.

    A blank cell on a nullable field is None without any conversion
    attempt.

    Raises:
        CellConversionError: the text is not a value of the declared kind.
    """
    if descriptor.nullable and is_blank(value):
        return None
    return _COERCERS[descriptor.kind](value, descriptor, date_format)
