"""
Schema descriptor: derive a Schema from a dataclass target type, once per type.

Target types declare addressing metadata explicitly, either per field with
``column(...)`` or, for types whose fields cannot carry dataclass metadata
(SQLAlchemy mapped dataclasses), with a class-level mapping::

    class Employee(Base):
        __rowmap_columns__: ClassVar[dict[str, ColumnSpec]] = {
            "first_name": ColumnSpec(alias="First_Name"),
        }

Excluded by convention: fields with ``init=False``, names with a leading
underscore, ``ClassVar`` attributes and fields marked ``ignore``.

ZERO I/O. Built schemas are cached and read-only.
"""

from __future__ import annotations

import dataclasses
import threading
import types
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints
from uuid import UUID

from sqlalchemy.orm import Mapped

from rowmap_kernel.exceptions import SchemaDefinitionError

from rowmap_ingestion.domain.types import (
    COLUMN_ALIAS_KEY,
    COLUMN_IGNORE_KEY,
    COLUMN_POSITION_KEY,
    NO_DEFAULT,
    ColumnSpec,
    FieldDescriptor,
    Schema,
    TypeKind,
)

# Order matters: bool before int, datetime before date.
_PRIMITIVE_KINDS: tuple[tuple[type, TypeKind], ...] = (
    (bool, TypeKind.BOOLEAN),
    (str, TypeKind.STRING),
    (int, TypeKind.INTEGER),
    (float, TypeKind.FLOAT),
    (Decimal, TypeKind.DECIMAL),
    (datetime, TypeKind.DATETIME),
    (date, TypeKind.DATE),
    (UUID, TypeKind.UUID),
)

_cache: dict[type, Schema] = {}
_lock = threading.RLock()


def schema_for(record_type: type) -> Schema:
    """Return the cached Schema of ``record_type``, building it on first use."""
    cached = _cache.get(record_type)
    if cached is not None:
        return cached
    with _lock:
        cached = _cache.get(record_type)
        if cached is None:
            cached = _build_schema(record_type, ())
            _cache[record_type] = cached
    return cached


def clear_schema_cache() -> None:
    """Drop every cached schema. FOR TESTING ONLY."""
    with _lock:
        _cache.clear()


def _build_schema(record_type: type, building: tuple[type, ...]) -> Schema:
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise SchemaDefinitionError(getattr(record_type, "__name__", repr(record_type)), "not a dataclass type")
    if record_type in building:
        raise SchemaDefinitionError(record_type.__name__, "composite fields form a cycle")
    building = building + (record_type,)

    overrides: dict[str, ColumnSpec] = getattr(record_type, "__rowmap_columns__", None) or {}
    descriptors: list[FieldDescriptor] = []
    hints = _type_hints(record_type)

    for f in dataclasses.fields(record_type):
        spec = overrides.get(f.name) or _spec_from_metadata(f)
        if not f.init or f.name.startswith("_") or spec.ignore:
            if f.init and not _has_default(f):
                raise SchemaDefinitionError(
                    record_type.__name__, "excluded fields must declare a default", f.name
                )
            continue

        descriptors.append(_describe(record_type, f, hints.get(f.name, f.type), spec, building))

    return Schema(record_type=record_type, fields=tuple(descriptors))


def _spec_from_metadata(f: dataclasses.Field) -> ColumnSpec:
    md = f.metadata or {}
    return ColumnSpec(
        alias=md.get(COLUMN_ALIAS_KEY),
        position=md.get(COLUMN_POSITION_KEY),
        ignore=bool(md.get(COLUMN_IGNORE_KEY, False)),
    )


def _has_default(f: dataclasses.Field) -> bool:
    return f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING


def _type_hints(record_type: type) -> dict[str, Any]:
    """Resolved annotations of ``record_type`` and its bases, ``Mapped[...]`` kept."""
    try:
        return get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as exc:
        raise SchemaDefinitionError(record_type.__name__, f"cannot resolve annotations: {exc}") from exc


def _unwrap(record_type: type, name: str, hint: Any) -> tuple[Any, bool]:
    """Strip ``Mapped[...]`` and ``Optional[...]``; return (inner type, nullable)."""
    if get_origin(hint) is Mapped:
        hint = get_args(hint)[0]

    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) != 1:
            raise SchemaDefinitionError(record_type.__name__, "only Optional[T] unions are supported", name)
        return args[0], True
    return hint, False


def _describe(
    record_type: type,
    f: dataclasses.Field,
    hint: Any,
    spec: ColumnSpec,
    building: tuple[type, ...],
) -> FieldDescriptor:
    inner, nullable = _unwrap(record_type, f.name, hint)
    if not isinstance(inner, type):
        raise SchemaDefinitionError(record_type.__name__, f"unsupported annotation {hint!r}", f.name)

    nested: Schema | None = None
    if issubclass(inner, Enum):
        kind = TypeKind.ENUM
    elif dataclasses.is_dataclass(inner):
        kind = TypeKind.COMPOSITE
        nested = _build_schema(inner, building)
    else:
        for py_type, candidate in _PRIMITIVE_KINDS:
            if issubclass(inner, py_type):
                kind = candidate
                break
        else:
            raise SchemaDefinitionError(record_type.__name__, f"unsupported type {inner.__name__}", f.name)

    return FieldDescriptor(
        name=f.name,
        kind=kind,
        python_type=inner,
        nullable=nullable,
        column_alias=spec.alias,
        explicit_position=spec.position,
        nested_schema=nested,
        default=NO_DEFAULT if f.default is dataclasses.MISSING else f.default,
        default_factory=None if f.default_factory is dataclasses.MISSING else f.default_factory,
    )
