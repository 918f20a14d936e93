"""
Row materializer: one split row -> one typed record or a list of issues.

Per row: for each resolved column, optionally validate the cell, coerce
it, and park the value in an arena keyed by composite path. Once every
column of the row has been seen, the arena is flushed bottom-up into the
target record and its composite sub-records.

ZERO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from rowmap_kernel.exceptions import CellConversionError

from rowmap_ingestion.domain.parsing import is_blank
from rowmap_ingestion.domain.types import Schema, ValidationIssue
from rowmap_ingestion.domain.validators import validate_cell
from rowmap_ingestion.mapping.coercion import coerce_cell
from rowmap_ingestion.mapping.resolver import Path, ResolvedColumn

T = TypeVar("T")


@dataclass(frozen=True)
class RowOutcome(Generic[T]):
    """Result of materializing one row: a record, or the issues that rejected it."""

    record: T | None = None
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def accepted(self) -> bool:
        return not self.issues


class _Arena:
    """Coerced values of one row, grouped by the composite path that owns them."""

    def __init__(self) -> None:
        self._values: dict[Path, dict[str, Any]] = {}

    def put(self, path: Path, name: str, value: Any) -> None:
        self._values.setdefault(path, {})[name] = value

    def values(self, path: Path) -> dict[str, Any]:
        return self._values.get(path, {})

    def touched(self, path: Path) -> bool:
        n = len(path)
        return any(key[:n] == path for key in self._values)


def _build(schema: Schema, path: Path, arena: _Arena) -> Any:
    values = arena.values(path)
    kwargs: dict[str, Any] = {}
    for d in schema.fields:
        if d.is_composite:
            child = path + (d.name,)
            kwargs[d.name] = _build(d.nested_schema, child, arena) if arena.touched(child) else d.make_default()
        elif d.name in values:
            kwargs[d.name] = values[d.name]
        else:
            kwargs[d.name] = d.make_default()
    return schema.record_type(**kwargs)


def materialize_row(
    cells: Sequence[str],
    columns: Sequence[ResolvedColumn],
    schema: Schema,
    row_number: int,
    *,
    validate: bool = False,
    date_format: str | None = None,
) -> RowOutcome:
    """
    Map one row onto a new instance of ``schema.record_type``.

    Cells beyond the end of a short row read as empty. With ``validate``,
    failing cells become issues and the row yields no record.

    Raises:
        CellConversionError: a cell cannot be coerced and ``validate`` is off.
    """
    arena = _Arena()
    issues: list[ValidationIssue] = []

    for col in columns:
        value = cells[col.index] if col.index < len(cells) else ""
        descriptor = col.descriptor

        if validate:
            issue = validate_cell(value, descriptor, row_number, date_format)
            if issue is not None:
                issues.append(issue)
                continue

        if descriptor.nullable and is_blank(value):
            arena.put(col.path, descriptor.name, None)
            continue

        try:
            coerced = coerce_cell(value, descriptor, date_format)
        except CellConversionError as exc:
            if not validate:
                raise exc.at_row(row_number) from exc
            issues.append(ValidationIssue(row_number=row_number, field_name=descriptor.name, message=str(exc)))
            continue
        arena.put(col.path, descriptor.name, coerced)

    if issues:
        return RowOutcome(record=None, issues=tuple(issues))
    return RowOutcome(record=_build(schema, (), arena))
