"""
Column resolver: which input column feeds which field descriptor.

Three addressing modes, chosen once per read:

* header mode      -- header text matched to alias, then name, then
                      (transitively) to fields of composite schemas;
* position mode    -- explicit positions normalized to the smallest one;
* declaration mode -- flattened declaration order.

Resolution never raises: unmatched header cells are skipped. Pure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rowmap_ingestion.domain.types import FieldDescriptor, Schema

Path = tuple[str, ...]


@dataclass(frozen=True)
class ResolvedColumn:
    """One input column bound to a field; ``path`` names the composite fields leading to it."""

    index: int
    descriptor: FieldDescriptor
    path: Path = ()


def _normalize(text: str) -> str:
    return text.strip().casefold()


# -----------------------------------------------------------------------------
# Header mode
# -----------------------------------------------------------------------------


def find_field(schema: Schema, header_text: str, path: Path = ()) -> tuple[Path, FieldDescriptor] | None:
    """
    Find the descriptor a header cell addresses.

    Column aliases win over field names; top-level fields win over fields of
    composite schemas, which are searched depth-first in declaration order.
    """
    wanted = _normalize(header_text)
    leaves = [d for d in schema.fields if not d.is_composite]

    for d in leaves:
        if d.column_alias and _normalize(d.column_alias) == wanted:
            return path, d
    for d in leaves:
        if _normalize(d.name) == wanted:
            return path, d

    for composite in schema.composites:
        found = find_field(composite.nested_schema, header_text, path + (composite.name,))
        if found is not None:
            return found
    return None


def resolve_header(schema: Schema, header: Sequence[str]) -> tuple[ResolvedColumn, ...]:
    columns: list[ResolvedColumn] = []
    for index, text in enumerate(header):
        found = find_field(schema, text)
        if found is None:
            continue
        path, descriptor = found
        columns.append(ResolvedColumn(index=index, descriptor=descriptor, path=path))
    return tuple(columns)


# -----------------------------------------------------------------------------
# Position and declaration modes
# -----------------------------------------------------------------------------


def flatten(schema: Schema, path: Path = ()) -> list[tuple[Path, FieldDescriptor]]:
    """Leaf descriptors in declaration order, composites expanded inline."""
    leaves: list[tuple[Path, FieldDescriptor]] = []
    for d in schema.fields:
        if d.is_composite:
            leaves.extend(flatten(d.nested_schema, path + (d.name,)))
        else:
            leaves.append((path, d))
    return leaves


def position_origin(positions: Sequence[int]) -> int:
    """1 when the smallest declared position is above zero, else 0."""
    if not positions:
        return 0
    return 1 if min(positions) > 0 else 0


def resolve_positions(schema: Schema) -> tuple[ResolvedColumn, ...]:
    """
    Order leaves by explicit position and compute each one's column index.

    A leaf without a position sorts by its declaration index and reads the
    column at its index in the ordered list.
    """
    leaves = flatten(schema)
    ordered = sorted(
        enumerate(leaves),
        key=lambda item: (
            item[1][1].explicit_position
            if item[1][1].explicit_position is not None
            else item[0]
        ),
    )
    origin = position_origin(
        [d.explicit_position for _, (_, d) in ordered if d.explicit_position is not None]
    )

    columns: list[ResolvedColumn] = []
    for i, (_, (path, d)) in enumerate(ordered):
        index = d.explicit_position - origin if d.explicit_position is not None else i
        columns.append(ResolvedColumn(index=index, descriptor=d, path=path))
    return tuple(columns)


def resolve_declaration_order(schema: Schema) -> tuple[ResolvedColumn, ...]:
    return tuple(
        ResolvedColumn(index=i, descriptor=d, path=path)
        for i, (path, d) in enumerate(flatten(schema))
    )


def resolve_columns(schema: Schema, header: Sequence[str] | None) -> tuple[ResolvedColumn, ...]:
    """Pick the addressing mode: header if one was read, else position or declaration order."""
    if header is not None:
        return resolve_header(schema, header)
    if schema.is_positional:
        return resolve_positions(schema)
    return resolve_declaration_order(schema)
