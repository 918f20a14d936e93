"""
Record writer: typed records -> delimited text file.

The inverse of a read with the same options: one header row of column
aliases (or field names) unless disabled, then one line per record.
Composite fields are flattened into their leaf columns and positional
schemas place each value at its resolved column index.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Sequence

from rowmap_config.schema import WriterOptions
from rowmap_kernel.exceptions import FileWritingError, NoRecordsToWriteError
from rowmap_kernel.logging_config import get_logger

from rowmap_ingestion.domain.schema import schema_for
from rowmap_ingestion.mapping.resolver import (
    ResolvedColumn,
    resolve_declaration_order,
    resolve_positions,
)

logger = get_logger("ingestion.record_writer")


def render_value(value: Any, date_format: str | None = None) -> str:
    """Text form of one field value; readable back by the coercion engine."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (date, datetime)):
        return value.strftime(date_format) if date_format else value.isoformat()
    if isinstance(value, Decimal):
        # str() switches to exponent form for small and large scales
        return format(value, "f")
    return str(value)


def _value_at(record: Any, col: ResolvedColumn) -> Any:
    owner = record
    for name in col.path:
        owner = getattr(owner, name, None)
        if owner is None:
            return None
    return getattr(owner, col.descriptor.name, None)


def _render_line(cells: dict[int, str], width: int, delimiter: str) -> str:
    return delimiter.join(cells.get(i, "") for i in range(width))


class RecordWriter:
    """Write records of one dataclass type as delimited text."""

    def __init__(self, options: WriterOptions | None = None):
        self._options = options or WriterOptions()

    def render(self, records: Sequence[Any], options: WriterOptions | None = None) -> list[str]:
        """Lines of the file ``write`` would produce, without terminators."""
        if not records:
            raise NoRecordsToWriteError()
        opts = options or self._options
        schema = schema_for(type(records[0]))
        columns = resolve_positions(schema) if schema.is_positional else resolve_declaration_order(schema)
        width = max((c.index for c in columns), default=-1) + 1

        lines: list[str] = []
        if opts.has_header:
            lines.append(_render_line({c.index: c.descriptor.header_text for c in columns}, width, opts.delimiter))
        for record in records:
            cells = {c.index: render_value(_value_at(record, c), opts.date_format) for c in columns}
            lines.append(_render_line(cells, width, opts.delimiter))
        return lines

    def write(self, path: Path | str, records: Sequence[Any], options: WriterOptions | None = None) -> Path:
        """
        Write ``records`` to ``path``, replacing any existing file.

        Raises:
            NoRecordsToWriteError: ``records`` is empty.
            FileWritingError: the file could not be written.
        """
        opts = options or self._options
        lines = self.render(records, opts)
        target = Path(path)
        try:
            with target.open("w", encoding=opts.encoding, newline="") as f:
                for line in lines:
                    f.write(line)
                    f.write("\n")
        except OSError as exc:
            raise FileWritingError(str(target)) from exc

        logger.info(
            "records_written",
            extra={"path": str(target), "record_count": len(records)},
        )
        return target

    async def write_async(
        self, path: Path | str, records: Sequence[Any], options: WriterOptions | None = None
    ) -> Path:
        return await asyncio.to_thread(self.write, path, records, options)
