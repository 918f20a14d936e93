"""
Record reader: read -> resolve -> [validate] -> coerce -> accumulate.

Orchestrates the line source, column resolver and row materializer for one
file and one target type, and writes the error report when a read produced
issues. Uses structured logging (LogContext, get_logger("ingestion.*")).
"""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path
from typing import Any, Sequence, TypeVar

from rowmap_config.schema import ReaderOptions
from rowmap_kernel.exceptions import MissingContentError
from rowmap_kernel.logging_config import LogContext, get_logger

from rowmap_ingestion.adapters.base import LineSource
from rowmap_ingestion.adapters.line_source import FileLineSource
from rowmap_ingestion.adapters.report_writer import ErrorReportWriter
from rowmap_ingestion.domain.parsing import is_blank
from rowmap_ingestion.domain.schema import schema_for
from rowmap_ingestion.domain.types import MappingResult, Schema, ValidationIssue
from rowmap_ingestion.domain.validators import validate_cells
from rowmap_ingestion.mapping.engine import materialize_row
from rowmap_ingestion.mapping.resolver import ResolvedColumn, resolve_columns

T = TypeVar("T")

logger = get_logger("ingestion.reader_service")

IN_MEMORY_SOURCE = "<lines>"


def _split_rows(
    lines: Sequence[str], schema: Schema, options: ReaderOptions, source_name: str
) -> tuple[tuple[ResolvedColumn, ...], list[tuple[int, list[str]]]]:
    """Resolve columns and number the data rows; blank lines are skipped and not counted."""
    if not lines:
        raise MissingContentError(source_name, options.delimiter)

    header: list[str] | None = None
    body = lines
    if options.has_header:
        header = lines[0].split(options.delimiter)
        body = lines[1:]
    columns = resolve_columns(schema, header)

    rows: list[tuple[int, list[str]]] = []
    for line in body:
        if is_blank(line):
            continue
        rows.append((len(rows) + 1, line.split(options.delimiter)))
    return columns, rows


class RecordReader:
    """
    Map delimited text files onto instances of a dataclass type.

    One immutable ReaderOptions value governs each call; pass ``options``
    per call to override the reader's defaults.
    """

    def __init__(
        self,
        options: ReaderOptions | None = None,
        source: LineSource | None = None,
        report_writer: ErrorReportWriter | None = None,
    ):
        self._options = options or ReaderOptions()
        self._source = source or FileLineSource()
        self._report_writer = report_writer or ErrorReportWriter()

    @property
    def options(self) -> ReaderOptions:
        return self._options

    # ------------------------------------------------------------------
    # Pure core
    # ------------------------------------------------------------------

    def map_lines(
        self,
        lines: Sequence[str],
        record_type: type[T],
        source_name: str = IN_MEMORY_SOURCE,
        options: ReaderOptions | None = None,
    ) -> MappingResult[T]:
        """
        Map already-read lines. No report file is written.

        Raises:
            MissingContentError: ``lines`` is empty.
            SchemaDefinitionError: ``record_type`` cannot be described.
            CellConversionError: a cell cannot be coerced and validation is off.
        """
        opts = options or self._options
        schema = schema_for(record_type)
        columns, rows = _split_rows(lines, schema, opts, source_name)

        records: list[Any] = []
        issues: list[ValidationIssue] = []
        for row_number, cells in rows:
            outcome = materialize_row(
                cells,
                columns,
                schema,
                row_number,
                validate=opts.validate,
                date_format=opts.date_format,
            )
            if outcome.issues:
                issues.extend(outcome.issues)
                logger.warning(
                    "row_rejected",
                    extra={"row_number": row_number, "issue_count": len(outcome.issues)},
                )
            else:
                records.append(outcome.record)

        return MappingResult(records=tuple(records), issues=tuple(issues))

    # ------------------------------------------------------------------
    # File reads
    # ------------------------------------------------------------------

    def read(
        self, path: Path | str, record_type: type[T], options: ReaderOptions | None = None
    ) -> MappingResult[T]:
        """
        Read ``path`` into records of ``record_type``.

        In validation mode rows with issues are skipped and the issues are
        written to ``<stem>_errors.csv`` in the error folder.

        Raises:
            MissingFileError: the file does not exist.
            MissingContentError: the file has no lines.
            SchemaDefinitionError: ``record_type`` cannot be described.
            CellConversionError: a cell cannot be coerced and validation is off.
        """
        opts = options or self._options
        with self._bind(path, record_type):
            self._log_started(path, opts)
            lines = self._source.read_lines(path, opts.encoding)
            result = self.map_lines(lines, record_type, str(path), opts)
            if result.issues:
                result = dataclasses.replace(
                    result, error_report=self._write_report(path, result.issues, opts)
                )
            self._log_completed(result)
            return result

    async def read_async(
        self, path: Path | str, record_type: type[T], options: ReaderOptions | None = None
    ) -> MappingResult[T]:
        """Same as ``read``; file access runs off the event loop."""
        opts = options or self._options
        with self._bind(path, record_type):
            self._log_started(path, opts)
            lines = await asyncio.to_thread(self._source.read_lines, path, opts.encoding)
            result = self.map_lines(lines, record_type, str(path), opts)
            if result.issues:
                report = await asyncio.to_thread(self._write_report, path, result.issues, opts)
                result = dataclasses.replace(result, error_report=report)
            self._log_completed(result)
            return result

    def validate_file(
        self, path: Path | str, record_type: type, options: ReaderOptions | None = None
    ) -> tuple[ValidationIssue, ...]:
        """
        Run only the validator over every resolved cell of ``path``.

        Returns the issues in row order; an empty tuple means every cell
        passed the validator. Nothing is written.
        """
        opts = options or self._options
        with self._bind(path, record_type):
            lines = self._source.read_lines(path, opts.encoding)
            return self._validate_lines(lines, record_type, str(path), opts)

    async def validate_file_async(
        self, path: Path | str, record_type: type, options: ReaderOptions | None = None
    ) -> tuple[ValidationIssue, ...]:
        opts = options or self._options
        with self._bind(path, record_type):
            lines = await asyncio.to_thread(self._source.read_lines, path, opts.encoding)
            return self._validate_lines(lines, record_type, str(path), opts)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate_lines(
        self, lines: Sequence[str], record_type: type, source_name: str, opts: ReaderOptions
    ) -> tuple[ValidationIssue, ...]:
        columns, rows = _split_rows(lines, schema_for(record_type), opts, source_name)
        issues: list[ValidationIssue] = []
        for row_number, cells in rows:
            issues.extend(validate_cells(cells, columns, row_number, opts.date_format))
        logger.info(
            "validation_completed",
            extra={"row_count": len(rows), "issue_count": len(issues)},
        )
        return tuple(issues)

    def _write_report(
        self, path: Path | str, issues: Sequence[ValidationIssue], opts: ReaderOptions
    ) -> Path:
        report = self._report_writer.write(
            opts.error_folder, Path(path).name, issues, delimiter=opts.delimiter
        )
        logger.info(
            "error_report_written",
            extra={"report_path": str(report), "issue_count": len(issues)},
        )
        return report

    @staticmethod
    def _bind(path: Path | str, record_type: type) -> Any:
        return LogContext.read_scope(str(path), getattr(record_type, "__qualname__", repr(record_type)))

    @staticmethod
    def _log_started(path: Path | str, opts: ReaderOptions) -> None:
        logger.info(
            "read_started",
            extra={
                "path": str(path),
                "delimiter": opts.delimiter,
                "has_header": opts.has_header,
                "validate": opts.validate,
            },
        )

    @staticmethod
    def _log_completed(result: MappingResult) -> None:
        logger.info(
            "read_completed",
            extra={
                "record_count": len(result.records),
                "issue_count": len(result.issues),
                "error_report": str(result.error_report) if result.error_report else None,
            },
        )
