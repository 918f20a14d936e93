"""
Error-report writer.

One ``<input stem>_errors.csv`` file per read with issues, in the configured
folder (created on demand). Header ``RowNumber,PropertyName,ConversionError``
joined with the read's delimiter, then one line per issue in emission order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from rowmap_config.schema import WriterOptions
from rowmap_kernel.exceptions import FileWritingError

from rowmap_ingestion.adapters.record_writer import RecordWriter
from rowmap_ingestion.domain.types import ValidationIssue

ERROR_REPORT_SUFFIX = "_errors.csv"


def error_report_path(folder: Path, source_name: str) -> Path:
    return folder / f"{Path(source_name).stem}{ERROR_REPORT_SUFFIX}"


class ErrorReportWriter:
    """Persist the issues of one read next to (or away from) its input."""

    def __init__(self, writer: RecordWriter | None = None):
        self._writer = writer or RecordWriter()

    def write(
        self,
        folder: Path | str,
        source_name: str,
        issues: Sequence[ValidationIssue],
        delimiter: str = ",",
        encoding: str = "utf-8",
    ) -> Path:
        """
        Write ``issues`` and return the report path.

        Raises:
            NoRecordsToWriteError: ``issues`` is empty.
            FileWritingError: the folder or file could not be written.
        """
        target = error_report_path(Path(folder), source_name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileWritingError(str(target)) from exc
        options = WriterOptions(delimiter=delimiter, has_header=True, encoding=encoding)
        return self._writer.write(target, list(issues), options)
