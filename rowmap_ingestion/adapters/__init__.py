"""Adapters: line sources and delimited-text writers (file I/O only)."""

from rowmap_ingestion.adapters.base import LineSource
from rowmap_ingestion.adapters.line_source import FileLineSource
from rowmap_ingestion.adapters.record_writer import RecordWriter, render_value
from rowmap_ingestion.adapters.report_writer import ErrorReportWriter, error_report_path

__all__ = [
    "ErrorReportWriter",
    "FileLineSource",
    "LineSource",
    "RecordWriter",
    "error_report_path",
    "render_value",
]
