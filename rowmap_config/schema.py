"""
Configuration schema (``rowmap_config.schema``).

Frozen dataclasses describing how a single read or write call behaves.
One immutable value is passed into each call; nothing is configured by
mutating a reader between calls.
"""

from __future__ import annotations

import locale
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_ERROR_FOLDER = "Errors"


def default_delimiter() -> str:
    """
    Return the list separator of the active locale.

    Locales that use a comma as decimal point separate list items with a
    semicolon; every other locale uses a comma.
    """
    decimal_point = locale.localeconv().get("decimal_point", ".")
    return ";" if decimal_point == "," else ","


def default_error_folder() -> Path:
    """``./Errors`` relative to the current working directory."""
    return Path.cwd() / DEFAULT_ERROR_FOLDER


@dataclass(frozen=True)
class ReaderOptions:
    """Options for one read, validate or persist call."""

    delimiter: str = field(default_factory=default_delimiter)
    has_header: bool = True
    date_format: str | None = None  # strptime syntax, e.g. "%d-%m-%Y"
    validate: bool = False
    error_report_path: Path | None = None
    encoding: str = "utf-8-sig"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        if self.error_report_path is not None and not isinstance(self.error_report_path, Path):
            object.__setattr__(self, "error_report_path", Path(self.error_report_path))

    @property
    def error_folder(self) -> Path:
        """Destination folder for the error report."""
        return self.error_report_path or default_error_folder()


@dataclass(frozen=True)
class WriterOptions:
    """Options for one write call."""

    delimiter: str = field(default_factory=default_delimiter)
    has_header: bool = True
    date_format: str | None = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")


@dataclass(frozen=True)
class RowMapConfig:
    """Reader and writer options loaded together from one YAML file."""

    reader: ReaderOptions = field(default_factory=ReaderOptions)
    writer: WriterOptions = field(default_factory=WriterOptions)
