"""
Line source protocol.

Contract:
    LineSource.read_lines() returns every line of one input, in file order,
    without line terminators.

Architecture: rowmap_ingestion/adapters. File I/O only, no DB imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class LineSource(Protocol):
    """Protocol for reading the raw lines of a delimited text input."""

    def read_lines(self, path: Path | str, encoding: str = "utf-8-sig") -> list[str]:
        """
        Return all lines of ``path``.

        Raises:
            MissingFileError: path is empty or does not exist.
            MissingContentError: the file has no lines.
        """
        ...
