"""
File line source.

Reads a whole input file into memory. Handles a BOM via ``utf-8-sig`` and
both ``\\n`` and ``\\r\\n`` line endings.
"""

from __future__ import annotations

from pathlib import Path

from rowmap_kernel.exceptions import MissingContentError, MissingFileError


class FileLineSource:
    """Read delimited text files as a list of lines."""

    def read_lines(self, path: Path | str, encoding: str = "utf-8-sig") -> list[str]:
        if not str(path).strip():
            raise MissingFileError(str(path))
        source_path = Path(path)
        if not source_path.is_file():
            raise MissingFileError(str(source_path))

        with source_path.open("r", encoding=encoding, newline="") as f:
            lines = [line.rstrip("\r\n") for line in f]
        if not lines:
            raise MissingContentError(str(source_path))
        return lines
