"""
Configuration loader (``rowmap_config.loader``).

Responsibility
--------------
Loads a YAML file with optional ``reader:`` and ``writer:`` sections and
parses them into the frozen dataclasses of ``rowmap_config.schema``.
Keyword overrides are applied last.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or a multi-character delimiter  -> ``ValueError``.

Example file::

    reader:
      delimiter: ";"
      has_header: true
      date_format: "%d-%m-%Y"
      validate: true
      error_report_path: ./Errors
    writer:
      delimiter: ";"
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from rowmap_config.schema import ReaderOptions, RowMapConfig, WriterOptions

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _check_keys(section: str, data: dict[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"Unknown {section} option(s): {', '.join(unknown)}")


def parse_reader_options(data: dict[str, Any]) -> ReaderOptions:
    """Build ReaderOptions from a plain dict (YAML ``reader:`` section)."""
    allowed = {f.name for f in fields(ReaderOptions)}
    _check_keys("reader", data, allowed)
    kwargs: dict[str, Any] = {}
    if data.get("delimiter") is not None:
        kwargs["delimiter"] = str(data["delimiter"])
    if "has_header" in data:
        kwargs["has_header"] = _parse_bool(data["has_header"])
    if data.get("date_format"):
        kwargs["date_format"] = str(data["date_format"])
    if "validate" in data:
        kwargs["validate"] = _parse_bool(data["validate"])
    if data.get("error_report_path"):
        kwargs["error_report_path"] = Path(data["error_report_path"])
    if data.get("encoding"):
        kwargs["encoding"] = str(data["encoding"])
    return ReaderOptions(**kwargs)


def parse_writer_options(data: dict[str, Any]) -> WriterOptions:
    """Build WriterOptions from a plain dict (YAML ``writer:`` section)."""
    allowed = {f.name for f in fields(WriterOptions)}
    _check_keys("writer", data, allowed)
    kwargs: dict[str, Any] = {}
    if data.get("delimiter") is not None:
        kwargs["delimiter"] = str(data["delimiter"])
    if "has_header" in data:
        kwargs["has_header"] = _parse_bool(data["has_header"])
    if data.get("date_format"):
        kwargs["date_format"] = str(data["date_format"])
    if data.get("encoding"):
        kwargs["encoding"] = str(data["encoding"])
    return WriterOptions(**kwargs)


def load_config(
    path: Path | None = None,
    reader_overrides: dict[str, Any] | None = None,
    writer_overrides: dict[str, Any] | None = None,
) -> RowMapConfig:
    """
    Load reader/writer options from YAML, then apply overrides.

    A ``None`` path yields defaults plus overrides. Override values of
    ``None`` are ignored.
    """
    raw: dict[str, Any] = load_yaml_file(path) if path is not None else {}
    _check_keys("top-level", raw, {"reader", "writer"})

    reader_data = dict(raw.get("reader") or {})
    writer_data = dict(raw.get("writer") or {})
    if reader_overrides:
        reader_data.update({k: v for k, v in reader_overrides.items() if v is not None})
    if writer_overrides:
        writer_data.update({k: v for k, v in writer_overrides.items() if v is not None})

    return RowMapConfig(
        reader=parse_reader_options(reader_data),
        writer=parse_writer_options(writer_data),
    )
