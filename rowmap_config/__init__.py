"""
rowmap_config -- reader/writer options and their YAML loader.

Options are immutable values handed to each read or write call.
"""

from rowmap_config.loader import load_config, parse_reader_options, parse_writer_options
from rowmap_config.schema import (
    ReaderOptions,
    RowMapConfig,
    WriterOptions,
    default_delimiter,
    default_error_folder,
)

__all__ = [
    "ReaderOptions",
    "RowMapConfig",
    "WriterOptions",
    "default_delimiter",
    "default_error_folder",
    "load_config",
    "parse_reader_options",
    "parse_writer_options",
]
