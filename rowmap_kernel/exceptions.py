"""
Typed exception hierarchy for the rowmap packages.

Every error has a typed class (catch by type, not message), a ``code``
class attribute (machine-readable) and structured attributes carrying the
context that produced it. Per-cell mapping problems are NOT exceptions:
they are ``ValidationIssue`` values collected on the read result.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    RowMapError (base)
    |
    +-- SourceError
    |   +-- MissingFileError
    |   +-- MissingContentError
    |
    +-- SchemaError
    |   +-- SchemaDefinitionError
    |
    +-- ConversionError
    |   +-- CellConversionError
    |
    +-- WriterError
    |   +-- NoRecordsToWriteError
    |   +-- FileWritingError
    |
    +-- PersistenceError
        +-- SessionNotSetError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                     | When Raised
-------------|--------------------------|--------------------------------------
Source       | MISSING_FILE             | Path is empty or the file is absent
             | MISSING_CONTENT          | File exists but has no lines
-------------|--------------------------|--------------------------------------
Schema       | SCHEMA_DEFINITION        | Target type cannot be described
-------------|--------------------------|--------------------------------------
Conversion   | CELL_CONVERSION          | No converter accepts a cell (hard
             |                          | failure outside validation mode)
-------------|--------------------------|--------------------------------------
Writer       | NO_RECORDS_TO_WRITE      | Record sequence is empty
             | FILE_WRITING             | OS-level failure writing the file
-------------|--------------------------|--------------------------------------
Persistence  | SESSION_NOT_SET          | Persist called without a session

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        result = reader.read(path, Person)
    except MissingFileError as e:
        log.warning("input missing", extra={"path": e.path})
    except CellConversionError as e:
        report(row=e.row_number, field=e.field_name, value=e.value)
"""


class RowMapError(Exception):
    """
    Base exception for all rowmap errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "ROWMAP_ERROR"


# Source (input) exceptions


class SourceError(RowMapError):
    """Base exception for input source errors."""

    code: str = "SOURCE_ERROR"


class MissingFileError(SourceError):
    """The input path is empty or does not point to an existing file."""

    code: str = "MISSING_FILE"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"The file '{path}' does not exist.")


class MissingContentError(SourceError):
    """The input file exists but contains no lines."""

    code: str = "MISSING_CONTENT"

    def __init__(self, path: str, delimiter: str | None = None):
        self.path = path
        self.delimiter = delimiter
        super().__init__(f"The file '{path}' has no content to read.")


# Schema exceptions


class SchemaError(RowMapError):
    """Base exception for schema description errors."""

    code: str = "SCHEMA_ERROR"


class SchemaDefinitionError(SchemaError):
    """A target type (or one of its fields) cannot be turned into a schema."""

    code: str = "SCHEMA_DEFINITION"

    def __init__(self, type_name: str, reason: str, field_name: str | None = None):
        self.type_name = type_name
        self.field_name = field_name
        self.reason = reason
        where = f"{type_name}.{field_name}" if field_name else type_name
        super().__init__(f"Cannot build a schema for {where}: {reason}")


# Conversion exceptions


class ConversionError(RowMapError):
    """Base exception for cell conversion errors."""

    code: str = "CONVERSION_ERROR"


class CellConversionError(ConversionError):
    """No converter could turn a raw cell into the field's declared type."""

    code: str = "CELL_CONVERSION"

    def __init__(
        self,
        value: str,
        field_name: str,
        declared_type: str,
        row_number: int | None = None,
    ):
        self.value = value
        self.field_name = field_name
        self.declared_type = declared_type
        self.row_number = row_number
        super().__init__(f"Cannot convert '{value}' to {declared_type}.")

    def at_row(self, row_number: int) -> "CellConversionError":
        """Return a copy of this error bound to a data-row number."""
        return CellConversionError(
            self.value, self.field_name, self.declared_type, row_number=row_number
        )


# Writer exceptions


class WriterError(RowMapError):
    """Base exception for output file errors."""

    code: str = "WRITER_ERROR"


class NoRecordsToWriteError(WriterError):
    """The record sequence handed to a writer is empty."""

    code: str = "NO_RECORDS_TO_WRITE"

    def __init__(self) -> None:
        super().__init__("The records collection cannot be null or empty.")


class FileWritingError(WriterError):
    """The output file could not be written."""

    code: str = "FILE_WRITING"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Could not write the CSV file to {path}, please check the exception.")


# Persistence exceptions


class PersistenceError(RowMapError):
    """Base exception for persistence collaborator errors."""

    code: str = "PERSISTENCE_ERROR"


class SessionNotSetError(PersistenceError):
    """Persist was called before a database session was supplied."""

    code: str = "SESSION_NOT_SET"

    def __init__(self) -> None:
        super().__init__("Session is not set. Pass a SQLAlchemy Session to the persister.")
