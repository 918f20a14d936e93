"""Tests for the typed exception hierarchy (rowmap_kernel/exceptions.py)."""

import pytest

from rowmap_kernel.exceptions import (
    CellConversionError,
    ConversionError,
    FileWritingError,
    MissingContentError,
    MissingFileError,
    NoRecordsToWriteError,
    PersistenceError,
    RowMapError,
    SchemaDefinitionError,
    SchemaError,
    SessionNotSetError,
    SourceError,
    WriterError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc, parent",
        [
            (MissingFileError("a.csv"), SourceError),
            (MissingContentError("a.csv"), SourceError),
            (SchemaDefinitionError("Person", "not a dataclass type"), SchemaError),
            (CellConversionError("x", "age", "int"), ConversionError),
            (NoRecordsToWriteError(), WriterError),
            (FileWritingError("out.csv"), WriterError),
            (SessionNotSetError(), PersistenceError),
        ],
    )
    def test_every_error_is_a_rowmap_error(self, exc, parent):
        assert isinstance(exc, parent)
        assert isinstance(exc, RowMapError)

    def test_codes_are_distinct(self):
        classes = [
            MissingFileError,
            MissingContentError,
            SchemaDefinitionError,
            CellConversionError,
            NoRecordsToWriteError,
            FileWritingError,
            SessionNotSetError,
        ]
        codes = [c.code for c in classes]
        assert len(set(codes)) == len(codes)


class TestMessages:
    def test_missing_file(self):
        exc = MissingFileError("people.csv")
        assert exc.path == "people.csv"
        assert str(exc) == "The file 'people.csv' does not exist."

    def test_cell_conversion_message_and_fields(self):
        exc = CellConversionError("12-13-2020", "birth_date", "datetime.date")
        assert str(exc) == "Cannot convert '12-13-2020' to datetime.date."
        assert exc.value == "12-13-2020"
        assert exc.field_name == "birth_date"
        assert exc.row_number is None

    def test_at_row_returns_bound_copy(self):
        exc = CellConversionError("x", "seats", "int")
        bound = exc.at_row(7)
        assert bound.row_number == 7
        assert str(bound) == str(exc)
        assert exc.row_number is None

    def test_no_records(self):
        assert str(NoRecordsToWriteError()) == "The records collection cannot be null or empty."

    def test_file_writing(self):
        exc = FileWritingError("/nope/out.csv")
        assert str(exc) == "Could not write the CSV file to /nope/out.csv, please check the exception."

    def test_schema_definition_names_field(self):
        exc = SchemaDefinitionError("Person", "unsupported type list", "tags")
        assert exc.field_name == "tags"
        assert "Person.tags" in str(exc)
