"""Tests for the structured logging system (rowmap_kernel/logging_config.py)."""

import asyncio
import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from rowmap_kernel.exceptions import CellConversionError, MissingFileError
from rowmap_kernel.logging_config import (
    CONTEXT_FIELDS,
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from tests.ingestion.models import Gender


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def log_lines():
    """Configure logging into a buffer; return a callable giving the parsed lines."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    configure_logging(handler=handler, level=logging.DEBUG)
    return lambda: [json.loads(line) for line in stream.getvalue().splitlines() if line]


logger = get_logger("ingestion.test")


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    def test_event_line_shape(self, log_lines):
        logger.info("read_completed", extra={"record_count": 9, "issue_count": 1})

        (line,) = log_lines()
        assert line["message"] == "read_completed"
        assert line["level"] == "INFO"
        assert line["logger"] == "rowmap.ingestion.test"
        assert line["record_count"] == 9
        assert line["issue_count"] == 1
        assert "ts" in line

    def test_cell_values_encoded_as_written(self, log_lines):
        uid = uuid4()
        logger.info(
            "cell_values",
            extra={
                "price": Decimal("1E-7"),
                "birth_date": date(1815, 12, 10),
                "gender": Gender.FEMALE,
                "registration_id": uid,
            },
        )

        (line,) = log_lines()
        assert line["price"] == "0.0000001"
        assert line["birth_date"] == "1815-12-10"
        assert line["gender"] == "FEMALE"
        assert line["registration_id"] == str(uid)

    def test_conversion_error_fields(self, log_lines):
        try:
            raise CellConversionError("forty", "age", "int", row_number=2)
        except CellConversionError:
            logger.error("read_failed", exc_info=True)

        (line,) = log_lines()
        assert line["exc_type"] == "CellConversionError"
        assert line["exc_code"] == "CELL_CONVERSION"
        assert line["exc_message"] == "Cannot convert 'forty' to int."
        assert line["exc_field_name"] == "age"
        assert line["exc_row_number"] == 2
        assert "traceback" in line

    def test_plain_exception_has_no_code(self, log_lines):
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        (line,) = log_lines()
        assert line["exc_type"] == "ValueError"
        assert "exc_code" not in line

    def test_formatter_usable_without_configure(self):
        record = logging.LogRecord("rowmap.x", logging.WARNING, __file__, 1, "row_rejected", (), None)
        record.row_number = 4
        line = json.loads(StructuredFormatter().format(record))
        assert line["row_number"] == 4


# ---------------------------------------------------------------------------
# LogContext
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_fields_are_the_read_fields(self):
        assert CONTEXT_FIELDS == ("correlation_id", "source_file", "record_type")

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="actor_id"):
            LogContext.set(actor_id="someone")

    def test_set_ignores_none(self):
        LogContext.set(source_file="people.csv")
        LogContext.set(source_file=None, record_type="Person")
        assert LogContext.get_all() == {"source_file": "people.csv", "record_type": "Person"}

    def test_bind_restores_previous_values(self):
        LogContext.set(source_file="outer.csv")
        with LogContext.bind(source_file="inner.csv", record_type="Car"):
            assert LogContext.get_all() == {"source_file": "inner.csv", "record_type": "Car"}
        assert LogContext.get_all() == {"source_file": "outer.csv"}

    def test_bind_restores_on_error(self):
        with pytest.raises(MissingFileError):
            with LogContext.bind(source_file="gone.csv"):
                raise MissingFileError("gone.csv")
        assert LogContext.get_all() == {}

    def test_read_scope_fresh_correlation_id(self):
        with LogContext.read_scope("people.csv", "Person"):
            first = LogContext.get_all()
        with LogContext.read_scope("people.csv", "Person"):
            second = LogContext.get_all()

        assert first["source_file"] == "people.csv"
        assert first["record_type"] == "Person"
        assert first["correlation_id"] != second["correlation_id"]

    def test_context_merged_into_lines(self, log_lines):
        with LogContext.read_scope("cars.csv", "Car"):
            logger.info("read_started")
        logger.info("after")

        inside, after = log_lines()
        assert inside["source_file"] == "cars.csv"
        assert inside["record_type"] == "Car"
        assert not set(CONTEXT_FIELDS) & set(after)

    def test_concurrent_reads_keep_their_own_context(self, log_lines):
        async def _read(name: str) -> None:
            with LogContext.read_scope(name, "Person"):
                await asyncio.sleep(0)
                logger.info("read_completed")

        async def _both() -> None:
            await asyncio.gather(_read("a.csv"), _read("b.csv"))

        asyncio.run(_both())
        lines = log_lines()
        assert sorted(line["source_file"] for line in lines) == ["a.csv", "b.csv"]
        assert len({line["correlation_id"] for line in lines}) == 2


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_second_call_is_noop(self):
        configure_logging(handler=logging.StreamHandler(StringIO()))
        configure_logging(handler=logging.StreamHandler(StringIO()))
        assert len(logging.getLogger("rowmap").handlers) == 1

    def test_default_level_drops_debug(self):
        stream = StringIO()
        configure_logging(stream=stream)
        logger.debug("hidden")
        logger.info("shown")
        assert [json.loads(line)["message"] for line in stream.getvalue().splitlines()] == ["shown"]

    def test_reset_detaches_handler(self):
        configure_logging(handler=logging.StreamHandler(StringIO()))
        reset_logging()
        rowmap_logger = logging.getLogger("rowmap")
        assert rowmap_logger.handlers == []
        assert rowmap_logger.propagate is True
