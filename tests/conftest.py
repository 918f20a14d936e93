"""
Pytest fixtures for the rowmap test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- captured_logs: rowmap log records as parsed JSON dicts
- write_lines: helper that writes a delimited text file into tmp_path
- people_lines: header plus three Person rows
- SQLite in-memory sessions for persistence tests

Sample target types live in tests/ingestion/models.py.
"""

import json
import logging
from io import StringIO
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from rowmap_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from rowmap_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from rowmap_ingestion.domain import clear_schema_cache


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture(autouse=True)
def _clear_schemas():
    clear_schema_cache()
    yield
    clear_schema_cache()


@pytest.fixture
def captured_logs():
    """
    Capture rowmap logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, people_csv):
            RecordReader().read(people_csv, Person)
            logs = captured_logs()
            assert any(r["message"] == "read_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("rowmap")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# File helpers
# =============================================================================


@pytest.fixture
def write_lines(tmp_path: Path):
    """Factory fixture: write ``lines`` to ``tmp_path/name`` and return the path."""

    def _write(name: str, lines: list[str], encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding=encoding)
        return path

    return _write


@pytest.fixture
def people_lines() -> list[str]:
    """Header plus three well-formed Person rows."""
    return [
        "First_Name,Last_Name,Date_Of_Birth,Email",
        "Ada,Lovelace,1815-12-10,ada@example.org",
        "Alan,Turing,1912-06-23,alan@example.org",
        "Grace,Hopper,1906-12-09,grace@example.org",
    ]


@pytest.fixture
def error_folder(tmp_path: Path) -> Path:
    return tmp_path / "Errors"


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """SQLite in-memory session with all tables created."""
    import tests.ingestion.models  # noqa: F401  (registers mapped entities)

    init_engine_from_url("sqlite:///:memory:")
    create_tables()
    s = get_session()
    try:
        yield s
    finally:
        s.close()
        drop_tables()
        reset_engine()
