"""
Culture-invariant text parsers shared by the validator and the coercion engine.

Every parser returns ``None`` when the text is not a value of its kind;
none of them raise. ZERO I/O.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from uuid import UUID

_INTEGER_RE = re.compile(r"[+-]?\d+")
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)
_UUID_RE = re.compile(
    r"[a-fA-F0-9]{8}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{4}-[a-fA-F0-9]{12}"
)

_TRUE_LITERALS = frozenset({"true", "1"})
_FALSE_LITERALS = frozenset({"false", "0"})

# Common numeric date shapes, tried in order before ISO free parsing.
_DATE_SHAPES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\d{4}-\d{1,2}-\d{1,2}"), "%Y-%m-%d"),
    (re.compile(r"\d{4}/\d{1,2}/\d{1,2}"), "%Y/%m/%d"),
    (re.compile(r"\d{8}"), "%Y%m%d"),
    (re.compile(r"\d{1,2}-\d{1,2}-\d{4}"), "%d-%m-%Y"),
    (re.compile(r"\d{1,2}/\d{1,2}/\d{4}"), "%m/%d/%Y"),
    (re.compile(r"\d{1,2}\.\d{1,2}\.\d{4}"), "%d.%m.%Y"),
)

_TIME_SHAPES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\d{1,2}:\d{2}"), "%H:%M"),
    (re.compile(r"\d{1,2}:\d{2}:\d{2}"), "%H:%M:%S"),
    (re.compile(r"\d{1,2}:\d{2}:\d{2}\.\d{1,6}"), "%H:%M:%S.%f"),
)

_DATETIME_SPLIT_RE = re.compile(r"(?P<date>[^T ]+)(?:[T ](?P<time>\S+))?")


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def parse_integer(value: str) -> int | None:
    s = value.strip()
    if not _INTEGER_RE.fullmatch(s):
        return None
    return int(s)


def parse_decimal(value: str) -> Decimal | None:
    s = value.strip()
    if not _DECIMAL_RE.fullmatch(s):
        return None
    try:
        return Decimal(s)
    except InvalidOperation:
        return None


def parse_float(value: str) -> float | None:
    s = value.strip()
    if not _FLOAT_RE.fullmatch(s):
        return None
    return float(s)


def parse_boolean(value: str) -> bool | None:
    """``true``/``false`` (any case) or the literals ``1``/``0``."""
    s = value.strip().lower()
    if s in _TRUE_LITERALS:
        return True
    if s in _FALSE_LITERALS:
        return False
    return None


def parse_uuid(value: str) -> UUID | None:
    """Canonical 8-4-4-4-12 hex form only."""
    s = value.strip()
    if not _UUID_RE.fullmatch(s):
        return None
    return UUID(s)


def parse_enum(value: str, enum_type: type[Enum]) -> Enum | None:
    """Member name (case-sensitive) or an integer equal to a member's value."""
    s = value.strip()
    member = enum_type.__members__.get(s)
    if member is not None:
        return member
    number = parse_integer(s)
    if number is None:
        return None
    try:
        return enum_type(number)
    except ValueError:
        return None


def _strptime(value: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(value, fmt)
    except ValueError:
        return None


def _parse_date_shape(value: str) -> date | None:
    for pattern, fmt in _DATE_SHAPES:
        if pattern.fullmatch(value):
            parsed = _strptime(value, fmt)
            if parsed is not None:
                return parsed.date()
    return None


def _parse_time_shape(value: str) -> time | None:
    for pattern, fmt in _TIME_SHAPES:
        if pattern.fullmatch(value):
            parsed = _strptime(value, fmt)
            if parsed is not None:
                return parsed.time()
    return None


def parse_date(value: str, date_format: str | None = None) -> date | None:
    """
    Parse a calendar date.

    With ``date_format`` the text must match it exactly (strptime syntax).
    Without, the common numeric shapes are tried, then ISO 8601. A value
    that carries a time of day is not a date.
    """
    s = value.strip()
    if not s:
        return None
    if date_format:
        parsed = _strptime(s, date_format)
        return parsed.date() if parsed is not None else None

    shaped = _parse_date_shape(s)
    if shaped is not None:
        return shaped
    try:
        return date.fromisoformat(s)
    except ValueError:
        return None


def parse_datetime(value: str, date_format: str | None = None) -> datetime | None:
    """
    Parse a date with an optional time of day.

    With ``date_format`` the text must match it exactly. Without, a date
    shape optionally followed by ``T`` or a space and ``HH:MM[:SS[.ffffff]]``
    is accepted, then ISO 8601 (offsets included).
    """
    s = value.strip()
    if not s:
        return None
    if date_format:
        return _strptime(s, date_format)

    match = _DATETIME_SPLIT_RE.fullmatch(s)
    if match is not None:
        day = _parse_date_shape(match.group("date"))
        if day is not None:
            time_text = match.group("time")
            if time_text is None:
                return datetime.combine(day, time.min)
            clock = _parse_time_shape(time_text)
            if clock is not None:
                return datetime.combine(day, clock)
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None
