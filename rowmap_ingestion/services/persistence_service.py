"""
Record persister: read a file into mapped entities and add the new ones.

The target type is a SQLAlchemy mapped dataclass (``rowmap_kernel.db.Base``).
A read record is new when no stored row has the same value, compared as
text, in every non-key column. Primary-key columns and a column named
``id`` never take part in the comparison. Records are added and flushed;
the caller owns the transaction (see ``rowmap_kernel.db.session_scope``).
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Sequence

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from rowmap_config.schema import ReaderOptions
from rowmap_kernel.exceptions import SessionNotSetError
from rowmap_kernel.logging_config import get_logger

from rowmap_ingestion.domain.types import MappingResult
from rowmap_ingestion.services.reader_service import RecordReader

logger = get_logger("ingestion.persistence_service")

DEFAULT_PRIMARY_KEY_NAME = "id"


def comparable_attributes(entity_type: type) -> tuple[str, ...]:
    """Mapped column attributes that identify a row's content."""
    mapper = inspect(entity_type)
    keys: list[str] = []
    for attr in mapper.column_attrs:
        if any(col.primary_key for col in attr.columns):
            continue
        if attr.key.lower() == DEFAULT_PRIMARY_KEY_NAME:
            continue
        keys.append(attr.key)
    return tuple(keys)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        # Numeric columns come back with the column's scale; 1.5 and 1.500000000 are one value.
        return str(value.normalize())
    return str(value)


def content_key(entity: Any, attributes: Sequence[str]) -> tuple[str | None, ...]:
    return tuple(_as_text(getattr(entity, name, None)) for name in attributes)


class RecordPersister:
    """Persist the records of a delimited file, skipping rows already stored."""

    def __init__(self, session: Session | None = None, reader: RecordReader | None = None):
        self._session = session
        self._reader = reader or RecordReader()

    def persist(
        self, path: Path | str, entity_type: type, options: ReaderOptions | None = None
    ) -> int:
        """
        Read ``path`` and add every record not already stored.

        Returns the number of entities added.

        Raises:
            SessionNotSetError: the persister was built without a session.
            Any error ``RecordReader.read`` raises.
        """
        session = self._require_session()
        result = self._reader.read(path, entity_type, options)
        return self._add_new(session, entity_type, result)

    async def persist_async(
        self, path: Path | str, entity_type: type, options: ReaderOptions | None = None
    ) -> int:
        session = self._require_session()
        result = await self._reader.read_async(path, entity_type, options)
        return self._add_new(session, entity_type, result)

    def _require_session(self) -> Session:
        if self._session is None:
            raise SessionNotSetError()
        return self._session

    def _add_new(self, session: Session, entity_type: type, result: MappingResult) -> int:
        existing = session.scalars(select(entity_type)).all()
        to_add = list(self._new_records(entity_type, result.records, existing))

        session.add_all(to_add)
        session.flush()
        logger.info(
            "records_persisted",
            extra={
                "entity_type": entity_type.__name__,
                "read_count": len(result.records),
                "added_count": len(to_add),
                "skipped_count": len(result.records) - len(to_add),
            },
        )
        return len(to_add)

    @staticmethod
    def _new_records(entity_type: type, records: Iterable[Any], existing: Sequence[Any]) -> Iterable[Any]:
        if not existing:
            yield from records
            return
        attributes = comparable_attributes(entity_type)
        stored = {content_key(row, attributes) for row in existing}
        for record in records:
            if content_key(record, attributes) not in stored:
                yield record
