"""
Module: rowmap_kernel.db.base
Responsibility: Declarative base for SQLAlchemy entities that double as
    rowmap target types.  Entities are mapped dataclasses, so the schema
    builder reads them exactly like a plain ``@dataclass``.
Architecture position: Kernel > DB.  Lowest-level import target for ORM
    entities.  MUST NOT import from rowmap_ingestion or rowmap_config.

Invariants enforced:
    - Every entity is a dataclass (``MappedAsDataclass``); primary keys are
      declared ``init=False`` so they never take part in column mapping.
    - type_annotation_map gives Decimal, UUID and datetime one consistent
      column type across all entities.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Guarantees:
        - process_bind_param: UUID -> str on INSERT/UPDATE.
        - process_result_value: str -> UUID on SELECT.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class Base(MappedAsDataclass, DeclarativeBase):
    """
    Declarative dataclass base for all persisted entities.

    Contract:
        Subclasses declare their own primary key with ``init=False`` and
        every other column with a dataclass default, so a partially
        populated row can still be constructed.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=False),
        PyUUID: UUIDString(),
    }
