"""Tests for the schema descriptor (rowmap_ingestion/domain/schema.py)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from rowmap_kernel.exceptions import SchemaDefinitionError
from rowmap_ingestion.domain import TypeKind, column, schema_for
from rowmap_ingestion.domain.types import NO_DEFAULT
from tests.ingestion.models import Car, Contact, Employee, Gender, Person, PositionalPerson


@dataclass
class _Node:
    value: int = 0
    child: Optional[_Node] = None


@dataclass
class _Required:
    name: str
    internal: str = field(init=False, default="x")


@dataclass
class _IgnoredWithoutDefault:
    notes: str = column(ignore=True)
    name: str = ""


@dataclass
class _BadUnion:
    value: int | str = 0


@dataclass
class _Unresolvable:
    value: _NotDefinedAnywhere = 0  # noqa: F821


class TestSchemaFor:
    def test_field_order_and_kinds(self):
        schema = schema_for(Car)
        assert [d.name for d in schema.fields] == [
            "model",
            "price",
            "seats",
            "electric",
            "owner_gender",
            "registration_id",
            "registered_at",
        ]
        kinds = {d.name: d.kind for d in schema.fields}
        assert kinds["model"] is TypeKind.STRING
        assert kinds["price"] is TypeKind.DECIMAL
        assert kinds["seats"] is TypeKind.INTEGER
        assert kinds["electric"] is TypeKind.BOOLEAN
        assert kinds["owner_gender"] is TypeKind.ENUM
        assert kinds["registration_id"] is TypeKind.UUID
        assert kinds["registered_at"] is TypeKind.DATETIME

    def test_ignored_field_excluded(self):
        assert "tags" not in [d.name for d in schema_for(Car).fields]

    def test_nullable_from_optional(self):
        by_name = {d.name: d for d in schema_for(PositionalPerson).fields}
        assert by_name["birth_date"].nullable is True
        assert by_name["birth_date"].kind is TypeKind.DATE
        assert by_name["name"].nullable is False

    def test_alias_and_position_metadata(self):
        by_name = {d.name: d for d in schema_for(Person).fields}
        assert by_name["name"].column_alias == "First_Name"
        assert by_name["email"].column_alias is None
        assert by_name["email"].header_text == "email"
        assert schema_for(Person).is_positional is False
        assert schema_for(PositionalPerson).is_positional is True

    def test_declared_type_names(self):
        by_name = {d.name: d for d in schema_for(Car).fields}
        assert by_name["seats"].declared_type_name == "int"
        assert by_name["price"].declared_type_name == "decimal.Decimal"
        assert by_name["owner_gender"].declared_type_name == f"{Gender.__module__}.Gender"

    def test_composites(self):
        schema = schema_for(Contact)
        assert [c.name for c in schema.composites] == ["address", "company"]
        address = schema.composites[0]
        assert [d.name for d in address.nested_schema.fields] == ["street", "city"]

    def test_declared_defaults_kept(self):
        by_name = {d.name: d for d in schema_for(Car).fields}
        assert by_name["price"].make_default() == Decimal("0")
        assert by_name["registration_id"].make_default() is None

        (name,) = schema_for(_Required).fields
        assert name.default is NO_DEFAULT
        assert name.make_default() is None

    def test_cached(self):
        assert schema_for(Person) is schema_for(Person)

    def test_mapped_entity(self):
        schema = schema_for(Employee)
        assert [d.name for d in schema.fields] == ["name", "surname", "birth_date", "email"]
        by_name = {d.name: d for d in schema.fields}
        assert by_name["birth_date"].column_alias == "BirthDate"
        assert by_name["birth_date"].nullable is True
        assert by_name["birth_date"].python_type is date


class TestSchemaErrors:
    def test_not_a_dataclass(self):
        with pytest.raises(SchemaDefinitionError, match="not a dataclass"):
            schema_for(int)

    def test_recursive_composite(self):
        with pytest.raises(SchemaDefinitionError, match="cycle"):
            schema_for(_Node)

    def test_init_false_field_skipped(self):
        assert [d.name for d in schema_for(_Required).fields] == ["name"]

    def test_ignored_field_needs_default(self):
        with pytest.raises(SchemaDefinitionError) as exc_info:
            schema_for(_IgnoredWithoutDefault)
        assert exc_info.value.field_name == "notes"

    def test_non_optional_union(self):
        with pytest.raises(SchemaDefinitionError, match="Optional"):
            schema_for(_BadUnion)

    def test_unresolvable_annotation(self):
        with pytest.raises(SchemaDefinitionError, match="_NotDefinedAnywhere"):
            schema_for(_Unresolvable)
