"""
increase-models — unit tests for field declaration and the schema registry

File: tests/unit/core/test_fields.py

Purpose
- Validate FieldSpec derivation, declaration-time errors, and write-once
  registry behavior including concurrent first use.
"""

from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from increase_models.core.enums import ApiEnum
from increase_models.core.errors import SchemaDeclarationError
from increase_models.core.fields import (
    FieldSpec,
    Kind,
    field_type,
    list_of,
    map_of,
    optional,
    required,
    to_snake_case,
    union_of,
)
from increase_models.core.model import Model
from increase_models.core.registry import REGISTRY, ModelSchema, SchemaRegistry


class Color(ApiEnum):
    RED = "red"


@pytest.mark.parametrize(
    ("local", "wire"),
    [
        ("accountID", "account_id"),
        ("ACHTransfer", "ach_transfer"),
        ("createdAt", "created_at"),
        ("account_id", "account_id"),
        ("in_", "in"),
        ("line1", "line1"),
    ],
)
def test_to_snake_case(local: str, wire: str) -> None:
    assert to_snake_case(local) == wire


def test_field_type_kinds() -> None:
    assert field_type(str).kind is Kind.SCALAR
    assert field_type(object).scalar is object
    assert field_type(datetime).kind is Kind.DATETIME
    assert field_type(date).kind is Kind.DATE
    assert field_type(Color).kind is Kind.ENUM
    assert field_type("Widget").kind is Kind.MODEL
    assert list_of(Color).element == field_type(Color)
    assert map_of().element == field_type(object)
    assert [item.kind for item in union_of(int, str).variants] == [Kind.SCALAR, Kind.SCALAR]


def test_field_type_describe_nests() -> None:
    assert list_of(map_of(int)).describe() == "list[map[integer]]"
    assert union_of(int, Color).describe() == "integer | enum Color"


@pytest.mark.parametrize("spec", [bytes, 3, "not a name", dict])
def test_unsupported_type_specs_are_rejected(spec: object) -> None:
    with pytest.raises(SchemaDeclarationError):
        field_type(spec)


def test_union_requires_two_variants() -> None:
    with pytest.raises(SchemaDeclarationError, match="at least two"):
        union_of(int)


def test_model_fields_are_ordered_specs_with_derived_wire_names() -> None:
    class Transfer(Model):
        id = required(str)
        accountID = required(str)
        memo = optional(str, nullable=True, wire_name="description", doc="Free text.")

    specs = Transfer.model_fields()

    assert [spec.local_name for spec in specs] == ["id", "accountID", "memo"]
    assert [spec.wire_name for spec in specs] == ["id", "account_id", "description"]
    assert specs[2] == FieldSpec(
        local_name="memo",
        wire_name="description",
        required=False,
        nullable=True,
        field_type=field_type(str),
        doc="Free text.",
    )
    assert REGISTRY.schema_for(Transfer) is Transfer.__schema__


def test_inherited_fields_come_first() -> None:
    class Base(Model):
        id = required(str)

    class Child(Base):
        name = optional(str)

    assert [spec.local_name for spec in Child.model_fields()] == ["id", "name"]
    assert hasattr(Child, "with_id")
    assert hasattr(Child, "with_name")


def test_duplicate_wire_name_is_rejected_at_class_definition() -> None:
    with pytest.raises(SchemaDeclarationError, match="wire name 'account_id'"):

        class Broken(Model):
            account_id = required(str)
            accountId = required(str)


def test_field_name_colliding_with_model_api_is_rejected() -> None:
    with pytest.raises(SchemaDeclarationError, match="collides with model API"):

        class Broken(Model):
            to_wire = required(str)


def test_registry_is_idempotent_and_rejects_conflicts() -> None:
    class Sample(Model):
        id = required(str)

    registry = SchemaRegistry()
    specs = Sample.model_fields()

    first = registry.register(Sample, specs)
    second = registry.register(Sample, specs)

    assert first is second
    with pytest.raises(SchemaDeclarationError, match="conflicting re-registration"):
        registry.register(Sample, ())


def test_concurrent_registration_registers_once() -> None:
    class Shared(Model):
        id = required(str)

    registry = SchemaRegistry()
    specs = Shared.model_fields()
    results: list[ModelSchema] = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(registry.register(Shared, specs))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(item is results[0] for item in results)


def test_forward_reference_resolves_to_enclosing_scope() -> None:
    class Outer(Model):
        child = optional("Leaf")

    class Leaf(Model):
        value = required(int)

    resolved = REGISTRY.resolve(Outer.__schema__.by_local["child"].field_type, Outer)

    assert resolved is Leaf
    instance = Outer.from_raw({"child": {"value": 3}})
    assert isinstance(instance.child, Leaf)
    assert instance.child.value == 3


def test_unknown_forward_reference_fails_on_first_use() -> None:
    class Dangling(Model):
        child = optional("NoSuchModelAnywhere")

    with pytest.raises(SchemaDeclarationError, match="unknown model reference"):
        Dangling.from_raw({"child": {}})
