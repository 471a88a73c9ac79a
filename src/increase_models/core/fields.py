"""
increase-models — field metadata declaration.

File: src/increase_models/core/fields.py

Purpose
- Describe one declared field of a model type: local name, wire name,
  required/optional, nullability, and the kind its values are coerced to.

Declaration API
- ``required(type_)`` / ``optional(type_)`` are class-attribute descriptors.
- ``list_of``, ``map_of`` and ``union_of`` compose element kinds.
- Type specs accept ``ApiEnum`` subclasses, ``Model`` subclasses, model name
  strings (resolved on first use), ``datetime``, ``date``, JSON scalars, and
  ``object`` for any JSON value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final

from increase_models.core.enums import ApiEnum
from increase_models.core.errors import SchemaDeclarationError

if TYPE_CHECKING:
    from increase_models.core.model import Model

_ACRONYM_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_CASE_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"([a-z0-9])([A-Z])")
_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SCALAR_NAMES: Final[dict[type, str]] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    object: "any",
}


class Kind(StrEnum):
    SCALAR = "scalar"
    DATETIME = "datetime"
    DATE = "date"
    ENUM = "enum"
    MODEL = "model"
    LIST = "list"
    MAP = "map"
    UNION = "union"


@dataclass(frozen=True, slots=True)
class FieldType:
    """Kind descriptor; model targets may be forward-reference names."""

    kind: Kind
    scalar: type | None = None
    target: Any = None
    element: FieldType | None = None
    variants: tuple[FieldType, ...] = ()

    def describe(self) -> str:
        if self.kind is Kind.SCALAR:
            return _SCALAR_NAMES.get(self.scalar or object, "any")
        if self.kind is Kind.DATETIME:
            return "ISO-8601 datetime"
        if self.kind is Kind.DATE:
            return "ISO-8601 date"
        if self.kind is Kind.ENUM:
            return f"enum {self.target.__name__}"
        if self.kind is Kind.MODEL:
            name = self.target if isinstance(self.target, str) else self.target.__name__
            return f"model {name}"
        if self.kind is Kind.LIST:
            assert self.element is not None
            return f"list[{self.element.describe()}]"
        if self.kind is Kind.MAP:
            assert self.element is not None
            return f"map[{self.element.describe()}]"
        return " | ".join(variant.describe() for variant in self.variants)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Registered metadata for one field of one model type."""

    local_name: str
    wire_name: str
    required: bool
    nullable: bool
    field_type: FieldType
    doc: str | None = None

    @property
    def kind(self) -> Kind:
        return self.field_type.kind


class Field:
    """Class-attribute declaration; becomes a read-only accessor on instances."""

    __slots__ = ("_doc", "_field_type", "_name", "_nullable", "_required", "_wire_name")

    def __init__(
        self,
        type_: object,
        *,
        required: bool,
        wire_name: str | None = None,
        nullable: bool = False,
        doc: str | None = None,
    ) -> None:
        self._field_type = field_type(type_)
        self._required = required
        self._wire_name = wire_name
        self._nullable = nullable
        self._doc = doc
        self._name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self._name = name

    def __get__(self, instance: Model | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        assert self._name is not None
        return instance._read(self._name)

    def __set__(self, instance: Model, value: object) -> None:
        raise AttributeError(
            f"{type(instance).__name__}.{self._name} is read-only; "
            f"use with_{self._name}(...) to derive a modified copy"
        )

    def to_spec(self, local_name: str | None = None) -> FieldSpec:
        name = local_name or self._name
        if name is None:
            raise SchemaDeclarationError("field declared without a name")
        wire_name = self._wire_name if self._wire_name is not None else to_snake_case(name)
        if not wire_name:
            raise SchemaDeclarationError(f"{name}: wire name must not be empty")
        return FieldSpec(
            local_name=name,
            wire_name=wire_name,
            required=self._required,
            nullable=self._nullable,
            field_type=self._field_type,
            doc=self._doc,
        )


def required(
    type_: object,
    *,
    wire_name: str | None = None,
    nullable: bool = False,
    doc: str | None = None,
) -> Any:
    """Declare a field the API always sends; ``nullable`` allows an explicit null."""

    return Field(type_, required=True, wire_name=wire_name, nullable=nullable, doc=doc)


def optional(
    type_: object,
    *,
    wire_name: str | None = None,
    nullable: bool = False,
    doc: str | None = None,
) -> Any:
    """Declare a field that may be absent; absence and null stay distinct."""

    return Field(type_, required=False, wire_name=wire_name, nullable=nullable, doc=doc)


def list_of(type_: object) -> FieldType:
    return FieldType(kind=Kind.LIST, element=field_type(type_))


def map_of(type_: object = object) -> FieldType:
    return FieldType(kind=Kind.MAP, element=field_type(type_))


def union_of(*types: object) -> FieldType:
    if len(types) < 2:
        raise SchemaDeclarationError("union_of requires at least two variants")
    return FieldType(kind=Kind.UNION, variants=tuple(field_type(item) for item in types))


def field_type(type_: object) -> FieldType:
    """Normalize a declaration type spec into a :class:`FieldType`."""

    from increase_models.core.model import Model

    if isinstance(type_, FieldType):
        return type_
    if isinstance(type_, str):
        if not _IDENTIFIER.fullmatch(type_):
            raise SchemaDeclarationError(f"invalid model reference {type_!r}")
        return FieldType(kind=Kind.MODEL, target=type_)
    if not isinstance(type_, type):
        raise SchemaDeclarationError(f"unsupported field type spec {type_!r}")
    if issubclass(type_, ApiEnum):
        return FieldType(kind=Kind.ENUM, target=type_)
    if issubclass(type_, Model):
        return FieldType(kind=Kind.MODEL, target=type_)
    # datetime subclasses date, so it is checked first.
    if issubclass(type_, datetime):
        return FieldType(kind=Kind.DATETIME)
    if issubclass(type_, date):
        return FieldType(kind=Kind.DATE)
    if type_ in _SCALAR_NAMES:
        return FieldType(kind=Kind.SCALAR, scalar=type_)
    raise SchemaDeclarationError(f"unsupported field type {type_.__name__}")


def to_snake_case(name: str) -> str:
    """``accountID`` -> ``account_id``; ``ACHTransfer`` -> ``ach_transfer``."""

    stripped = name.rstrip("_")
    converted = _ACRONYM_BOUNDARY.sub(r"\1_\2", stripped)
    converted = _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", converted)
    return converted.lower()


__all__ = [
    "Field",
    "FieldSpec",
    "FieldType",
    "Kind",
    "field_type",
    "list_of",
    "map_of",
    "optional",
    "required",
    "to_snake_case",
    "union_of",
]
