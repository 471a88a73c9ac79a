"""Per-kind value coercion (wire -> memory) and serialization (memory -> wire)."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, NoReturn

from increase_models.core.enums import coerce_enum, is_known
from increase_models.core.errors import TypeCoercionError
from increase_models.core.fields import FieldType, Kind

if TYPE_CHECKING:
    from increase_models.core.model import Model

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
# In-memory form of free-form JSON: arrays become tuples, objects read-only mappings.
FrozenJSON = JSONScalar | tuple["FrozenJSON", ...] | Mapping[str, "FrozenJSON"]


@dataclass(frozen=True, slots=True)
class BindingOptions:
    """Caller-selected coercion policy; defaults are forward compatible."""

    strict_enums: bool = False
    preserve_unknown_fields: bool = True


DEFAULT_OPTIONS = BindingOptions()


class WireDatetime(datetime):
    """A timezone-aware ``datetime`` that remembers the ISO-8601 text it was read from."""

    _wire_text: str

    @classmethod
    def parse(cls, text: str) -> WireDatetime:
        parsed = datetime.fromisoformat(text)
        instance = cls(
            parsed.year,
            parsed.month,
            parsed.day,
            parsed.hour,
            parsed.minute,
            parsed.second,
            parsed.microsecond,
            parsed.tzinfo,
            fold=parsed.fold,
        )
        instance._wire_text = text
        return instance

    @property
    def wire_text(self) -> str | None:
        # Results of datetime arithmetic or replace() carry no text.
        return getattr(self, "_wire_text", None)


class WireDate(date):
    """A calendar ``date`` that remembers the ISO-8601 text it was read from."""

    _wire_text: str

    @classmethod
    def parse(cls, text: str) -> WireDate:
        parsed = date.fromisoformat(text)
        instance = cls(parsed.year, parsed.month, parsed.day)
        instance._wire_text = text
        return instance

    @property
    def wire_text(self) -> str | None:
        return getattr(self, "_wire_text", None)


def _fail(path: str, field_type: FieldType, message: str) -> NoReturn:
    raise TypeCoercionError(path, field_type.describe(), message)


def _type_name(value: object) -> str:
    return "null" if value is None else type(value).__name__


def coerce_value(
    field_type: FieldType,
    value: object,
    path: str,
    *,
    owner: type[Model],
    options: BindingOptions = DEFAULT_OPTIONS,
) -> object:
    """Coerce one non-null raw value into the in-memory form of ``field_type``."""

    kind = field_type.kind
    if kind is Kind.SCALAR:
        return _as_scalar(field_type, value, path)
    if kind is Kind.DATETIME:
        return _as_datetime(field_type, value, path)
    if kind is Kind.DATE:
        return _as_date(field_type, value, path)
    if kind is Kind.ENUM:
        return coerce_enum(field_type.target, value, path, strict=options.strict_enums)
    if kind is Kind.MODEL:
        return _as_model(field_type, value, path, owner=owner, options=options)
    if kind is Kind.LIST:
        return _as_list(field_type, value, path, owner=owner, options=options)
    if kind is Kind.MAP:
        return _as_map(field_type, value, path, owner=owner, options=options)
    return _as_union(field_type, value, path, owner=owner, options=options)


def _as_scalar(field_type: FieldType, value: object, path: str) -> object:
    expected = field_type.scalar
    if expected is object:
        return _as_json_value(field_type, value, path)
    if expected is bool:
        if isinstance(value, bool):
            return value
    elif expected is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif expected is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if isinstance(value, float) and not math.isfinite(value):
                _fail(path, field_type, "must be finite")
            return value
    elif expected is str:
        if isinstance(value, str):
            # Enum members are str subclasses; store the plain string.
            return value.value if isinstance(value, Enum) else value
    _fail(path, field_type, f"expected {field_type.describe()}, got {_type_name(value)}")


def _as_json_value(field_type: FieldType, value: object, path: str) -> FrozenJSON:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            _fail(path, field_type, "float values must be finite")
        return value
    if isinstance(value, (list, tuple)):
        return tuple(
            _as_json_value(field_type, item, f"{path}[{index}]") for index, item in enumerate(value)
        )
    if isinstance(value, Mapping):
        parsed: dict[str, FrozenJSON] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                _fail(path, field_type, f"object keys must be strings, got {_type_name(key)}")
            parsed[key] = _as_json_value(field_type, item, f"{path}.{key}")
        return MappingProxyType(parsed)
    _fail(path, field_type, f"value is not JSON-serializable ({_type_name(value)})")


def _as_datetime(field_type: FieldType, value: object, path: str) -> datetime:
    parsed: datetime
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = WireDatetime.parse(value)
        except ValueError:
            _fail(path, field_type, f"invalid ISO-8601 datetime: {value!r}")
    else:
        _fail(path, field_type, f"expected datetime or ISO-8601 string, got {_type_name(value)}")

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        _fail(path, field_type, "datetime must be timezone-aware")
    return parsed


def _as_date(field_type: FieldType, value: object, path: str) -> date:
    if isinstance(value, datetime):
        _fail(path, field_type, "expected a calendar date, got datetime")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return WireDate.parse(value)
        except ValueError:
            _fail(path, field_type, f"invalid ISO-8601 date: {value!r}")
    _fail(path, field_type, f"expected date or ISO-8601 string, got {_type_name(value)}")


def _as_model(
    field_type: FieldType,
    value: object,
    path: str,
    *,
    owner: type[Model],
    options: BindingOptions,
) -> Model:
    from increase_models.core.registry import REGISTRY

    target = REGISTRY.resolve(field_type, owner)
    if isinstance(value, target):
        return value
    if isinstance(value, Mapping):
        return target.from_raw(value, options=options, _path=path)
    _fail(path, field_type, f"expected object for {target.__name__}, got {_type_name(value)}")


def _as_list(
    field_type: FieldType,
    value: object,
    path: str,
    *,
    owner: type[Model],
    options: BindingOptions,
) -> tuple[object, ...]:
    if not isinstance(value, (list, tuple)):
        _fail(path, field_type, f"expected array, got {_type_name(value)}")
    element = field_type.element
    assert element is not None
    return tuple(
        _coerce_element(element, item, f"{path}[{index}]", owner=owner, options=options)
        for index, item in enumerate(value)
    )


def _as_map(
    field_type: FieldType,
    value: object,
    path: str,
    *,
    owner: type[Model],
    options: BindingOptions,
) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        _fail(path, field_type, f"expected object, got {_type_name(value)}")
    element = field_type.element
    assert element is not None
    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            _fail(path, field_type, f"object keys must be strings, got {_type_name(key)}")
        parsed[key] = _coerce_element(element, item, f"{path}.{key}", owner=owner, options=options)
    return MappingProxyType(parsed)


def _as_union(
    field_type: FieldType,
    value: object,
    path: str,
    *,
    owner: type[Model],
    options: BindingOptions,
) -> object:
    variants = field_type.variants
    if isinstance(value, Mapping):
        variants = _rank_model_variants(variants, value, owner)
    # First variant that coerces wins.
    for variant in variants:
        try:
            return coerce_value(variant, value, path, owner=owner, options=options)
        except TypeCoercionError:
            continue
    _fail(path, field_type, f"expected {field_type.describe()}, got {_type_name(value)}")


def _rank_model_variants(
    variants: tuple[FieldType, ...],
    value: Mapping[object, object],
    owner: type[Model],
) -> tuple[FieldType, ...]:
    """Keep only the model variant whose schema best fits ``value``.

    Binding a mapping to a model never fails (missing fields are deferred and
    unknown keys become extras), so each model variant is scored instead:
    missing required keys first, then unknown keys, then enum fields holding a
    value the enum does not know. The last score lets a ``category`` style
    discriminator pick the variant. Ties keep declaration order, and the winner
    takes the position of the first model variant.
    """

    from increase_models.core.registry import REGISTRY

    scored: list[tuple[tuple[int, int, int], int, FieldType]] = []
    for index, variant in enumerate(variants):
        if variant.kind is not Kind.MODEL:
            continue
        schema = REGISTRY.resolve(variant, owner).__schema__
        missing = sum(
            1
            for spec in schema.specs
            if spec.required and not spec.nullable and spec.wire_name not in value
        )
        unknown = sum(1 for key in value if key not in schema.by_wire)
        mismatched = sum(
            1
            for spec in schema.specs
            if spec.field_type.kind is Kind.ENUM
            and isinstance(value.get(spec.wire_name), str)
            and not is_known(spec.field_type.target, value[spec.wire_name])
        )
        scored.append(((missing, unknown, mismatched), index, variant))
    if len(scored) < 2:
        return variants

    _, _, best = min(scored, key=lambda entry: (entry[0], entry[1]))
    first_model = scored[0][1]
    model_positions = {index for _, index, _ in scored}
    ranked: list[FieldType] = []
    for index, variant in enumerate(variants):
        if index == first_model:
            ranked.append(best)
        elif index not in model_positions:
            ranked.append(variant)
    return tuple(ranked)


def _coerce_element(
    element: FieldType,
    value: object,
    path: str,
    *,
    owner: type[Model],
    options: BindingOptions,
) -> object:
    if value is None:
        if element.kind is Kind.SCALAR and element.scalar is object:
            return None
        _fail(path, element, f"expected {element.describe()}, got null")
    return coerce_value(element, value, path, owner=owner, options=options)


def serialize_value(value: object, path: str) -> JSONValue:
    """Convert an in-memory value back to its JSON-compatible wire form."""

    from increase_models.core.model import Model

    if isinstance(value, Model):
        return value.to_wire()
    if isinstance(value, Enum):
        raw = value.value
        if not isinstance(raw, str):
            raise TypeCoercionError(path, "string enum", "enum value must be string")
        return raw
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (WireDatetime, WireDate)) and value.wire_text is not None:
        return value.wire_text
    if isinstance(value, datetime):
        return datetime_to_wire(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [serialize_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
    if isinstance(value, Mapping):
        out: dict[str, JSONValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeCoercionError(path, "object", "dict keys must be strings")
            out[key] = serialize_value(item, f"{path}.{key}")
        return out
    raise TypeCoercionError(
        path, "JSON value", f"cannot serialize value of type {_type_name(value)}"
    )


def datetime_to_wire(value: datetime) -> str:
    rendered = value.isoformat()
    if value.utcoffset() == timezone.utc.utcoffset(None):
        rendered = rendered.removesuffix("+00:00") + "Z"
    return rendered


__all__ = [
    "DEFAULT_OPTIONS",
    "BindingOptions",
    "FrozenJSON",
    "JSONScalar",
    "JSONValue",
    "WireDate",
    "WireDatetime",
    "coerce_value",
    "datetime_to_wire",
    "serialize_value",
]
