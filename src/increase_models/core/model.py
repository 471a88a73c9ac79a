"""
increase-models — model base class.

File: src/increase_models/core/model.py

Purpose
- Schema-declared, immutable API models with lazy required-field validation.

Lifecycle
- Empty -> populating (keyword construction, ``from_raw``, ``with_*`` copies)
  -> finalized on first attribute read, ``to_wire``, or ``ensure_complete``.
- Finalization raises one error naming every missing required field,
  including those of nested models.
- ``with_field`` never mutates; it returns a shallow copy sharing every
  untouched value with the original.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Final, TypeVar

import structlog

from increase_models.core.coercion import (
    DEFAULT_OPTIONS,
    BindingOptions,
    FrozenJSON,
    JSONValue,
    coerce_value,
    serialize_value,
)
from increase_models.core.errors import (
    MissingRequiredFieldsError,
    SchemaDeclarationError,
    TypeCoercionError,
)
from increase_models.core.fields import Field, FieldSpec, FieldType, Kind
from increase_models.core.registry import REGISTRY, ModelSchema

TModel = TypeVar("TModel", bound="Model")

_LOGGER = structlog.get_logger(__name__)

_ANY_JSON: Final[FieldType] = FieldType(kind=Kind.SCALAR, scalar=object)
_ENGINE_BASES: set[type] = set()


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<unset>"


_UNSET: Final = _Unset()


class Model:
    """Base class for every response model and request-params object."""

    __slots__ = ("_complete", "_extra", "_options", "_values")
    __schema__: ClassVar[ModelSchema]

    def __init_subclass__(cls, *, engine_base: bool = False, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if engine_base:
            _ENGINE_BASES.add(cls)
            cls.__schema__ = ModelSchema.build(cls.__name__, ())
            return

        reserved = {
            name
            for base in cls.__mro__
            if base in _ENGINE_BASES or base is Model
            for name in vars(base)
            if not name.startswith("_")
        }
        declared: dict[str, FieldSpec] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Field):
                    if name in reserved:
                        raise SchemaDeclarationError(
                            f"{cls.__name__}.{name}: field name collides with model API"
                        )
                    declared[name] = attr.to_spec(name)

        cls.__schema__ = REGISTRY.register(cls, tuple(declared.values()))
        for spec in cls.__schema__.specs:
            setter_name = f"with_{spec.local_name}"
            if any(setter_name in vars(klass) for klass in cls.__mro__):
                continue
            setattr(cls, setter_name, _make_setter(cls, spec))

    def __init__(self, **values: object) -> None:
        _init_storage(self, DEFAULT_OPTIONS)
        schema = type(self).__schema__
        for name, value in values.items():
            spec = schema.by_local.get(name)
            if spec is None:
                raise TypeError(f"{type(self).__name__}() got an unexpected field {name!r}")
            coerced = _coerce_field(
                type(self), spec, value, _field_path(type(self), spec), self._options
            )
            if coerced is not _UNSET:
                self._values[name] = coerced

    # -- construction -------------------------------------------------------

    @classmethod
    def from_raw(
        cls: type[TModel],
        raw: Mapping[str, object],
        *,
        options: BindingOptions | None = None,
        _path: str | None = None,
    ) -> TModel:
        """Build an instance from a decoded wire mapping keyed by wire names."""

        path = _path or cls.__name__
        if not isinstance(raw, Mapping):
            raise TypeCoercionError(path, "object", f"expected object, got {type(raw).__name__}")
        resolved_options = options or DEFAULT_OPTIONS

        instance = cls.__new__(cls)
        _init_storage(instance, resolved_options)
        schema = cls.__schema__
        for spec in schema.specs:
            if spec.wire_name not in raw:
                continue
            coerced = _coerce_field(
                cls, spec, raw[spec.wire_name], f"{path}.{spec.local_name}", resolved_options
            )
            if coerced is not _UNSET:
                instance._values[spec.local_name] = coerced

        unknown: list[str] = []
        for key in raw:
            if not isinstance(key, str):
                raise TypeCoercionError(
                    path, "object", f"object keys must be strings, got {type(key).__name__}"
                )
            if key not in schema.by_wire:
                unknown.append(key)
        if unknown:
            _LOGGER.debug(
                "model.unknown_fields",
                model=cls.__name__,
                path=path,
                fields=unknown,
                preserved=resolved_options.preserve_unknown_fields,
            )
            if resolved_options.preserve_unknown_fields:
                for key in unknown:
                    instance._extra[key] = coerce_value(
                        _ANY_JSON, raw[key], f"{path}.{key}", owner=cls, options=resolved_options
                    )
        return instance

    @classmethod
    def from_json(
        cls: type[TModel], text: str | bytes, *, options: BindingOptions | None = None
    ) -> TModel:
        if not isinstance(text, (str, bytes)):
            raise TypeCoercionError(
                cls.__name__, "JSON", f"expected JSON string, got {type(text).__name__}"
            )
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TypeCoercionError(cls.__name__, "JSON", f"invalid JSON: {exc}") from exc
        return cls.from_raw(parsed, options=options)

    @classmethod
    def model_fields(cls) -> tuple[FieldSpec, ...]:
        return cls.__schema__.specs

    # -- finalization -------------------------------------------------------

    def ensure_complete(self: TModel) -> TModel:
        """Finalize: raise if any required, non-nullable field is absent."""

        if self._complete:
            return self
        missing = self._collect_missing("", "")
        if missing:
            raise MissingRequiredFieldsError(
                type(self).__name__,
                [wire for wire, _ in missing],
                [local for _, local in missing],
            )
        object.__setattr__(self, "_complete", True)
        return self

    validate = ensure_complete

    def missing_fields(self) -> tuple[str, ...]:
        """Wire paths of missing required fields, without raising."""

        return tuple(wire for wire, _ in self._collect_missing("", ""))

    def is_set(self, name: str) -> bool:
        """True when ``name`` holds a value, including an explicit ``None``."""

        _spec(type(self), name)
        return name in self._values

    @property
    def extra_fields(self) -> Mapping[str, FrozenJSON]:
        """Wire keys received that this model does not declare (read-only)."""

        return MappingProxyType(self._extra)

    def _read(self, name: str) -> object:
        self.ensure_complete()
        return self._values.get(name)

    def _collect_missing(self, wire_prefix: str, local_prefix: str) -> list[tuple[str, str]]:
        missing: list[tuple[str, str]] = []
        for spec in type(self).__schema__.specs:
            wire_path = f"{wire_prefix}{spec.wire_name}"
            local_path = f"{local_prefix}{spec.local_name}"
            if spec.local_name not in self._values:
                if spec.required and not spec.nullable:
                    missing.append((wire_path, local_path))
                continue
            missing.extend(_nested_missing(self._values[spec.local_name], wire_path, local_path))
        return missing

    # -- mutation -----------------------------------------------------------

    def with_field(self: TModel, name: str, value: object) -> TModel:
        """Return a copy with ``name`` replaced; ``self`` is left untouched."""

        cls = type(self)
        spec = _spec(cls, name)
        coerced = _coerce_field(cls, spec, value, _field_path(cls, spec), self._options)
        clone = self._clone()
        if coerced is _UNSET:
            clone._values.pop(name, None)
        else:
            clone._values[name] = coerced
        return clone

    def without_field(self: TModel, name: str) -> TModel:
        """Return a copy with ``name`` unset (absent, not null)."""

        _spec(type(self), name)
        clone = self._clone()
        clone._values.pop(name, None)
        return clone

    def _clone(self: TModel) -> TModel:
        clone = type(self).__new__(type(self))
        object.__setattr__(clone, "_values", dict(self._values))
        object.__setattr__(clone, "_extra", dict(self._extra))
        object.__setattr__(clone, "_options", self._options)
        object.__setattr__(clone, "_complete", False)
        return clone

    # -- serialization ------------------------------------------------------

    def to_wire(self) -> dict[str, JSONValue]:
        """Finalize, then emit an ordered wire mapping keyed by wire names."""

        self.ensure_complete()
        cls = type(self)
        out: dict[str, JSONValue] = {}
        for spec in cls.__schema__.specs:
            if spec.local_name in self._values:
                out[spec.wire_name] = serialize_value(
                    self._values[spec.local_name], _field_path(cls, spec)
                )
            elif spec.required and spec.nullable:
                out[spec.wire_name] = None
        for key, value in self._extra.items():
            out[key] = serialize_value(value, f"{cls.__name__}.{key}")
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), separators=(",", ":"), ensure_ascii=False)

    # -- object protocol ----------------------------------------------------

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, Model)
        return self._values == other._values and self._extra == other._extra

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [
            f"{spec.local_name}={self._values[spec.local_name]!r}"
            for spec in type(self).__schema__.specs
            if spec.local_name in self._values
        ]
        return f"{type(self).__name__}({', '.join(parts)})"


_ENGINE_BASES.add(Model)
Model.__schema__ = ModelSchema.build("Model", ())


def _init_storage(instance: Model, options: BindingOptions) -> None:
    object.__setattr__(instance, "_values", {})
    object.__setattr__(instance, "_extra", {})
    object.__setattr__(instance, "_options", options)
    object.__setattr__(instance, "_complete", False)


def _spec(cls: type[Model], name: str) -> FieldSpec:
    spec = cls.__schema__.by_local.get(name)
    if spec is None:
        raise AttributeError(f"{cls.__name__} has no field {name!r}")
    return spec


def _field_path(cls: type[Model], spec: FieldSpec) -> str:
    return f"{cls.__name__}.{spec.local_name}"


def _coerce_field(
    cls: type[Model],
    spec: FieldSpec,
    value: object,
    path: str,
    options: BindingOptions,
) -> object:
    if value is None:
        if spec.nullable:
            return None
        if not spec.required:
            # Optional and not nullable: null means "not provided".
            _LOGGER.debug("model.null_dropped", model=cls.__name__, path=path)
            return _UNSET
        raise TypeCoercionError(
            path, spec.field_type.describe(), f"expected {spec.field_type.describe()}, got null"
        )
    return coerce_value(spec.field_type, value, path, owner=cls, options=options)


def _nested_missing(value: object, wire_path: str, local_path: str) -> list[tuple[str, str]]:
    if isinstance(value, Model):
        return value._collect_missing(f"{wire_path}.", f"{local_path}.")
    if isinstance(value, tuple):
        found: list[tuple[str, str]] = []
        for index, item in enumerate(value):
            found.extend(_nested_missing(item, f"{wire_path}[{index}]", f"{local_path}[{index}]"))
        return found
    if isinstance(value, Mapping):
        found = []
        for key, item in value.items():
            found.extend(_nested_missing(item, f"{wire_path}.{key}", f"{local_path}.{key}"))
        return found
    return []


def _make_setter(cls: type[Model], spec: FieldSpec) -> Any:
    name = spec.local_name

    def setter(self: Model, value: object) -> Model:
        return self.with_field(name, value)

    setter.__name__ = f"with_{name}"
    setter.__qualname__ = f"{cls.__qualname__}.with_{name}"
    setter.__doc__ = spec.doc or f"Return a copy with ``{name}`` replaced."
    return setter


__all__ = ["BindingOptions", "Model"]
