"""Write-once registry of model schemas and forward-reference resolution."""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from increase_models.core.errors import SchemaDeclarationError
from increase_models.core.fields import FieldSpec, FieldType, Kind

if TYPE_CHECKING:
    from increase_models.core.model import Model


@dataclass(frozen=True, slots=True)
class ModelSchema:
    """Ordered, immutable field table for one model type."""

    name: str
    specs: tuple[FieldSpec, ...]
    by_local: Mapping[str, FieldSpec] = field(repr=False)
    by_wire: Mapping[str, FieldSpec] = field(repr=False)

    @classmethod
    def build(cls, name: str, specs: Sequence[FieldSpec]) -> ModelSchema:
        by_local: dict[str, FieldSpec] = {}
        by_wire: dict[str, FieldSpec] = {}
        for spec in specs:
            if spec.local_name in by_local:
                raise SchemaDeclarationError(f"{name}: duplicate field {spec.local_name!r}")
            if spec.wire_name in by_wire:
                other = by_wire[spec.wire_name].local_name
                raise SchemaDeclarationError(
                    f"{name}: wire name {spec.wire_name!r} used by both "
                    f"{other!r} and {spec.local_name!r}"
                )
            by_local[spec.local_name] = spec
            by_wire[spec.wire_name] = spec
        return cls(
            name=name,
            specs=tuple(specs),
            by_local=MappingProxyType(by_local),
            by_wire=MappingProxyType(by_wire),
        )

    @property
    def required_specs(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.specs if spec.required)


class SchemaRegistry:
    """Per-type schema table, populated once per model type and then read-only.

    Registration and forward-reference resolution both run under one lock, so
    concurrent first use of the same model type registers it exactly once.
    """

    __slots__ = ("_by_name", "_by_qualified", "_lock", "_resolved", "_schemas")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._schemas: dict[type[Model], ModelSchema] = {}
        self._by_qualified: dict[str, type[Model]] = {}
        self._by_name: dict[str, list[type[Model]]] = {}
        self._resolved: dict[tuple[type[Model], str], type[Model]] = {}

    def register(self, model_cls: type[Model], specs: Sequence[FieldSpec]) -> ModelSchema:
        schema = ModelSchema.build(model_cls.__name__, specs)
        with self._lock:
            existing = self._schemas.get(model_cls)
            if existing is not None:
                if existing.specs != schema.specs:
                    raise SchemaDeclarationError(
                        f"{model_cls.__name__}: conflicting re-registration of schema"
                    )
                return existing

            self._schemas[model_cls] = schema
            qualified = _qualified_name(model_cls)
            previous = self._by_qualified.get(qualified)
            self._by_qualified[qualified] = model_cls
            candidates = self._by_name.setdefault(model_cls.__name__, [])
            if previous is not None and previous in candidates:
                candidates.remove(previous)
            candidates.append(model_cls)
            return schema

    def schema_for(self, model_cls: type[Model]) -> ModelSchema:
        with self._lock:
            schema = self._schemas.get(model_cls)
        if schema is None:
            raise SchemaDeclarationError(f"{model_cls.__name__} is not a registered model")
        return schema

    def is_registered(self, model_cls: type[Model]) -> bool:
        with self._lock:
            return model_cls in self._schemas

    def lookup(self, name: str) -> type[Model]:
        """Return the registered model with ``name`` (qualified or unique simple name)."""

        with self._lock:
            return self._lookup_locked(name, owner=None)

    def resolve(self, field_type: FieldType, owner: type[Model]) -> type[Model]:
        """Return the concrete model class behind a MODEL field type."""

        if field_type.kind is not Kind.MODEL:
            raise SchemaDeclarationError(
                f"{owner.__name__}: {field_type.describe()} is not a model"
            )
        target = field_type.target
        if not isinstance(target, str):
            return target

        key = (owner, target)
        with self._lock:
            cached = self._resolved.get(key)
            if cached is not None:
                return cached
            resolved = self._lookup_locked(target, owner=owner)
            self._resolved[key] = resolved
            return resolved

    def _lookup_locked(self, name: str, *, owner: type[Model] | None) -> type[Model]:
        if name in self._by_qualified:
            return self._by_qualified[name]

        if owner is not None:
            # Innermost enclosing class first, then module level.
            parts = owner.__qualname__.split(".")
            scopes = [
                f"{owner.__module__}:{'.'.join(parts[:depth])}.{name}"
                for depth in range(len(parts), 0, -1)
            ]
            scopes.append(f"{owner.__module__}:{name}")
            for scope in scopes:
                if scope in self._by_qualified:
                    return self._by_qualified[scope]

        candidates = self._by_name.get(name, [])
        if len(candidates) == 1:
            return candidates[0]
        if not candidates:
            raise SchemaDeclarationError(f"unknown model reference {name!r}")
        choices = ", ".join(sorted(_qualified_name(item) for item in candidates))
        raise SchemaDeclarationError(f"ambiguous model reference {name!r}; candidates: {choices}")


def _qualified_name(model_cls: type) -> str:
    return f"{model_cls.__module__}:{model_cls.__qualname__}"


REGISTRY = SchemaRegistry()

__all__ = ["REGISTRY", "ModelSchema", "SchemaRegistry"]
