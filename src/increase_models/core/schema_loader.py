"""Build registered model types from declarative YAML schema documents.

A document looks like::

    enums:
      TransferStatus: [pending, complete]
    models:
      Transfer:
        doc: A transfer.
        fields:
          id: {type: string, required: true}
          status: {type: "enum:TransferStatus", required: true}
          memo: {type: string, nullable: true}
      TransferListParams:
        kind: params
        fields:
          cursor: string
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Final, TypeAlias, cast

import yaml

from increase_models.core.enums import ApiEnum
from increase_models.core.errors import SchemaDeclarationError
from increase_models.core.fields import (
    Field,
    FieldType,
    field_type,
    list_of,
    map_of,
    union_of,
)
from increase_models.core.model import Model
from increase_models.core.params import Params

PathLike: TypeAlias = str | os.PathLike[str]

DEFAULT_MODULE: Final[str] = "increase_models.generated"

_ALLOWED_DOCUMENT_KEYS: Final[frozenset[str]] = frozenset({"enums", "models"})
_ALLOWED_MODEL_KEYS: Final[frozenset[str]] = frozenset({"kind", "doc", "fields"})
_ALLOWED_FIELD_KEYS: Final[frozenset[str]] = frozenset(
    {"type", "required", "nullable", "wire_name", "doc"}
)
_MODEL_BASES: Final[dict[str, type[Model]]] = {"model": Model, "params": Params}
_PRIMITIVES: Final[dict[str, type]] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "any": object,
}
_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MEMBER_NAME_INVALID: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_]+")


def load_schema_file(path: PathLike, *, module: str | None = None) -> dict[str, type]:
    """Load a YAML schema document from ``path``; see :func:`load_schema_document`."""

    schema_path = Path(path)
    try:
        with schema_path.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except OSError as exc:
        raise SchemaDeclarationError(f"{schema_path}: cannot read schema ({exc})") from exc
    except yaml.YAMLError as exc:
        raise SchemaDeclarationError(f"{schema_path}: invalid YAML ({exc})") from exc

    if not isinstance(loaded, Mapping):
        raise SchemaDeclarationError(
            f"{schema_path}: expected top-level YAML mapping, got {type(loaded).__name__}"
        )
    try:
        return load_schema_document(loaded, module=module)
    except SchemaDeclarationError as exc:
        raise SchemaDeclarationError(f"{schema_path}: {exc}") from exc


def load_schema_document(
    document: Mapping[str, object], *, module: str | None = None
) -> dict[str, type]:
    """Create enum and model types for ``document``; returns them keyed by name.

    Model classes are registered as a side effect of creation, so string
    references between models of the same document resolve on first use.
    """

    parsed = _as_string_key_mapping(document, "schema")
    unknown = sorted(set(parsed) - _ALLOWED_DOCUMENT_KEYS)
    if unknown:
        raise SchemaDeclarationError(f"schema: unexpected keys: {unknown}")
    module_name = module or DEFAULT_MODULE

    enums: dict[str, type[ApiEnum]] = {}
    for name, members in _as_string_key_mapping(parsed.get("enums", {}), "enums").items():
        location = f"enums.{name}"
        _check_identifier(name, location)
        enums[name] = _build_enum(name, members, location, module_name)

    created: dict[str, type] = dict(enums)
    for name, body in _as_string_key_mapping(parsed.get("models", {}), "models").items():
        location = f"models.{name}"
        _check_identifier(name, location)
        if name in created:
            raise SchemaDeclarationError(f"{location}: name already used by an enum")
        created[name] = _build_model(name, body, location, module_name, enums)
    return created


def parse_type(expression: str, enums: Mapping[str, type[ApiEnum]], *, path: str) -> FieldType:
    """Translate a type expression such as ``list[enum:Status]`` into a FieldType."""

    text = expression.strip()
    if not text:
        raise SchemaDeclarationError(f"{path}: empty type expression")

    variants = _split_union(text, path)
    if len(variants) > 1:
        return union_of(*(parse_type(item, enums, path=path) for item in variants))

    for prefix, builder in (("list[", list_of), ("map[", map_of)):
        if text.startswith(prefix):
            if not text.endswith("]"):
                raise SchemaDeclarationError(f"{path}: unbalanced brackets in {text!r}")
            return builder(parse_type(text[len(prefix) : -1], enums, path=path))

    if text in _PRIMITIVES:
        return field_type(_PRIMITIVES[text])
    if text == "datetime":
        return field_type(datetime)
    if text == "date":
        return field_type(date)
    if text.startswith("enum:"):
        enum_name = text.removeprefix("enum:").strip()
        if enum_name not in enums:
            raise SchemaDeclarationError(f"{path}: unknown enum {enum_name!r}")
        return field_type(enums[enum_name])
    if _IDENTIFIER.fullmatch(text):
        return field_type(text)
    raise SchemaDeclarationError(f"{path}: invalid type expression {text!r}")


def _split_union(text: str, path: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth < 0:
                raise SchemaDeclarationError(f"{path}: unbalanced brackets in {text!r}")
        elif char == "|" and depth == 0:
            parts.append(text[start:index].strip())
            start = index + 1
    if depth != 0:
        raise SchemaDeclarationError(f"{path}: unbalanced brackets in {text!r}")
    parts.append(text[start:].strip())
    if any(not part for part in parts):
        raise SchemaDeclarationError(f"{path}: empty union variant in {text!r}")
    return parts


def _build_enum(name: str, members: object, location: str, module: str) -> type[ApiEnum]:
    if not isinstance(members, list) or not members:
        raise SchemaDeclarationError(f"{location}: expected non-empty list of string values")
    pairs: list[tuple[str, str]] = []
    seen: set[str] = set()
    for index, value in enumerate(members):
        if not isinstance(value, str) or not value:
            raise SchemaDeclarationError(f"{location}[{index}]: expected non-empty string")
        if value in seen:
            raise SchemaDeclarationError(f"{location}: duplicate value {value!r}")
        seen.add(value)
        pairs.append((_member_name(value), value))
    member_names = [member for member, _ in pairs]
    if len(set(member_names)) != len(member_names):
        raise SchemaDeclarationError(f"{location}: values collide after name normalization")
    return cast("type[ApiEnum]", ApiEnum(name, pairs, module=module, qualname=name))


def _member_name(value: str) -> str:
    normalized = _MEMBER_NAME_INVALID.sub("_", value).strip("_").upper()
    if not normalized or normalized[0].isdigit():
        normalized = f"V_{normalized}"
    return normalized


def _build_model(
    name: str,
    body: object,
    location: str,
    module: str,
    enums: Mapping[str, type[ApiEnum]],
) -> type[Model]:
    parsed = _as_string_key_mapping(body, location)
    unknown = sorted(set(parsed) - _ALLOWED_MODEL_KEYS)
    if unknown:
        raise SchemaDeclarationError(f"{location}: unexpected keys: {unknown}")

    kind = parsed.get("kind", "model")
    if kind not in _MODEL_BASES:
        allowed = ", ".join(sorted(_MODEL_BASES))
        raise SchemaDeclarationError(f"{location}.kind: expected one of: {allowed}")
    doc = parsed.get("doc")
    if doc is not None and not isinstance(doc, str):
        raise SchemaDeclarationError(f"{location}.doc: expected string")

    namespace: dict[str, object] = {"__module__": module, "__qualname__": name, "__doc__": doc}
    declared = _as_string_key_mapping(parsed.get("fields", {}), f"{location}.fields")
    for field_name, entry in declared.items():
        field_location = f"{location}.fields.{field_name}"
        _check_identifier(field_name, field_location)
        namespace[field_name] = _build_field(entry, field_location, enums)

    base = _MODEL_BASES[cast("str", kind)]
    try:
        return cast("type[Model]", type(name, (base,), namespace))
    except SchemaDeclarationError as exc:
        raise SchemaDeclarationError(f"{location}: {exc}") from exc


def _build_field(entry: object, location: str, enums: Mapping[str, type[ApiEnum]]) -> Field:
    if isinstance(entry, str):
        return Field(parse_type(entry, enums, path=location), required=False)

    parsed = _as_string_key_mapping(entry, location)
    unknown = sorted(set(parsed) - _ALLOWED_FIELD_KEYS)
    if unknown:
        raise SchemaDeclarationError(f"{location}: unexpected keys: {unknown}")
    if "type" not in parsed or not isinstance(parsed["type"], str):
        raise SchemaDeclarationError(f"{location}.type: expected type expression string")

    flags: dict[str, bool] = {}
    for flag in ("required", "nullable"):
        value = parsed.get(flag, False)
        if not isinstance(value, bool):
            raise SchemaDeclarationError(f"{location}.{flag}: expected bool")
        flags[flag] = value
    for text_key in ("wire_name", "doc"):
        value = parsed.get(text_key)
        if value is not None and (not isinstance(value, str) or not value):
            raise SchemaDeclarationError(f"{location}.{text_key}: expected non-empty string")

    return Field(
        parse_type(parsed["type"], enums, path=f"{location}.type"),
        required=flags["required"],
        nullable=flags["nullable"],
        wire_name=cast("str | None", parsed.get("wire_name")),
        doc=cast("str | None", parsed.get("doc")),
    )


def _check_identifier(name: str, location: str) -> None:
    if not _IDENTIFIER.fullmatch(name):
        raise SchemaDeclarationError(f"{location}: {name!r} is not a valid identifier")


def _as_string_key_mapping(value: object, path: str) -> dict[str, object]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SchemaDeclarationError(f"{path}: expected mapping, got {type(value).__name__}")
    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise SchemaDeclarationError(
                f"{path}: mapping keys must be strings, got {type(key).__name__}"
            )
        parsed[key] = item
    return parsed


__all__ = ["DEFAULT_MODULE", "load_schema_document", "load_schema_file", "parse_type"]
