"""
increase-models — request params.

File: src/increase_models/core/params.py

Purpose
- Request-body and list-query models, plus the per-call ``RequestOptions``
  handed to the HTTP transport alongside them.

Boundaries
- Nothing here performs I/O. ``parse_request`` returns wire-ready primitives
  (body mapping, query pairs, headers); sending them is the transport's job.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Final, NoReturn, TypeVar

from increase_models.core.coercion import JSONValue
from increase_models.core.errors import TypeCoercionError
from increase_models.core.model import Model

TParams = TypeVar("TParams", bound="Params")

IDEMPOTENCY_HEADER: Final[str] = "Idempotency-Key"

QueryValue = str | list[str]


def _fail(path: str, expected: str, message: str) -> NoReturn:
    raise TypeCoercionError(path, expected, message)


def _as_str_mapping(value: object, path: str) -> Mapping[str, str]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        _fail(path, "object", f"expected object, got {type(value).__name__}")
    parsed: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            _fail(path, "map[string]", "keys and values must be strings")
        parsed[key] = item
    return MappingProxyType(parsed)


def _as_json_mapping(value: object, path: str) -> Mapping[str, object]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        _fail(path, "object", f"expected object, got {type(value).__name__}")
    for key in value:
        if not isinstance(key, str):
            _fail(path, "object", "keys must be strings")
    return MappingProxyType(dict(value))


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Per-request transport settings; every field defaults to "not set"."""

    timeout: float | None = None
    max_retries: int | None = None
    idempotency_key: str | None = None
    extra_headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    extra_query: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    extra_body: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if self.timeout is not None:
            if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
                _fail("RequestOptions.timeout", "number", "timeout must be a number")
            if not math.isfinite(self.timeout) or self.timeout <= 0:
                _fail("RequestOptions.timeout", "number", "timeout must be > 0")
        if self.max_retries is not None:
            if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
                _fail("RequestOptions.max_retries", "integer", "max_retries must be an integer")
            if self.max_retries < 0:
                _fail("RequestOptions.max_retries", "integer", "max_retries must be >= 0")
        if self.idempotency_key is not None and (
            not isinstance(self.idempotency_key, str) or not self.idempotency_key.strip()
        ):
            _fail(
                "RequestOptions.idempotency_key",
                "string",
                "idempotency_key must be a non-empty string",
            )
        object.__setattr__(
            self,
            "extra_headers",
            _as_str_mapping(self.extra_headers, "RequestOptions.extra_headers"),
        )
        object.__setattr__(
            self,
            "extra_query",
            _as_str_mapping(self.extra_query, "RequestOptions.extra_query"),
        )
        object.__setattr__(
            self,
            "extra_body",
            _as_json_mapping(self.extra_body, "RequestOptions.extra_body"),
        )

    @classmethod
    def coerce(cls, value: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        """Accept ``None``, an instance, or a mapping keyed by option name."""

        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            _fail(
                "RequestOptions",
                "object",
                f"expected RequestOptions or mapping, got {type(value).__name__}",
            )
        allowed = {item.name for item in fields(cls)}
        unknown = sorted(str(key) for key in value if key not in allowed)
        if unknown:
            _fail("RequestOptions", "object", f"unknown option(s): {', '.join(unknown)}")
        return cls(**value)


class Params(Model, engine_base=True):
    """Base for request params; same lifecycle as any :class:`Model`."""

    __slots__ = ()

    @classmethod
    def parse_request(
        cls: type[TParams],
        params: TParams | Mapping[str, object] | None,
        request_options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> tuple[dict[str, JSONValue], RequestOptions]:
        """Finalize ``params`` and return its wire body with the coerced options."""

        instance: Params
        if params is None:
            instance = cls()
        elif isinstance(params, Model):
            if type(params) is not cls:
                _fail(
                    cls.__name__,
                    f"model {cls.__name__}",
                    f"expected {cls.__name__}, got {type(params).__name__}",
                )
            instance = params
        elif isinstance(params, Mapping):
            instance = cls(**{str(key): value for key, value in params.items()})
        else:
            _fail(
                cls.__name__,
                f"model {cls.__name__}",
                f"expected {cls.__name__} or mapping, got {type(params).__name__}",
            )
        return instance.to_wire(), RequestOptions.coerce(request_options)

    def to_query(self) -> dict[str, QueryValue]:
        """Flatten to query pairs: ``{"created_at": {"after": x}}`` -> ``created_at.after``."""

        flattened: dict[str, QueryValue] = {}
        _flatten_query(self.to_wire(), "", flattened)
        return flattened

    @staticmethod
    def headers(options: RequestOptions | Mapping[str, Any] | None = None) -> dict[str, str]:
        resolved = RequestOptions.coerce(options)
        out: dict[str, str] = {}
        if resolved.idempotency_key is not None:
            out[IDEMPOTENCY_HEADER] = resolved.idempotency_key
        out.update(resolved.extra_headers)
        return out


def _query_scalar(value: JSONValue, path: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    _fail(path, "query scalar", f"cannot encode {type(value).__name__} as a query value")


def _flatten_query(value: Mapping[str, JSONValue], prefix: str, out: dict[str, QueryValue]) -> None:
    for key, item in value.items():
        name = f"{prefix}{key}"
        if item is None:
            continue
        if isinstance(item, Mapping):
            _flatten_query(item, f"{name}.", out)
        elif isinstance(item, list):
            out[name] = [_query_scalar(element, name) for element in item if element is not None]
        else:
            out[name] = _query_scalar(item, name)


__all__ = ["IDEMPOTENCY_HEADER", "Params", "QueryValue", "RequestOptions"]
