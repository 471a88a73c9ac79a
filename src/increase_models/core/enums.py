"""Closed-but-extensible API enums and forward-compatible coercion.

The API may add enum members before this library learns about them. Coercion
therefore accepts every known member, and by default lets any other string
pass through unchanged. Callers that want hard failures opt into ``strict``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar

import structlog

from increase_models.core.errors import TypeCoercionError

TEnum = TypeVar("TEnum", bound="ApiEnum")

_LOGGER = structlog.get_logger(__name__)


class ApiEnum(StrEnum):
    """Base for string enums supplied by the API schema."""

    @classmethod
    def known_values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @classmethod
    def is_known(cls, value: object) -> bool:
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in cls._value2member_map_


def known_values(enum_type: type[ApiEnum]) -> tuple[str, ...]:
    """Return member values in declaration order."""

    return enum_type.known_values()


def is_known(enum_type: type[ApiEnum], value: object) -> bool:
    return enum_type.is_known(value)


def coerce_enum(
    enum_type: type[TEnum],
    value: object,
    path: str,
    *,
    strict: bool = False,
) -> TEnum | str:
    """Return the typed member for ``value``; unknown strings pass through unless strict."""

    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        raise TypeCoercionError(
            path,
            f"enum {enum_type.__name__}",
            f"expected string enum value, got {type(value).__name__}",
        )

    member = enum_type._value2member_map_.get(value)
    if member is not None:
        return member  # type: ignore[return-value]

    if strict:
        allowed = ", ".join(known_values(enum_type))
        raise TypeCoercionError(
            path,
            f"enum {enum_type.__name__}",
            f"invalid value {value!r}; expected one of: {allowed}",
        )

    _LOGGER.debug(
        "enum.unknown_value",
        path=path,
        enum=enum_type.__name__,
        value=value,
    )
    return value


__all__ = ["ApiEnum", "coerce_enum", "is_known", "known_values"]
