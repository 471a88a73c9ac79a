"""Unit tests for per-kind coercion and serialization helpers."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from increase_models.core.coercion import (
    WireDate,
    WireDatetime,
    coerce_value,
    datetime_to_wire,
    serialize_value,
)
from increase_models.core.enums import ApiEnum
from increase_models.core.errors import TypeCoercionError
from increase_models.core.fields import field_type, list_of, map_of
from increase_models.core.model import Model


class Funding(ApiEnum):
    CHECKING = "checking"
    SAVINGS = "savings"


class Holder(Model):
    pass


def _coerce(spec: object, value: object) -> object:
    return coerce_value(field_type(spec), value, "Holder.value", owner=Holder)


@pytest.mark.parametrize(
    ("spec", "value"),
    [
        (str, "abc"),
        (int, 0),
        (int, -12),
        (float, 1.5),
        (float, 2),
        (bool, False),
        (object, {"nested": [1, "two", None]}),
    ],
)
def test_scalars_accept_matching_json_types(spec: type, value: object) -> None:
    assert serialize_value(_coerce(spec, value), "Holder.value") == value


@pytest.mark.parametrize(
    ("spec", "value"),
    [
        (str, 1),
        (int, True),
        (int, 1.0),
        (int, "1"),
        (float, "1.5"),
        (float, False),
        (bool, 1),
        (bool, "true"),
    ],
)
def test_scalars_reject_mismatched_types(spec: type, value: object) -> None:
    with pytest.raises(TypeCoercionError) as excinfo:
        _coerce(spec, value)

    assert excinfo.value.path == "Holder.value"


def test_non_finite_floats_are_rejected() -> None:
    with pytest.raises(TypeCoercionError, match="finite"):
        _coerce(float, math.inf)
    with pytest.raises(TypeCoercionError, match="finite"):
        _coerce(object, {"x": math.nan})


def test_enum_member_given_to_string_field_is_stored_as_plain_string() -> None:
    value = _coerce(str, Funding.CHECKING)

    assert value == "checking"
    assert type(value) is str


def test_any_json_is_frozen_recursively() -> None:
    value = _coerce(object, {"limits": [1, {"daily": 5}], "tier": "gold"})

    assert value == {"limits": (1, {"daily": 5}), "tier": "gold"}
    assert isinstance(value["limits"], tuple)  # type: ignore[index]
    with pytest.raises(TypeError):
        value["tier"] = "silver"  # type: ignore[index]
    with pytest.raises(TypeError):
        value["limits"][1]["daily"] = 6  # type: ignore[index]


def test_any_json_rejects_non_json_values() -> None:
    with pytest.raises(TypeCoercionError, match="not JSON-serializable"):
        _coerce(object, {1, 2})
    with pytest.raises(TypeCoercionError, match="keys must be strings"):
        _coerce(object, {1: "a"})


def test_list_of_enum_keeps_unknown_members() -> None:
    value = coerce_value(
        list_of(Funding), ["checking", "unknown_future_type"], "Holder.value", owner=Holder
    )

    assert value == (Funding.CHECKING, "unknown_future_type")
    assert value[0] is Funding.CHECKING


def test_list_elements_must_not_be_null() -> None:
    with pytest.raises(TypeCoercionError) as excinfo:
        coerce_value(list_of(str), ["a", None], "Holder.value", owner=Holder)

    assert excinfo.value.path == "Holder.value[1]"


def test_list_rejects_non_array() -> None:
    with pytest.raises(TypeCoercionError, match="expected array, got str"):
        coerce_value(list_of(str), "a", "Holder.value", owner=Holder)


def test_map_values_are_coerced_per_element_kind() -> None:
    value = coerce_value(map_of(Funding), {"primary": "savings"}, "Holder.value", owner=Holder)

    assert value == {"primary": Funding.SAVINGS}
    with pytest.raises(TypeCoercionError) as excinfo:
        coerce_value(map_of(int), {"count": "3"}, "Holder.value", owner=Holder)
    assert excinfo.value.path == "Holder.value.count"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-03-04T05:06:07Z", datetime(2024, 3, 4, 5, 6, 7, tzinfo=UTC)),
        ("2024-03-04T05:06:07.250000+00:00", datetime(2024, 3, 4, 5, 6, 7, 250000, tzinfo=UTC)),
        (
            "2024-03-04T05:06:07-05:00",
            datetime(2024, 3, 4, 5, 6, 7, tzinfo=timezone(timedelta(hours=-5))),
        ),
    ],
)
def test_datetime_parsing(raw: str, expected: datetime) -> None:
    assert _coerce(datetime, raw) == expected


@pytest.mark.parametrize("raw", ["2024-13-01T00:00:00Z", "yesterday", "2024-03-04T05:06:07"])
def test_invalid_datetimes_are_rejected(raw: str) -> None:
    with pytest.raises(TypeCoercionError):
        _coerce(datetime, raw)


def test_date_parsing_rejects_datetimes() -> None:
    assert _coerce(date, "2024-02-29") == date(2024, 2, 29)
    assert _coerce(date, date(2024, 2, 29)) == date(2024, 2, 29)
    with pytest.raises(TypeCoercionError, match="got datetime"):
        _coerce(date, datetime(2024, 2, 29, tzinfo=UTC))
    with pytest.raises(TypeCoercionError, match="invalid ISO-8601 date"):
        _coerce(date, "2023-02-29")


def test_serialize_value_handles_every_kind() -> None:
    value = {
        "when": datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        "day": date(2024, 1, 2),
        "funding": Funding.SAVINGS,
        "items": (1, "two", None),
        "flag": True,
    }

    assert serialize_value(value, "Holder.value") == {
        "when": "2024-01-02T03:04:05Z",
        "day": "2024-01-02",
        "funding": "savings",
        "items": [1, "two", None],
        "flag": True,
    }


def test_serialize_value_rejects_unknown_types() -> None:
    with pytest.raises(TypeCoercionError, match="cannot serialize value of type bytes"):
        serialize_value(b"raw", "Holder.value")


def test_datetime_to_wire_keeps_microseconds_and_offsets() -> None:
    assert datetime_to_wire(datetime(2024, 1, 2, 3, 4, 5, 6, tzinfo=UTC)) == (
        "2024-01-02T03:04:05.000006Z"
    )
    assert datetime_to_wire(
        datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    ) == "2024-01-02T03:04:05+02:00"


@pytest.mark.parametrize(
    "raw",
    [
        "2020-01-31T23:59:59+00:00",
        "2020-01-31T23:59:59.123Z",
        "2020-01-31T23:59:59.100000-05:00",
        "2020-01-31T23:59:59Z",
    ],
)
def test_parsed_datetimes_serialize_to_their_received_text(raw: str) -> None:
    value = _coerce(datetime, raw)

    assert isinstance(value, WireDatetime)
    assert value.wire_text == raw
    assert serialize_value(value, "Holder.value") == raw


def test_derived_datetimes_fall_back_to_canonical_rendering() -> None:
    value = _coerce(datetime, "2020-01-31T23:59:59.123+00:00")

    shifted = value + timedelta(seconds=1)  # type: ignore[operator]

    assert serialize_value(shifted, "Holder.value") == "2020-02-01T00:00:00.123000Z"


def test_parsed_dates_serialize_to_their_received_text() -> None:
    value = _coerce(date, "20240229")

    assert isinstance(value, WireDate)
    assert value == date(2024, 2, 29)
    assert serialize_value(value, "Holder.value") == "20240229"
