"""
increase-models — property tests for the binding engine

File: tests/unit/core/test_properties.py

Purpose
- Round trip, copy-on-write immutability, and enum forward compatibility
  hold for arbitrary wire payloads, not only hand-picked examples.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import list_of, map_of, optional, required
from increase_models.core.model import Model


class Funding(ApiEnum):
    CHECKING = "checking"
    SAVINGS = "savings"
    OTHER = "other"


class Hold(Model):
    amount = required(int)
    released_at = required(datetime, nullable=True)


class Record(Model):
    id = required(str)
    amount = required(int)
    funding = required(Funding)
    note = optional(str, nullable=True)
    fundings = optional(list_of(Funding))
    holds = optional(list_of(Hold))
    details = optional(map_of(object), nullable=True)


_TEXT = st.text(max_size=12)
_JSON_SCALAR = st.none() | st.booleans() | st.integers() | _TEXT
_JSON = st.recursive(
    _JSON_SCALAR,
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(_TEXT, children, max_size=3),
    max_leaves=8,
)
_ENUM_TEXT = st.sampled_from(Funding.known_values()) | _TEXT
_OFFSETS = st.sampled_from(
    [UTC, timezone(timedelta(hours=-5)), timezone(timedelta(hours=5, minutes=30))]
)
# Wire text keeps whatever precision and UTC spelling the server sent.
_WIRE_DATETIME = st.builds(
    lambda value, timespec, utc_suffix: value.isoformat(timespec=timespec).replace(
        "+00:00", utc_suffix
    ),
    st.datetimes(
        min_value=datetime(2000, 1, 1), max_value=datetime(2100, 1, 1), timezones=_OFFSETS
    ),
    st.sampled_from(["seconds", "milliseconds", "microseconds"]),
    st.sampled_from(["Z", "+00:00"]),
)
_HOLD = st.fixed_dictionaries(
    {"amount": st.integers(), "released_at": st.none() | _WIRE_DATETIME}
)


@st.composite
def _record_wire(draw: st.DrawFn) -> dict[str, object]:
    wire: dict[str, object] = {
        "id": draw(_TEXT),
        "amount": draw(st.integers()),
        "funding": draw(_ENUM_TEXT),
    }
    optional_values = {
        "note": st.none() | _TEXT,
        "fundings": st.lists(_ENUM_TEXT, max_size=4),
        "holds": st.lists(_HOLD, max_size=3),
        "details": st.none() | st.dictionaries(_TEXT, _JSON, max_size=3),
    }
    for key, strategy in optional_values.items():
        if draw(st.booleans()):
            wire[key] = draw(strategy)
    return wire


@settings(max_examples=100, deadline=None)
@given(wire=_record_wire())
def test_round_trip_reproduces_wire_mapping(wire: dict[str, object]) -> None:
    record = Record.from_raw(wire)

    assert record.to_wire() == wire
    assert Record.from_raw(record.to_wire()) == record


@settings(max_examples=100, deadline=None)
@given(wire=_record_wire(), amount=st.integers())
def test_with_field_changes_exactly_one_field(wire: dict[str, object], amount: int) -> None:
    original = Record.from_raw(wire)
    before = original.to_wire()

    changed = original.with_amount(amount)

    assert original.to_wire() == before
    after = changed.to_wire()
    assert set(after) == set(before)
    assert {key for key in before if after[key] != before[key]} <= {"amount"}
    assert after["amount"] == amount


@settings(max_examples=100, deadline=None)
@given(value=_TEXT.filter(lambda text: not Funding.is_known(text)))
def test_unknown_enum_strings_round_trip_unchanged(value: str) -> None:
    record = Record.from_raw({"id": "r1", "amount": 1, "funding": value, "fundings": [value]})

    assert record.funding == value
    assert record.to_wire()["funding"] == value
    assert record.to_wire()["fundings"] == [value]
