from __future__ import annotations

import math

import pytest

from docuextract.domain.errors.exceptions import UnknownFieldError
from docuextract.domain.records.corrections import apply_correction, parse_number, parse_presence
from docuextract.domain.records.fields import FieldKey, get_field, parse_field_key


TS = "2024-05-01T10:05:00.000Z"


def test_correction_sets_value_history_and_confidence(make_data) -> None:
    data = make_data(horse_power=50.0)
    updated = apply_correction(data, "horsePower", "55", user="Operator", timestamp=TS)

    field = updated.horse_power
    assert field.value == 55.0
    assert field.is_edited is True
    assert field.confidence == 1.0
    assert len(field.history) == 1
    entry = field.history[0]
    assert entry.old_value == 50.0
    assert entry.new_value == 55.0
    assert entry.timestamp == TS
    assert entry.user == "Operator"

    # input record untouched
    assert data.horse_power.value == 50.0
    assert data.horse_power.history is None


def test_second_correction_appends(make_data) -> None:
    data = make_data(dealer_name="Acme")
    once = apply_correction(data, FieldKey.DEALER_NAME, "Acme Ltd", timestamp=TS)
    twice = apply_correction(once, FieldKey.DEALER_NAME, "Acme Limited", timestamp=TS)

    history = twice.dealer_name.history
    assert [h.new_value for h in history] == ["Acme Ltd", "Acme Limited"]
    assert history[1].old_value == "Acme Ltd"


def test_same_value_is_a_no_op(make_data) -> None:
    data = make_data(model_name="MX-50")
    assert apply_correction(data, "modelName", "MX-50") is data

    data = make_data(horse_power=50.0)
    # "50 HP" parses to the current value
    assert apply_correction(data, "horsePower", "50 HP") is data


def test_presence_parsing(make_data) -> None:
    data = make_data(dealer_stamp=False)
    updated = apply_correction(data, "dealerStamp", "yes", timestamp=TS)
    assert updated.dealer_stamp.value is True
    assert updated.dealer_stamp.history[0].old_value is False

    back = apply_correction(updated, "dealerStamp", False, timestamp=TS)
    assert back.dealer_stamp.value is False
    assert len(back.dealer_stamp.history) == 2


def test_unparseable_number_becomes_nan_and_logs_each_time(make_data) -> None:
    data = make_data(asset_cost=1000.0)
    once = apply_correction(data, "assetCost", "abc", timestamp=TS)
    assert math.isnan(once.asset_cost.value)

    twice = apply_correction(once, "assetCost", "abc", timestamp=TS)
    assert twice is not once
    assert len(twice.asset_cost.history) == 2


def test_unknown_field_raises(make_data) -> None:
    with pytest.raises(UnknownFieldError) as info:
        apply_correction(make_data(), "chassisNumber", "x")
    assert info.value.http_status == 422


@pytest.mark.parametrize(
    "raw, expected",
    [("50 HP", 50.0), ("1e3", 1000.0), ("-2.5", -2.5), (".5", 0.5), (" 42 ", 42.0), (7, 7.0)],
)
def test_parse_number(raw, expected) -> None:
    assert parse_number(raw) == expected


def test_parse_number_specials() -> None:
    assert math.isnan(parse_number("abc"))
    assert math.isnan(parse_number(""))
    assert parse_number("Infinity") == math.inf
    assert parse_number("-Infinity") == -math.inf


def test_parse_presence() -> None:
    assert parse_presence("Present") is True
    assert parse_presence("on") is True
    assert parse_presence("no") is False
    assert parse_presence(0) is False


def test_field_key_accepts_wire_and_attribute_names(make_data) -> None:
    assert parse_field_key("dealerName") is FieldKey.DEALER_NAME
    assert parse_field_key("dealer_name") is FieldKey.DEALER_NAME
    assert get_field(make_data(dealer_name="X"), "dealerName").value == "X"


@pytest.mark.parametrize("raw", ["--Infinity", "+-Infinity", "-+Infinity"])
def test_parse_number_rejects_repeated_signs(raw) -> None:
    assert math.isnan(parse_number(raw))


def test_parse_number_signed_infinity_prefix() -> None:
    assert parse_number("+Infinity") == math.inf
    assert parse_number("-Infinity HP") == -math.inf


@pytest.mark.parametrize("raw, expected", [(575, "575"), (575.0, "575"), (57.5, "57.5"), (True, "true")])
def test_text_fields_keep_literal_numbers(make_data, raw, expected) -> None:
    updated = apply_correction(make_data(model_name="MX-50"), "modelName", raw, timestamp=TS)
    assert updated.model_name.value == expected
    assert updated.model_name.history[0].new_value == expected
