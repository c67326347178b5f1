import logging
from datetime import timedelta
from decimal import Decimal

import pytest

from pyocpidata import codec
from pyocpidata.enums import DayOfWeek
from pyocpidata.exceptions import (
    MissingFieldError,
    TypeMismatchError,
    UnknownEnumValueError,
    ValidationError,
)
from pyocpidata.models import DisplayText
from pyocpidata.types import Currency


def test_get_required_missing_key() -> None:
    with pytest.raises(MissingFieldError) as exc:
        codec.get_required({}, "currency", codec.as_wire(Currency))
    assert exc.value.field == "currency"


def test_get_required_rejects_null() -> None:
    with pytest.raises(TypeMismatchError) as exc:
        codec.get_required({"currency": None}, "currency", codec.as_wire(Currency))
    assert exc.value.field == "currency"
    assert str(exc.value) == "currency: The 'currency' field must not be null."


def test_get_optional_returns_none_for_absent_and_null() -> None:
    assert codec.get_optional({}, "vat", codec.as_decimal) is None
    assert codec.get_optional({"vat": None}, "vat", codec.as_decimal) is None
    assert codec.get_optional({"vat": 10}, "vat", codec.as_decimal) == Decimal(10)


def test_get_array_reports_element_path() -> None:
    data = {"day_of_week": ["MONDAY", "FUNDAY"]}
    with pytest.raises(UnknownEnumValueError) as exc:
        codec.get_array(data, "day_of_week", codec.as_wire(DayOfWeek))
    assert exc.value.field == "day_of_week[1]"
    assert exc.value.raw == "FUNDAY"


def test_get_array_rejects_non_arrays_and_nulls() -> None:
    with pytest.raises(TypeMismatchError):
        codec.get_array({"items": "a"}, "items", codec.as_string)
    with pytest.raises(TypeMismatchError) as exc:
        codec.get_array({"items": ["a", None]}, "items", codec.as_string)
    assert exc.value.field == "items[1]"


def test_get_array_required() -> None:
    assert codec.get_array({}, "items", codec.as_string) == ()
    with pytest.raises(MissingFieldError):
        codec.get_array({}, "items", codec.as_string, required=True)
    with pytest.raises(TypeMismatchError):
        codec.get_array({"items": None}, "items", codec.as_string, required=True)


def test_as_object_prefixes_nested_errors() -> None:
    coerce = codec.as_object(DisplayText.from_json)
    with pytest.raises(TypeMismatchError) as exc:
        coerce({"language": "en", "text": 5}, "tariff_alt_text[1]")
    assert exc.value.field == "tariff_alt_text[1].text"
    with pytest.raises(TypeMismatchError) as exc:
        coerce("not an object", "energy_mix")
    assert exc.value.field == "energy_mix"


def test_numeric_coercers() -> None:
    assert codec.as_int(3.0, "step_size") == 3
    with pytest.raises(ValidationError):
        codec.as_int(2.5, "step_size")
    with pytest.raises(TypeMismatchError):
        codec.as_int("3", "step_size")
    with pytest.raises(ValidationError):
        codec.as_positive_int(0, "step_size")
    assert codec.as_seconds(300, "min_duration") == timedelta(minutes=5)
    with pytest.raises(ValidationError):
        codec.as_seconds(-1, "min_duration")
    with pytest.raises(ValidationError) as exc:
        codec.as_seconds(10**15, "min_duration")
    assert exc.value.field == "min_duration"


def test_string_and_bool_coercers() -> None:
    with pytest.raises(ValidationError):
        codec.as_non_empty_string("  ", "issuer")
    with pytest.raises(TypeMismatchError):
        codec.as_bool("true", "valid")
    assert codec.as_bool(False, "valid") is False


def test_put_optional_skips_empty_values() -> None:
    target: dict = {}
    codec.put_optional(target, "vat", None)
    codec.put_optional(target, "restrictions", [])
    codec.put_optional(target, "supplier_name", "")
    assert target == {"supplier_name": ""}


def test_number_to_wire() -> None:
    assert codec.number_to_wire(None) is None
    assert codec.number_to_wire(Decimal("10")) == 10
    assert codec.number_to_wire(Decimal("0.25")) == 0.25


def test_try_parse_reduces_errors_to_one_message(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pyocpidata.codec")
    result, error = codec.try_parse(DisplayText.from_json, {"language": "en"}, "a text")
    assert result is None
    assert error == (
        "The given JSON representation of a text is invalid: text: The 'text' field is missing."
    )
    assert "Parsing a text failed" in caplog.text


@pytest.mark.parametrize("data", [None, {}, [], "text"])
def test_try_parse_requires_non_empty_object(data: object) -> None:
    result, error = codec.try_parse(DisplayText.from_json, data, "a text")
    assert result is None
    assert error == "The given JSON representation of a text must be a non-empty object."


def test_try_parse_success() -> None:
    result, error = codec.try_parse(
        DisplayText.from_json, {"language": "en", "text": "Standard"}, "a text"
    )
    assert error is None
    assert result == DisplayText("en", "Standard")


def test_coerce_tuple() -> None:
    text = DisplayText("en", "Standard")
    assert codec.coerce_tuple([text], DisplayText, "tariff_alt_text") == (text,)
    with pytest.raises(TypeMismatchError):
        codec.coerce_tuple("abc", DisplayText, "tariff_alt_text")
    with pytest.raises(ValidationError) as exc:
        codec.coerce_tuple([text, "x"], DisplayText, "tariff_alt_text")
    assert exc.value.field == "tariff_alt_text[1]"
