from datetime import time

import pytest

from pyocpidata.enums import TokenType
from pyocpidata.exceptions import TypeMismatchError, ValidationError
from pyocpidata.types import (
    AuthId,
    ClockTime,
    Currency,
    Language,
    TariffId,
    TokenId,
    Url,
    coerce_money,
    coerce_value,
)


def test_identifier_preserves_case() -> None:
    assert TariffId("Tariff-1").to_wire() == "Tariff-1"
    assert str(TokenId("012345678")) == "012345678"


def test_identifier_rejects_blank_and_long_values() -> None:
    with pytest.raises(ValidationError):
        TariffId("   ")
    with pytest.raises(ValidationError):
        AuthId("x" * 37)
    assert AuthId("x" * 36).value == "x" * 36


def test_identifier_types_are_distinct() -> None:
    assert TariffId("12") != TokenId("12")
    assert TariffId("12") == TariffId("12")
    assert hash(TariffId("12")) == hash(TariffId("12"))


def test_parse_reports_field_and_kind() -> None:
    with pytest.raises(TypeMismatchError) as exc:
        TokenId.parse(12, "uid")
    assert exc.value.field == "uid"
    assert exc.value.kind == "TokenId"
    with pytest.raises(ValidationError) as exc:
        TokenId.parse("", "uid")
    assert exc.value.field == "uid"
    assert exc.value.raw == ""


def test_currency_is_normalized() -> None:
    assert Currency("eur").to_wire() == "EUR"
    assert Currency.parse("Eur") == Currency("EUR")
    with pytest.raises(ValidationError):
        Currency("EURO")


def test_language_is_normalized() -> None:
    assert Language("DE").to_wire() == "de"
    with pytest.raises(ValidationError):
        Language("deu")


def test_url_requires_http_scheme() -> None:
    assert Url("https://company.com/tariffs/13").to_wire() == "https://company.com/tariffs/13"
    with pytest.raises(ValidationError):
        Url("ftp://company.com/tariffs")
    with pytest.raises(ValidationError):
        Url("/tariffs/13")
    with pytest.raises(ValidationError):
        Url("https://company.com/with space")


def test_clock_time_wire_form() -> None:
    assert ClockTime(8).to_wire() == "08:00"
    assert ClockTime.parse("18:05") == ClockTime(18, 5)
    assert ClockTime.from_time(time(13, 30)).to_time() == time(13, 30)
    assert ClockTime(8) < ClockTime(18)


@pytest.mark.parametrize("raw", ["8:00", "24:00", "12:60", "12:00:00", "", "08:00\n"])
def test_clock_time_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValidationError):
        ClockTime.parse(raw, "start_time")


def test_clock_time_rejects_out_of_range() -> None:
    with pytest.raises(ValidationError):
        ClockTime(24)
    with pytest.raises(ValidationError):
        ClockTime(12, 60)


def test_coerce_value_accepts_instances_and_strings() -> None:
    currency = Currency("EUR")
    assert coerce_value(Currency, currency, "currency") is currency
    assert coerce_value(Currency, "eur", "currency") == currency
    assert coerce_value(TokenType, "RFID", "type") is TokenType.RFID


def test_coerce_value_rejects_unknown_and_wrong_types() -> None:
    with pytest.raises(ValidationError) as exc:
        coerce_value(TokenType, "CARD", "type")
    assert exc.value.field == "type"
    with pytest.raises(ValidationError):
        coerce_value(Currency, 978, "currency")


def test_coerce_money() -> None:
    assert str(coerce_money(0.1, "price")) == "0.1"
    assert str(coerce_money("2.00", "price")) == "2.00"
    with pytest.raises(ValidationError):
        coerce_money("two", "price")
    with pytest.raises(ValidationError):
        coerce_money(True, "price")
