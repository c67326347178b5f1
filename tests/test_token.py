import dataclasses
from datetime import UTC, datetime

import pytest

from pyocpidata.enums import TokenType, WhitelistType
from pyocpidata.exceptions import (
    MissingFieldError,
    TypeMismatchError,
    UnknownEnumValueError,
    ValidationError,
)
from pyocpidata.token import Token
from pyocpidata.types import AuthId, Language, TokenId

TOKEN_KEYS = (
    "uid",
    "type",
    "auth_id",
    "visual_number",
    "issuer",
    "valid",
    "whitelist",
    "language",
    "last_updated",
)
UNMODELED_KEYS = ("country_code", "party_id", "contract_id", "group_id", "energy_contract")


def _wire_token() -> dict:
    return {
        "uid": "012345678",
        "type": "RFID",
        "contract_id": "DE8ACC12E46L89",
        "visual_number": "DF000-2001-8999-1",
        "issuer": "TheNewMotion",
        "valid": True,
        "whitelist": "ALWAYS",
        "last_updated": "2015-06-29T22:39:09Z",
    }


def test_scenario_contract_id_token() -> None:
    token, error = Token.try_parse(_wire_token())
    assert error is None
    assert token.id == TokenId("012345678")
    assert token.type is TokenType.RFID
    assert token.auth_id == AuthId("DE8ACC12E46L89")
    assert token.whitelist_type is WhitelistType.ALWAYS
    assert token.ui_language is None
    assert token.is_valid is True
    assert token.last_updated == datetime(2015, 6, 29, 22, 39, 9, tzinfo=UTC)


def test_wire_shape() -> None:
    data = Token.from_json(_wire_token()).to_json()
    assert data == {
        "uid": "012345678",
        "type": "RFID",
        "auth_id": "DE8ACC12E46L89",
        "visual_number": "DF000-2001-8999-1",
        "issuer": "TheNewMotion",
        "valid": True,
        "whitelist": "ALWAYS",
        "last_updated": "2015-06-29T22:39:09.000Z",
    }
    assert list(data) == [key for key in TOKEN_KEYS if key in data]
    assert not set(UNMODELED_KEYS) & set(data)


def test_round_trip() -> None:
    token = Token(
        id="04E2A8C2",
        type=TokenType.APP_USER,
        auth_id="NL-TNM-012204-5",
        issuer="TheNewMotion",
        is_valid=False,
        whitelist_type=WhitelistType.ALLOWED_OFFLINE,
        ui_language=Language("nl"),
        last_updated=datetime(2019, 3, 1, 8, 0, 0, 999999, tzinfo=UTC),
    )
    assert Token.from_json(token.to_json()) == token
    assert token.to_json()["language"] == "nl"


def test_auth_id_takes_precedence_over_contract_id() -> None:
    data = _wire_token()
    data["auth_id"] = "DE8ACC12E46L90"
    assert Token.from_json(data).auth_id == AuthId("DE8ACC12E46L90")


def test_missing_auth_id() -> None:
    data = _wire_token()
    del data["contract_id"]
    with pytest.raises(MissingFieldError) as exc:
        Token.from_json(data)
    assert exc.value.field == "auth_id"


def test_unrecognized_fields_are_ignored() -> None:
    data = _wire_token()
    data.update(
        {
            "country_code": "NL",
            "party_id": "TNM",
            "group_id": "DF000-2001",
            "default_profile_type": "GREEN",
            "energy_contract": {"supplier_name": "Greenpeace Energy eG"},
            "nickname": "work card",
        }
    )
    assert Token.from_json(data) == Token.from_json(_wire_token())


def test_language_omitted_when_absent() -> None:
    data = Token.from_json(_wire_token()).to_json()
    assert "language" not in data


def test_unknown_whitelist_value() -> None:
    data = _wire_token()
    data["whitelist"] = "SOMETIMES"
    with pytest.raises(UnknownEnumValueError) as exc:
        Token.from_json(data)
    assert exc.value.field == "whitelist"
    token, error = Token.try_parse(data)
    assert token is None
    assert error == (
        "The given JSON representation of a token is invalid: "
        "whitelist: Unknown WhitelistType value 'SOMETIMES'."
    )


def test_empty_issuer_is_rejected() -> None:
    data = _wire_token()
    data["issuer"] = " "
    with pytest.raises(ValidationError) as exc:
        Token.from_json(data)
    assert exc.value.field == "issuer"


def test_length_limits() -> None:
    token = Token.from_json(_wire_token())
    with pytest.raises(ValidationError):
        dataclasses.replace(token, visual_number="x" * 65)
    with pytest.raises(ValidationError):
        dataclasses.replace(token, issuer="x" * 65)
    data = _wire_token()
    data["uid"] = "x" * 37
    with pytest.raises(ValidationError):
        Token.from_json(data)


def test_valid_must_be_boolean() -> None:
    data = _wire_token()
    data["valid"] = "true"
    token, error = Token.try_parse(data)
    assert token is None
    assert "valid: Value must be a boolean." in error


def test_token_id_from_path() -> None:
    data = _wire_token()
    del data["uid"]
    assert Token.from_json(data, token_id="012345678").id == TokenId("012345678")
    token, error = Token.try_parse(_wire_token(), token_id="987654321")
    assert token is None
    assert "does not match" in error


@pytest.mark.parametrize("data", [{}, [], None])
def test_try_parse_rejects_empty_input(data: object) -> None:
    token, error = Token.try_parse(data)
    assert token is None
    assert error == "The given JSON representation of a token must be a non-empty object."


def test_ordering_and_etag() -> None:
    token = Token.from_json(_wire_token())
    other = dataclasses.replace(token, id=TokenId("112345678"))
    assert token < other
    assert token.etag == Token.from_json(_wire_token()).etag
    assert token.etag != other.etag


def test_str() -> None:
    assert str(Token.from_json(_wire_token())) == (
        "012345678 (RFID) valid, whitelist ALWAYS, last updated: 2015-06-29T22:39:09.000Z"
    )


def test_null_required_field_is_a_type_mismatch() -> None:
    data = _wire_token()
    data["valid"] = None
    with pytest.raises(TypeMismatchError) as exc:
        Token.from_json(data)
    assert exc.value.field == "valid"
    token, error = Token.try_parse(data)
    assert token is None
    assert error.endswith("valid: The 'valid' field must not be null.")


def test_empty_visual_number_round_trips() -> None:
    token = dataclasses.replace(Token.from_json(_wire_token()), visual_number="")
    assert token.to_json()["visual_number"] == ""
    assert Token.from_json(token.to_json()) == token
