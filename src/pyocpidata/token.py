"""Token record."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from functools import total_ordering
from typing import Any

from . import codec
from .codec import (
    as_bool,
    as_non_empty_string,
    as_string,
    as_timestamp,
    as_wire,
    ensure_object,
    get_optional,
    get_required,
    put_optional,
)
from .const import LEGACY_AUTH_ID_KEY, MAX_ISSUER_LENGTH, MAX_VISUAL_NUMBER_LENGTH
from .enums import TokenType, WhitelistType
from .exceptions import MissingFieldError, ValidationError
from .patch import compute_etag, patch_record
from .types import AuthId, Language, TokenId, coerce_value
from .util import format_utc_timestamp, normalize_timestamp, utc_now


def _check_text(value: Any, name: str, max_length: int, *, required: bool) -> None:
    if value is None and not required:
        return
    if not isinstance(value, str):
        raise ValidationError("Value must be a string.", field=name, raw=value)
    if required and not value.strip():
        raise ValidationError("Value must be a non-empty string.", field=name, raw=value)
    if len(value) > max_length:
        raise ValidationError(
            f"Value must not exceed {max_length} characters.", field=name, raw=value
        )


@total_ordering
@dataclass(frozen=True, slots=True)
class Token:
    """Authorization credential such as an RFID card or app account.

    Only the fields below are modeled; ``country_code``, ``party_id``,
    ``group_id``, ``default_profile_type`` and ``energy_contract`` are accepted
    on input and dropped.
    """

    id: TokenId
    type: TokenType
    auth_id: AuthId
    issuer: str
    is_valid: bool
    whitelist_type: WhitelistType
    visual_number: str | None = None
    ui_language: Language | None = None
    last_updated: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", coerce_value(TokenId, self.id, "uid"))
        object.__setattr__(self, "type", coerce_value(TokenType, self.type, "type"))
        object.__setattr__(self, "auth_id", coerce_value(AuthId, self.auth_id, "auth_id"))
        _check_text(self.issuer, "issuer", MAX_ISSUER_LENGTH, required=True)
        if not isinstance(self.is_valid, bool):
            raise ValidationError("Value must be a boolean.", field="valid", raw=self.is_valid)
        object.__setattr__(
            self,
            "whitelist_type",
            coerce_value(WhitelistType, self.whitelist_type, "whitelist"),
        )
        _check_text(
            self.visual_number, "visual_number", MAX_VISUAL_NUMBER_LENGTH, required=False
        )
        if self.ui_language is not None:
            object.__setattr__(
                self, "ui_language", coerce_value(Language, self.ui_language, "language")
            )
        try:
            last_updated = normalize_timestamp(self.last_updated)
        except ValidationError as exc:
            raise exc.at("last_updated") from exc
        object.__setattr__(self, "last_updated", last_updated)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.id.value, self.last_updated) < (other.id.value, other.last_updated)

    @property
    def etag(self) -> str:
        return compute_etag(self)

    @classmethod
    def from_json(
        cls,
        data: Mapping[str, Any],
        *,
        token_id: TokenId | str | None = None,
    ) -> Token:
        """Build a token from its wire form, raising on the first error.

        ``token_id`` is the uid taken from a request path, if any. When
        ``auth_id`` is absent, ``contract_id`` (its OCPI 2.2 name) is used.
        """
        data = ensure_object(data)
        expected_id = coerce_value(TokenId, token_id, "uid") if token_id is not None else None
        body_id = get_optional(data, "uid", as_wire(TokenId))
        if body_id is None and expected_id is None:
            raise MissingFieldError("The 'uid' field is missing.", field="uid")
        if body_id is not None and expected_id is not None and body_id != expected_id:
            raise ValidationError(
                "The token uid in the body does not match the expected token uid.",
                field="uid",
                raw=body_id.value,
            )
        token_type = get_required(data, "type", as_wire(TokenType))
        auth_key = "auth_id"
        if data.get(auth_key) is None and data.get(LEGACY_AUTH_ID_KEY) is not None:
            auth_key = LEGACY_AUTH_ID_KEY
        auth_id = get_required(data, auth_key, as_wire(AuthId))
        visual_number = get_optional(data, "visual_number", as_string)
        issuer = get_required(data, "issuer", as_non_empty_string)
        is_valid = get_required(data, "valid", as_bool)
        whitelist_type = get_required(data, "whitelist", as_wire(WhitelistType))
        ui_language = get_optional(data, "language", as_wire(Language))
        last_updated = get_required(data, "last_updated", as_timestamp)
        return cls(
            id=body_id or expected_id,
            type=token_type,
            auth_id=auth_id,
            issuer=issuer,
            is_valid=is_valid,
            whitelist_type=whitelist_type,
            visual_number=visual_number,
            ui_language=ui_language,
            last_updated=last_updated,
        )

    @classmethod
    def try_parse(
        cls,
        data: Any,
        *,
        token_id: TokenId | str | None = None,
    ) -> tuple[Token | None, str | None]:
        """Parse a token; returns ``(token, None)`` or ``(None, error message)``."""
        return codec.try_parse(
            lambda payload: cls.from_json(payload, token_id=token_id),
            data,
            "a token",
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "uid": self.id.to_wire(),
            "type": self.type.to_wire_token(),
            "auth_id": self.auth_id.to_wire(),
        }
        put_optional(result, "visual_number", self.visual_number)
        result["issuer"] = self.issuer
        result["valid"] = self.is_valid
        result["whitelist"] = self.whitelist_type.to_wire_token()
        put_optional(
            result, "language", self.ui_language.to_wire() if self.ui_language else None
        )
        result["last_updated"] = format_utc_timestamp(self.last_updated)
        return result

    def try_patch(
        self,
        patch: Any,
        *,
        allow_downgrades: bool = False,
        now: datetime | None = None,
    ) -> tuple[Token, str | None]:
        """Apply a JSON merge patch; see :meth:`Tariff.try_patch`."""
        return patch_record(
            self,
            patch,
            id_key="uid",
            what="token",
            try_parse=Token.try_parse,
            allow_downgrades=allow_downgrades,
            now=now,
        )

    def __str__(self) -> str:
        state = "valid" if self.is_valid else "invalid"
        return (
            f"{self.id} ({self.type}) {state}, whitelist {self.whitelist_type}, "
            f"last updated: {format_utc_timestamp(self.last_updated)}"
        )
