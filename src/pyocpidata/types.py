"""Primitive value types."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Any, ClassVar, Self, TypeAlias
from urllib.parse import urlsplit

from .const import MAX_ID_LENGTH
from .exceptions import TypeMismatchError, ValidationError

Money: TypeAlias = Decimal

_CURRENCY_RE = re.compile(r"[A-Z]{3}")
_LANGUAGE_RE = re.compile(r"[a-z]{2}")
_CLOCK_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")


def _require_string(cls: type, raw: Any, field: str | None) -> str:
    if not isinstance(raw, str):
        raise TypeMismatchError(
            f"{cls.__name__} must be a string.",
            field=field,
            raw=raw,
            kind=cls.__name__,
        )
    return raw


class _WireString:
    """Shared parse/to_wire behavior for string-backed primitives."""

    __slots__ = ()

    value: str

    @classmethod
    def parse(cls, raw: Any, field: str | None = None) -> Self:
        text = _require_string(cls, raw, field)
        try:
            return cls(text)
        except ValidationError as exc:
            raise ValidationError(
                exc.detail or "Invalid value.", field=field, raw=raw, kind=cls.__name__
            ) from exc

    def to_wire(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class _Identifier(_WireString):
    value: str

    max_length: ClassVar[int] = MAX_ID_LENGTH

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError(
                f"{type(self).__name__} must be a non-empty string.",
                raw=self.value,
                kind=type(self).__name__,
            )
        if len(self.value) > self.max_length:
            raise ValidationError(
                f"{type(self).__name__} must not exceed {self.max_length} characters.",
                raw=self.value,
                kind=type(self).__name__,
            )


@dataclass(frozen=True, slots=True)
class TariffId(_Identifier):
    """Identifies a tariff within the issuing platform."""


@dataclass(frozen=True, slots=True)
class TokenId(_Identifier):
    """Unique identifier of a token, e.g. the RFID card UID."""


@dataclass(frozen=True, slots=True)
class AuthId(_Identifier):
    """Identifier used to authorize a charging session."""


@dataclass(frozen=True, slots=True)
class Currency(_WireString):
    """ISO 4217 currency code, stored upper-case."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError("Currency must be a string.", raw=self.value, kind="Currency")
        normalized = self.value.strip().upper()
        if not _CURRENCY_RE.fullmatch(normalized):
            raise ValidationError(
                "Currency must be a three-letter ISO 4217 code.",
                raw=self.value,
                kind="Currency",
            )
        object.__setattr__(self, "value", normalized)


@dataclass(frozen=True, slots=True)
class Language(_WireString):
    """ISO 639-1 language code, stored lower-case."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError("Language must be a string.", raw=self.value, kind="Language")
        normalized = self.value.strip().lower()
        if not _LANGUAGE_RE.fullmatch(normalized):
            raise ValidationError(
                "Language must be a two-letter ISO 639-1 code.",
                raw=self.value,
                kind="Language",
            )
        object.__setattr__(self, "value", normalized)


@dataclass(frozen=True, slots=True)
class Url(_WireString):
    """Absolute http(s) URL."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("URL must be a non-empty string.", raw=self.value, kind="Url")
        if any(char.isspace() for char in self.value):
            raise ValidationError("URL must not contain whitespace.", raw=self.value, kind="Url")
        try:
            parts = urlsplit(self.value)
        except ValueError as exc:
            raise ValidationError("URL is malformed.", raw=self.value, kind="Url") from exc
        if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
            raise ValidationError(
                "URL must be an absolute http(s) URL.", raw=self.value, kind="Url"
            )


@dataclass(frozen=True, slots=True, order=True)
class ClockTime:
    """Time of day with minute resolution, wire form ``HH:MM``."""

    hour: int
    minute: int = 0

    def __post_init__(self) -> None:
        for name, value, upper in (("hour", self.hour, 23), ("minute", self.minute, 59)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{name} must be an integer.", raw=value, kind="ClockTime")
            if not 0 <= value <= upper:
                raise ValidationError(
                    f"{name} must be between 0 and {upper}.", raw=value, kind="ClockTime"
                )

    @classmethod
    def parse(cls, raw: Any, field: str | None = None) -> ClockTime:
        text = _require_string(cls, raw, field)
        match = _CLOCK_TIME_RE.fullmatch(text)
        if match is None:
            raise ValidationError(
                "Time must use the 24h HH:MM format.", field=field, raw=raw, kind="ClockTime"
            )
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_time(cls, value: time) -> ClockTime:
        return cls(value.hour, value.minute)

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def to_wire(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return self.to_wire()


def coerce_value(cls: type, value: Any, field: str) -> Any:
    """Accept an instance of ``cls`` or its wire string."""
    if isinstance(value, cls):
        return value
    if isinstance(value, str):
        try:
            return cls(value)
        except ValidationError as exc:
            raise ValidationError(
                exc.detail or "Invalid value.", field=field, raw=value, kind=cls.__name__
            ) from exc
        except ValueError as exc:
            raise ValidationError(
                f"Unknown {cls.__name__} value '{value}'.",
                field=field,
                raw=value,
                kind=cls.__name__,
            ) from exc
    raise ValidationError(
        f"Value must be a {cls.__name__}.", field=field, raw=value, kind=cls.__name__
    )


def coerce_money(value: Any, field: str) -> Money:
    if isinstance(value, bool):
        raise ValidationError("Value must be a number.", field=field, raw=value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, int | str):
        try:
            result = Decimal(value)
        except ArithmeticError as exc:
            raise ValidationError("Value must be a number.", field=field, raw=value) from exc
    else:
        raise ValidationError("Value must be a number.", field=field, raw=value)
    if not result.is_finite():
        raise ValidationError("Value must be a finite number.", field=field, raw=value)
    return result
