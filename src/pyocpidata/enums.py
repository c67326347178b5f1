"""Closed sets of wire tokens."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Self

from .exceptions import TypeMismatchError, UnknownEnumValueError, ValidationError


class WireEnum(StrEnum):
    """Enumeration whose values are the exact wire strings."""

    @classmethod
    def parse_wire_token(cls, raw: Any, field: str | None = None) -> Self:
        if not isinstance(raw, str):
            raise TypeMismatchError(
                f"{cls.__name__} must be a string.", field=field, raw=raw, kind=cls.__name__
            )
        try:
            return cls(raw)
        except ValueError as exc:
            raise UnknownEnumValueError(
                f"Unknown {cls.__name__} value '{raw}'.",
                field=field,
                raw=raw,
                kind=cls.__name__,
            ) from exc

    # Alias so enums plug into the same coercers as the primitive types.
    parse = parse_wire_token

    def to_wire_token(self) -> str:
        return self.value

    def to_wire(self) -> str:
        return self.value


class TokenType(WireEnum):
    AD_HOC_USER = "AD_HOC_USER"
    APP_USER = "APP_USER"
    OTHER = "OTHER"
    RFID = "RFID"


class WhitelistType(WireEnum):
    """How a token's validity has to be checked before charging."""

    ALWAYS = "ALWAYS"
    ALLOWED = "ALLOWED"
    ALLOWED_OFFLINE = "ALLOWED_OFFLINE"
    NEVER = "NEVER"


class EnergySourceCategory(WireEnum):
    NUCLEAR = "NUCLEAR"
    GENERAL_FOSSIL = "GENERAL_FOSSIL"
    COAL = "COAL"
    GAS = "GAS"
    GENERAL_GREEN = "GENERAL_GREEN"
    SOLAR = "SOLAR"
    WIND = "WIND"
    WATER = "WATER"


class EnvironmentalImpactCategory(WireEnum):
    NUCLEAR_WASTE = "NUCLEAR_WASTE"
    CARBON_DIOXIDE = "CARBON_DIOXIDE"


class TariffDimension(WireEnum):
    """Kind of a price component."""

    ENERGY = "ENERGY"
    FLAT = "FLAT"
    PARKING_TIME = "PARKING_TIME"
    TIME = "TIME"


class DayOfWeek(WireEnum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_weekday(cls, weekday: int) -> DayOfWeek:
        """Map ``date.weekday()`` (Monday is 0) to a day."""
        if isinstance(weekday, bool) or not isinstance(weekday, int) or not 0 <= weekday <= 6:
            raise ValidationError(
                "Weekday must be an integer between 0 and 6.", raw=weekday, kind=cls.__name__
            )
        return list(cls)[weekday]

    @property
    def weekday(self) -> int:
        return list(DayOfWeek).index(self)
