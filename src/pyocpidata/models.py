"""Composite value objects shared by tariffs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, ClassVar

from .codec import (
    as_bool,
    as_date,
    as_decimal,
    as_object,
    as_positive_int,
    as_seconds,
    as_string,
    as_wire,
    coerce_tuple,
    ensure_object,
    get_array,
    get_optional,
    get_required,
    nested,
    number_to_wire,
    put_optional,
)
from .enums import DayOfWeek, EnergySourceCategory, EnvironmentalImpactCategory, TariffDimension
from .exceptions import ValidationError
from .types import ClockTime, Language, Money, coerce_money, coerce_value
from .util import seconds_to_wire

MAX_DISPLAY_TEXT_LENGTH = 512


def _set(instance: object, name: str, value: Any) -> None:
    object.__setattr__(instance, name, value)


def _check_range(lower: Any, upper: Any, lower_name: str, upper_name: str) -> None:
    if lower is not None and upper is not None and lower > upper:
        raise ValidationError(
            f"{lower_name} must not be greater than {upper_name}.",
            field=lower_name,
            raw=lower,
        )


@dataclass(frozen=True, slots=True)
class DisplayText:
    language: Language
    text: str

    def __post_init__(self) -> None:
        _set(self, "language", coerce_value(Language, self.language, "language"))
        if not isinstance(self.text, str):
            raise ValidationError("Value must be a string.", field="text", raw=self.text)
        if len(self.text) > MAX_DISPLAY_TEXT_LENGTH:
            raise ValidationError(
                f"Value must not exceed {MAX_DISPLAY_TEXT_LENGTH} characters.",
                field="text",
                raw=self.text,
            )

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> DisplayText:
        data = ensure_object(data)
        return cls(
            language=get_required(data, "language", as_wire(Language)),
            text=get_required(data, "text", as_string),
        )

    def to_json(self) -> dict[str, Any]:
        return {"language": self.language.to_wire(), "text": self.text}


@dataclass(frozen=True, slots=True)
class EnergySource:
    category: EnergySourceCategory
    percentage: Decimal

    def __post_init__(self) -> None:
        _set(self, "category", coerce_value(EnergySourceCategory, self.category, "source"))
        percentage = coerce_money(self.percentage, "percentage")
        if not Decimal(0) <= percentage <= Decimal(100):
            raise ValidationError(
                "Value must be between 0 and 100.", field="percentage", raw=percentage
            )
        _set(self, "percentage", percentage)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> EnergySource:
        data = ensure_object(data)
        return cls(
            category=get_required(data, "source", as_wire(EnergySourceCategory)),
            percentage=get_required(data, "percentage", as_decimal),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "source": self.category.to_wire_token(),
            "percentage": number_to_wire(self.percentage),
        }


@dataclass(frozen=True, slots=True)
class EnvironmentalImpact:
    category: EnvironmentalImpactCategory
    amount: Decimal

    def __post_init__(self) -> None:
        _set(
            self,
            "category",
            coerce_value(EnvironmentalImpactCategory, self.category, "category"),
        )
        amount = coerce_money(self.amount, "amount")
        if amount < 0:
            raise ValidationError(
                "Value must be greater than or equal to 0.", field="amount", raw=amount
            )
        _set(self, "amount", amount)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> EnvironmentalImpact:
        data = ensure_object(data)
        # OCPI 2.1.1 names the category "source".
        key = "source" if data.get("category") is None and "source" in data else "category"
        return cls(
            category=get_required(data, key, as_wire(EnvironmentalImpactCategory)),
            amount=get_required(data, "amount", as_decimal),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "category": self.category.to_wire_token(),
            "amount": number_to_wire(self.amount),
        }


@dataclass(frozen=True, slots=True)
class EnergyMix:
    """Disclosure of the generation mix behind the supplied energy."""

    is_green_energy: bool
    energy_sources: tuple[EnergySource, ...] = ()
    environmental_impacts: tuple[EnvironmentalImpact, ...] = ()
    supplier_name: str | None = None
    energy_product_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.is_green_energy, bool):
            raise ValidationError(
                "Value must be a boolean.", field="is_green_energy", raw=self.is_green_energy
            )
        _set(
            self,
            "energy_sources",
            coerce_tuple(self.energy_sources, EnergySource, "energy_sources"),
        )
        _set(
            self,
            "environmental_impacts",
            coerce_tuple(self.environmental_impacts, EnvironmentalImpact, "environ_impact"),
        )
        for name in ("supplier_name", "energy_product_name"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValidationError("Value must be a string.", field=name, raw=value)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> EnergyMix:
        data = ensure_object(data)
        return cls(
            is_green_energy=get_required(data, "is_green_energy", as_bool),
            energy_sources=get_array(data, "energy_sources", as_object(EnergySource.from_json)),
            environmental_impacts=get_array(
                data, "environ_impact", as_object(EnvironmentalImpact.from_json)
            ),
            supplier_name=get_optional(data, "supplier_name", as_string),
            energy_product_name=get_optional(data, "energy_product_name", as_string),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"is_green_energy": self.is_green_energy}
        put_optional(result, "energy_sources", [source.to_json() for source in self.energy_sources])
        put_optional(
            result,
            "environ_impact",
            [impact.to_json() for impact in self.environmental_impacts],
        )
        put_optional(result, "supplier_name", self.supplier_name)
        put_optional(result, "energy_product_name", self.energy_product_name)
        return result


class PriceComponent:
    """Base of the price component variants, one subclass per tariff dimension.

    Every variant carries a non-negative ``price`` (excluding VAT) and an
    optional ``vat`` percentage. Energy and time based variants also carry the
    billing step: blocks of Wh for energy, blocks of seconds for time. A flat fee
    has no step and is always emitted with ``step_size`` 1.
    """

    __slots__ = ()

    dimension: ClassVar[TariffDimension]
    price: Money
    vat: Decimal | None

    @property
    def step_size(self) -> int:
        return 1

    def _validate_price(self) -> None:
        price = coerce_money(self.price, "price")
        if price < 0:
            raise ValidationError(
                "Value must be greater than or equal to 0.", field="price", raw=price
            )
        _set(self, "price", price)
        if self.vat is not None:
            vat = coerce_money(self.vat, "vat")
            if vat < 0:
                raise ValidationError(
                    "Value must be greater than or equal to 0.", field="vat", raw=vat
                )
            _set(self, "vat", vat)

    @staticmethod
    def _validate_step(value: Any, name: str) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValidationError("Value must be a positive integer.", field=name, raw=value)

    @staticmethod
    def charging_time(
        billing_increment: timedelta, price: Money | int | str, vat: Decimal | None = None
    ) -> TimePriceComponent:
        return TimePriceComponent(
            price=price,
            step_size_seconds=_duration_to_step(billing_increment),
            vat=vat,
        )

    @staticmethod
    def parking_time(
        billing_increment: timedelta, price: Money | int | str, vat: Decimal | None = None
    ) -> ParkingTimePriceComponent:
        return ParkingTimePriceComponent(
            price=price,
            step_size_seconds=_duration_to_step(billing_increment),
            vat=vat,
        )

    @staticmethod
    def energy(
        price: Money | int | str, step_size_wh: int = 1, vat: Decimal | None = None
    ) -> EnergyPriceComponent:
        return EnergyPriceComponent(price=price, step_size_wh=step_size_wh, vat=vat)

    @staticmethod
    def flat_rate(price: Money | int | str, vat: Decimal | None = None) -> FlatPriceComponent:
        return FlatPriceComponent(price=price, vat=vat)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> PriceComponent:
        data = ensure_object(data)
        dimension = get_required(data, "type", as_wire(TariffDimension))
        price = get_required(data, "price", as_decimal)
        vat = get_optional(data, "vat", as_decimal)
        variant = _VARIANTS[dimension]
        if variant is FlatPriceComponent:
            # Mandatory on the wire but meaningless for a flat fee.
            get_optional(data, "step_size", as_positive_int)
            return FlatPriceComponent(price=price, vat=vat)
        step_size = get_required(data, "step_size", as_positive_int)
        return variant(price, step_size, vat)

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.dimension.to_wire_token(),
            "price": number_to_wire(self.price),
        }
        put_optional(result, "vat", number_to_wire(self.vat))
        result["step_size"] = self.step_size
        return result


@dataclass(frozen=True, slots=True)
class EnergyPriceComponent(PriceComponent):
    """Price per kWh, billed in blocks of ``step_size_wh``."""

    dimension: ClassVar[TariffDimension] = TariffDimension.ENERGY

    price: Money
    step_size_wh: int = 1
    vat: Decimal | None = None

    def __post_init__(self) -> None:
        self._validate_price()
        self._validate_step(self.step_size_wh, "step_size")

    @property
    def step_size(self) -> int:
        return self.step_size_wh


@dataclass(frozen=True, slots=True)
class TimePriceComponent(PriceComponent):
    """Price per hour of charging, billed in blocks of ``step_size_seconds``."""

    dimension: ClassVar[TariffDimension] = TariffDimension.TIME

    price: Money
    step_size_seconds: int = 1
    vat: Decimal | None = None

    def __post_init__(self) -> None:
        self._validate_price()
        self._validate_step(self.step_size_seconds, "step_size")

    @property
    def step_size(self) -> int:
        return self.step_size_seconds

    @property
    def billing_increment(self) -> timedelta:
        return timedelta(seconds=self.step_size_seconds)


@dataclass(frozen=True, slots=True)
class ParkingTimePriceComponent(PriceComponent):
    """Price per hour of parking without charging."""

    dimension: ClassVar[TariffDimension] = TariffDimension.PARKING_TIME

    price: Money
    step_size_seconds: int = 1
    vat: Decimal | None = None

    def __post_init__(self) -> None:
        self._validate_price()
        self._validate_step(self.step_size_seconds, "step_size")

    @property
    def step_size(self) -> int:
        return self.step_size_seconds

    @property
    def billing_increment(self) -> timedelta:
        return timedelta(seconds=self.step_size_seconds)


@dataclass(frozen=True, slots=True)
class FlatPriceComponent(PriceComponent):
    """Flat fee per session."""

    dimension: ClassVar[TariffDimension] = TariffDimension.FLAT

    price: Money
    vat: Decimal | None = None

    def __post_init__(self) -> None:
        self._validate_price()


_VARIANTS: dict[TariffDimension, type[PriceComponent]] = {
    TariffDimension.ENERGY: EnergyPriceComponent,
    TariffDimension.FLAT: FlatPriceComponent,
    TariffDimension.PARKING_TIME: ParkingTimePriceComponent,
    TariffDimension.TIME: TimePriceComponent,
}


def _duration_to_step(value: timedelta) -> int:
    if not isinstance(value, timedelta):
        raise ValidationError(
            "Billing increment must be a timedelta.", field="step_size", raw=value
        )
    seconds = seconds_to_wire(value)
    if seconds < 1:
        raise ValidationError(
            "Billing increment must be at least one second.", field="step_size", raw=value
        )
    return seconds


@dataclass(frozen=True, slots=True)
class TariffRestriction:
    """Conditions under which a tariff element applies.

    All fields are optional; an empty restriction applies unconditionally.
    ``end_date`` is exclusive. ``start_time`` may be later than ``end_time`` for
    windows spanning midnight.
    """

    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    start_date: date | None = None
    end_date: date | None = None
    min_kwh: Decimal | None = None
    max_kwh: Decimal | None = None
    min_power: Decimal | None = None
    max_power: Decimal | None = None
    min_duration: timedelta | None = None
    max_duration: timedelta | None = None
    day_of_week: frozenset[DayOfWeek] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in ("start_time", "end_time"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, ClockTime):
                if isinstance(value, str):
                    _set(self, name, ClockTime.parse(value, name))
                else:
                    raise ValidationError("Value must be a ClockTime.", field=name, raw=value)
        for name in ("min_kwh", "max_kwh", "min_power", "max_power"):
            value = getattr(self, name)
            if value is None:
                continue
            amount = coerce_money(value, name)
            if amount < 0:
                raise ValidationError(
                    "Value must be greater than or equal to 0.", field=name, raw=amount
                )
            _set(self, name, amount)
        for name in ("min_duration", "max_duration"):
            value = getattr(self, name)
            if value is None:
                continue
            if not isinstance(value, timedelta):
                raise ValidationError("Value must be a timedelta.", field=name, raw=value)
            if value < timedelta(0):
                raise ValidationError("Duration must not be negative.", field=name, raw=value)
        _set(
            self,
            "day_of_week",
            frozenset(coerce_value(DayOfWeek, day, "day_of_week") for day in self.day_of_week),
        )
        _check_range(self.start_date, self.end_date, "start_date", "end_date")
        _check_range(self.min_kwh, self.max_kwh, "min_kwh", "max_kwh")
        _check_range(self.min_power, self.max_power, "min_power", "max_power")
        _check_range(self.min_duration, self.max_duration, "min_duration", "max_duration")

    @property
    def is_unconditional(self) -> bool:
        return not self.to_json()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> TariffRestriction:
        data = ensure_object(data)
        return cls(
            start_time=get_optional(data, "start_time", as_wire(ClockTime)),
            end_time=get_optional(data, "end_time", as_wire(ClockTime)),
            start_date=get_optional(data, "start_date", as_date),
            end_date=get_optional(data, "end_date", as_date),
            min_kwh=get_optional(data, "min_kwh", as_decimal),
            max_kwh=get_optional(data, "max_kwh", as_decimal),
            min_power=get_optional(data, "min_power", as_decimal),
            max_power=get_optional(data, "max_power", as_decimal),
            min_duration=get_optional(data, "min_duration", as_seconds),
            max_duration=get_optional(data, "max_duration", as_seconds),
            day_of_week=frozenset(get_array(data, "day_of_week", as_wire(DayOfWeek))),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        put_optional(result, "start_time", self.start_time.to_wire() if self.start_time else None)
        put_optional(result, "end_time", self.end_time.to_wire() if self.end_time else None)
        put_optional(
            result, "start_date", self.start_date.isoformat() if self.start_date else None
        )
        put_optional(result, "end_date", self.end_date.isoformat() if self.end_date else None)
        put_optional(result, "min_kwh", number_to_wire(self.min_kwh))
        put_optional(result, "max_kwh", number_to_wire(self.max_kwh))
        put_optional(result, "min_power", number_to_wire(self.min_power))
        put_optional(result, "max_power", number_to_wire(self.max_power))
        if self.min_duration is not None:
            result["min_duration"] = seconds_to_wire(self.min_duration)
        if self.max_duration is not None:
            result["max_duration"] = seconds_to_wire(self.max_duration)
        put_optional(
            result,
            "day_of_week",
            [day.to_wire_token() for day in sorted(self.day_of_week, key=lambda d: d.weekday)],
        )
        return result


@dataclass(frozen=True, slots=True)
class TariffElement:
    """Price components that apply together under a set of restrictions."""

    price_components: tuple[PriceComponent, ...]
    restrictions: tuple[TariffRestriction, ...] = ()

    def __post_init__(self) -> None:
        components = coerce_tuple(self.price_components, PriceComponent, "price_components")
        if not components:
            raise ValidationError(
                "At least one price component is required.", field="price_components"
            )
        _set(self, "price_components", components)
        _set(
            self,
            "restrictions",
            coerce_tuple(self.restrictions, TariffRestriction, "restrictions"),
        )

    @property
    def is_unconditional(self) -> bool:
        return all(restriction.is_unconditional for restriction in self.restrictions)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> TariffElement:
        data = ensure_object(data)
        components = get_array(
            data, "price_components", as_object(PriceComponent.from_json), required=True
        )
        raw_restrictions = data.get("restrictions")
        if isinstance(raw_restrictions, Mapping):
            # OCPI 2.1.1 carries a single restrictions object.
            restrictions: tuple[TariffRestriction, ...] = (
                nested("restrictions", lambda: TariffRestriction.from_json(raw_restrictions)),
            )
        else:
            restrictions = get_array(
                data, "restrictions", as_object(TariffRestriction.from_json)
            )
        return cls(
            price_components=nested("price_components", lambda: _non_empty(components)),
            restrictions=restrictions,
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "price_components": [component.to_json() for component in self.price_components]
        }
        put_optional(
            result, "restrictions", [restriction.to_json() for restriction in self.restrictions]
        )
        return result


def _non_empty(values: tuple[Any, ...]) -> tuple[Any, ...]:
    if not values:
        raise ValidationError("At least one entry is required.")
    return values

