"""pyOCPIData package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .enums import (
    DayOfWeek,
    EnergySourceCategory,
    EnvironmentalImpactCategory,
    TariffDimension,
    TokenType,
    WhitelistType,
)
from .exceptions import (
    MissingFieldError,
    ParseError,
    PyOCPIDataError,
    SchemaError,
    TypeMismatchError,
    UnknownEnumValueError,
    ValidationError,
)
from .models import (
    DisplayText,
    EnergyMix,
    EnergyPriceComponent,
    EnergySource,
    EnvironmentalImpact,
    FlatPriceComponent,
    ParkingTimePriceComponent,
    PriceComponent,
    TariffElement,
    TariffRestriction,
    TimePriceComponent,
)
from .tariff import Tariff
from .token import Token
from .types import AuthId, ClockTime, Currency, Language, Money, TariffId, TokenId, Url

try:
    __version__ = version("pyocpidata")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "AuthId",
    "ClockTime",
    "Currency",
    "DayOfWeek",
    "DisplayText",
    "EnergyMix",
    "EnergyPriceComponent",
    "EnergySource",
    "EnergySourceCategory",
    "EnvironmentalImpact",
    "EnvironmentalImpactCategory",
    "FlatPriceComponent",
    "Language",
    "MissingFieldError",
    "Money",
    "ParkingTimePriceComponent",
    "ParseError",
    "PriceComponent",
    "PyOCPIDataError",
    "SchemaError",
    "Tariff",
    "TariffDimension",
    "TariffElement",
    "TariffId",
    "TariffRestriction",
    "TimePriceComponent",
    "Token",
    "TokenId",
    "TokenType",
    "TypeMismatchError",
    "UnknownEnumValueError",
    "Url",
    "ValidationError",
    "WhitelistType",
    "__version__",
]
