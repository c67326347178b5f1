"""Field extraction and emission helpers shared by all codecs.

Parsing walks only the declared keys of a JSON object; unknown keys are never
looked at. The first failure short-circuits the current object and bubbles up
with its field path prefixed, so a record ends up with a single error such as
``tariff_elements[0].price_components[1].step_size: ...``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Protocol, TypeVar

from .exceptions import MissingFieldError, ParseError, TypeMismatchError, ValidationError
from .util import decimal_to_wire, parse_date, parse_timestamp, to_decimal

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

Coercer = Callable[[Any, str], T]


class WireParsable(Protocol):
    @classmethod
    def parse(cls, raw: Any, field: str | None = None) -> Any: ...


def ensure_object(data: Any, field: str | None = None) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeMismatchError("Value must be a JSON object.", field=field, raw=data)
    return data


def get_required(data: Mapping[str, Any], key: str, coercer: Coercer[T]) -> T:
    if key not in data:
        raise MissingFieldError(f"The '{key}' field is missing.", field=key)
    raw = data[key]
    if raw is None:
        raise TypeMismatchError(f"The '{key}' field must not be null.", field=key)
    return coercer(raw, key)


def get_optional(data: Mapping[str, Any], key: str, coercer: Coercer[T]) -> T | None:
    raw = data.get(key)
    if raw is None:
        return None
    return coercer(raw, key)


def get_array(
    data: Mapping[str, Any],
    key: str,
    element_coercer: Coercer[T],
    *,
    required: bool = False,
) -> tuple[T, ...]:
    if required and key not in data:
        raise MissingFieldError(f"The '{key}' field is missing.", field=key)
    raw = data.get(key)
    if raw is None:
        if required:
            raise TypeMismatchError(f"The '{key}' field must not be null.", field=key)
        return ()
    if not isinstance(raw, list):
        raise TypeMismatchError("Value must be a JSON array.", field=key, raw=raw)
    items: list[T] = []
    for index, item in enumerate(raw):
        path = f"{key}[{index}]"
        if item is None:
            raise TypeMismatchError("Array elements must not be null.", field=path)
        items.append(element_coercer(item, path))
    return tuple(items)


def nested(field: str, parse: Callable[[], T]) -> T:
    """Run ``parse`` and prefix any parse error with ``field``."""
    try:
        return parse()
    except ParseError as exc:
        raise exc.at(field) from exc


def as_string(raw: Any, field: str) -> str:
    if not isinstance(raw, str):
        raise TypeMismatchError("Value must be a string.", field=field, raw=raw)
    return raw


def as_non_empty_string(raw: Any, field: str) -> str:
    text = as_string(raw, field)
    if not text.strip():
        raise ValidationError("Value must be a non-empty string.", field=field, raw=raw)
    return text


def as_bool(raw: Any, field: str) -> bool:
    if not isinstance(raw, bool):
        raise TypeMismatchError("Value must be a boolean.", field=field, raw=raw)
    return raw


def as_decimal(raw: Any, field: str) -> Decimal:
    return to_decimal(raw, field)


def as_int(raw: Any, field: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        raise TypeMismatchError("Value must be an integer.", field=field, raw=raw)
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError("Value must be a whole number.", field=field, raw=raw)
        return int(raw)
    return raw


def as_positive_int(raw: Any, field: str) -> int:
    value = as_int(raw, field)
    if value < 1:
        raise ValidationError("Value must be greater than 0.", field=field, raw=raw)
    return value


def as_seconds(raw: Any, field: str) -> timedelta:
    value = as_int(raw, field)
    if value < 0:
        raise ValidationError("Duration must not be negative.", field=field, raw=raw)
    try:
        return timedelta(seconds=value)
    except OverflowError as exc:
        raise ValidationError("Duration is out of range.", field=field, raw=raw) from exc


def as_date(raw: Any, field: str) -> date:
    return parse_date(raw, field)


def as_timestamp(raw: Any, field: str) -> datetime:
    return parse_timestamp(raw, field)


def as_wire(cls: type[WireParsable]) -> Coercer[Any]:
    """Coercer for primitive value types and enumerations."""

    def coerce(raw: Any, field: str) -> Any:
        return cls.parse(raw, field)

    return coerce


def as_object(from_json: Callable[[Mapping[str, Any]], T]) -> Coercer[T]:
    """Coercer for composite values; errors are reported under ``field``."""

    def coerce(raw: Any, field: str) -> T:
        data = ensure_object(raw, field)
        return nested(field, lambda: from_json(data))

    return coerce


def put_optional(target: dict[str, Any], key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, tuple | list | frozenset) and not value:
        return
    target[key] = value


def number_to_wire(value: Decimal | None) -> int | float | None:
    if value is None:
        return None
    return decimal_to_wire(value)


def try_parse(
    parser: Callable[[Mapping[str, Any]], T],
    data: Any,
    what: str,
) -> tuple[T | None, str | None]:
    """Run ``parser`` and reduce any failure to a single error message."""
    if not isinstance(data, Mapping) or not data:
        message = f"The given JSON representation of {what} must be a non-empty object."
        _LOGGER.debug("Parsing %s failed: %s", what, message)
        return None, message
    try:
        return parser(data), None
    except ParseError as exc:
        message = f"The given JSON representation of {what} is invalid: {exc}"
        _LOGGER.debug("Parsing %s failed: %s", what, message)
        return None, message


def coerce_tuple(values: Iterable[Any], item_type: type, name: str) -> tuple[Any, ...]:
    """Freeze a sequence given to a constructor, checking its element type."""
    if isinstance(values, str | bytes | Mapping) or not isinstance(values, Iterable):
        raise TypeMismatchError("Value must be a sequence.", field=name, raw=values)
    items = tuple(values)
    for index, item in enumerate(items):
        if not isinstance(item, item_type):
            raise ValidationError(
                f"Value must be a {item_type.__name__}.", field=f"{name}[{index}]", raw=item
            )
    return items
