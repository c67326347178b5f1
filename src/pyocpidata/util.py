"""Shared utilities for validation and normalization."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal, InvalidOperation

from .const import TIMESTAMP_PRECISION
from .exceptions import TypeMismatchError, ValidationError


def parse_timestamp(value: str, field: str | None = None) -> datetime:
    if not isinstance(value, str):
        raise TypeMismatchError("Timestamp must be a string.", field=field, raw=value)
    raw = value.strip()
    if not raw:
        raise ValidationError("Timestamp must be a non-empty string.", field=field, raw=value)
    if raw.endswith("Z") or raw.endswith("z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(
            "Timestamp is not a valid ISO 8601 value.", field=field, raw=value
        ) from exc
    if parsed.tzinfo is None:
        raise ValidationError(
            "Timestamp must include timezone information.", field=field, raw=value
        )
    try:
        return normalize_timestamp(parsed)
    except ValidationError as exc:
        raise ValidationError(exc.detail or "Invalid timestamp.", field=field, raw=value) from exc


def normalize_timestamp(value: datetime) -> datetime:
    """Convert to UTC and truncate to millisecond precision."""
    if not isinstance(value, datetime):
        raise ValidationError("Timestamp must be a datetime.", raw=value)
    if value.tzinfo is None:
        raise ValidationError("Timestamp must include timezone information.", raw=value)
    try:
        utc = value.astimezone(UTC)
    except OverflowError as exc:
        raise ValidationError("Timestamp is out of range.", raw=value) from exc
    return utc.replace(microsecond=utc.microsecond - utc.microsecond % 1000)


def format_utc_timestamp(value: datetime) -> str:
    normalized = normalize_timestamp(value)
    return normalized.isoformat(timespec=TIMESTAMP_PRECISION).replace("+00:00", "Z")


def utc_now() -> datetime:
    return normalize_timestamp(datetime.now(UTC))


def parse_date(value: str, field: str | None = None) -> date:
    if not isinstance(value, str):
        raise TypeMismatchError("Date must be a string.", field=field, raw=value)
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError(
            "Date is not a valid YYYY-MM-DD value.", field=field, raw=value
        ) from exc


def to_decimal(value: object, field: str | None = None) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeMismatchError("Value must be a number.", field=field, raw=value)
    elif isinstance(value, float) and not math.isfinite(value):
        raise ValidationError("Value must be a finite number.", field=field, raw=value)
    else:
        try:
            # str() keeps the shortest repr so 1.12 stays Decimal("1.12").
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValidationError("Value is not a valid number.", field=field, raw=value) from exc
    if not result.is_finite():
        raise ValidationError("Value must be a finite number.", field=field, raw=value)
    return result


def decimal_to_wire(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def seconds_to_wire(value: timedelta) -> int:
    return round(value.total_seconds())
