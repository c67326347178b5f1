"""Tariff record."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from functools import total_ordering
from typing import Any

from . import codec
from .codec import (
    as_object,
    as_timestamp,
    as_wire,
    coerce_tuple,
    ensure_object,
    get_array,
    get_optional,
    get_required,
    put_optional,
)
from .const import LEGACY_TARIFF_ELEMENTS_KEY
from .exceptions import MissingFieldError, ValidationError
from .models import DisplayText, EnergyMix, TariffElement
from .patch import compute_etag, patch_record
from .types import Currency, TariffId, Url, coerce_value
from .util import format_utc_timestamp, normalize_timestamp, utc_now


@total_ordering
@dataclass(frozen=True, slots=True)
class Tariff:
    """Pricing rules for charging sessions.

    ``elements`` must not be empty. ``last_updated`` is kept in UTC with
    millisecond precision, so two tariffs compare equal exactly when their
    wire timestamps do.
    """

    id: TariffId
    currency: Currency
    elements: tuple[TariffElement, ...]
    alt_text: tuple[DisplayText, ...] = ()
    alt_url: Url | None = None
    energy_mix: EnergyMix | None = None
    last_updated: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", coerce_value(TariffId, self.id, "id"))
        object.__setattr__(self, "currency", coerce_value(Currency, self.currency, "currency"))
        elements = coerce_tuple(self.elements, TariffElement, "tariff_elements")
        if not elements:
            raise ValidationError(
                "At least one tariff element is required.", field="tariff_elements"
            )
        object.__setattr__(self, "elements", elements)
        object.__setattr__(
            self, "alt_text", coerce_tuple(self.alt_text, DisplayText, "tariff_alt_text")
        )
        if self.alt_url is not None:
            object.__setattr__(
                self, "alt_url", coerce_value(Url, self.alt_url, "tariff_alt_url")
            )
        if self.energy_mix is not None and not isinstance(self.energy_mix, EnergyMix):
            raise ValidationError(
                "Value must be an EnergyMix.", field="energy_mix", raw=self.energy_mix
            )
        try:
            last_updated = normalize_timestamp(self.last_updated)
        except ValidationError as exc:
            raise exc.at("last_updated") from exc
        object.__setattr__(self, "last_updated", last_updated)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Tariff):
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
        tariff_id: TariffId | str | None = None,
    ) -> Tariff:
        """Build a tariff from its wire form, raising on the first error.

        ``tariff_id`` is the id taken from a request path, if any. It stands in
        for a missing ``id`` and must match one that is present.
        """
        data = ensure_object(data)
        expected_id = coerce_value(TariffId, tariff_id, "id") if tariff_id is not None else None
        body_id = get_optional(data, "id", as_wire(TariffId))
        if body_id is None and expected_id is None:
            raise MissingFieldError("The 'id' field is missing.", field="id")
        if body_id is not None and expected_id is not None and body_id != expected_id:
            raise ValidationError(
                "The tariff id in the body does not match the expected tariff id.",
                field="id",
                raw=body_id.value,
            )
        currency = get_required(data, "currency", as_wire(Currency))
        alt_text = get_array(data, "tariff_alt_text", as_object(DisplayText.from_json))
        alt_url = get_optional(data, "tariff_alt_url", as_wire(Url))
        elements_key = "tariff_elements"
        if data.get(elements_key) is None and data.get(LEGACY_TARIFF_ELEMENTS_KEY) is not None:
            elements_key = LEGACY_TARIFF_ELEMENTS_KEY
        elements = get_array(
            data, elements_key, as_object(TariffElement.from_json), required=True
        )
        energy_mix = get_optional(data, "energy_mix", as_object(EnergyMix.from_json))
        last_updated = get_required(data, "last_updated", as_timestamp)
        if not elements:
            raise ValidationError(
                "At least one tariff element is required.", field=elements_key
            )
        return cls(
            id=body_id or expected_id,
            currency=currency,
            elements=elements,
            alt_text=alt_text,
            alt_url=alt_url,
            energy_mix=energy_mix,
            last_updated=last_updated,
        )

    @classmethod
    def try_parse(
        cls,
        data: Any,
        *,
        tariff_id: TariffId | str | None = None,
    ) -> tuple[Tariff | None, str | None]:
        """Parse a tariff; returns ``(tariff, None)`` or ``(None, error message)``."""
        return codec.try_parse(
            lambda payload: cls.from_json(payload, tariff_id=tariff_id),
            data,
            "a tariff",
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id.to_wire(),
            "currency": self.currency.to_wire(),
        }
        put_optional(result, "tariff_alt_text", [text.to_json() for text in self.alt_text])
        put_optional(result, "tariff_alt_url", self.alt_url.to_wire() if self.alt_url else None)
        result["tariff_elements"] = [element.to_json() for element in self.elements]
        put_optional(result, "energy_mix", self.energy_mix.to_json() if self.energy_mix else None)
        result["last_updated"] = format_utc_timestamp(self.last_updated)
        return result

    def try_patch(
        self,
        patch: Any,
        *,
        allow_downgrades: bool = False,
        now: datetime | None = None,
    ) -> tuple[Tariff, str | None]:
        """Apply a JSON merge patch.

        Returns the patched tariff and ``None``, or this tariff and the reason
        the patch was rejected.
        """
        return patch_record(
            self,
            patch,
            id_key="id",
            what="tariff",
            try_parse=Tariff.try_parse,
            allow_downgrades=allow_downgrades,
            now=now,
        )

    def __str__(self) -> str:
        parts = [f"{self.id} {self.currency}", f"{len(self.elements)} tariff element(s)"]
        if self.alt_text:
            parts.append(f"text: {self.alt_text[0].text}")
        if self.alt_url:
            parts.append(f"url: {self.alt_url}")
        parts.append(f"last updated: {format_utc_timestamp(self.last_updated)}")
        return ", ".join(parts)
