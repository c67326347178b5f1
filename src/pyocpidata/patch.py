"""JSON merge patching (RFC 7386) and change fingerprints for records."""

from __future__ import annotations

import base64
import copy
import hashlib
import json
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Protocol, TypeVar

from .exceptions import ParseError
from .util import format_utc_timestamp, parse_timestamp, utc_now

_LOGGER = logging.getLogger(__name__)


class WireRecord(Protocol):
    last_updated: datetime

    def to_json(self) -> dict[str, Any]: ...


R = TypeVar("R", bound=WireRecord)


def merge_patch(target: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``target`` with ``patch`` merged in; ``None`` removes a key."""
    result = copy.deepcopy(dict(target))
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, Mapping):
            existing = result.get(key)
            base = existing if isinstance(existing, Mapping) else {}
            result[key] = merge_patch(base, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def compute_etag(record: WireRecord) -> str:
    payload = json.dumps(record.to_json(), separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(payload.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def patch_record(
    record: R,
    patch: Any,
    *,
    id_key: str,
    what: str,
    try_parse: Callable[[Mapping[str, Any]], tuple[R | None, str | None]],
    allow_downgrades: bool = False,
    now: datetime | None = None,
) -> tuple[R, str | None]:
    """Apply a merge patch and re-parse the result.

    Returns the patched record and ``None``, or the unchanged record and an
    error message.
    """
    if not isinstance(patch, Mapping):
        return _reject(record, f"The given {what} patch must be a JSON object.")
    current = record.to_json()
    if id_key in patch and patch[id_key] != current[id_key]:
        return _reject(record, f"Patching the '{id_key}' of {what} is not allowed.")
    patch = dict(patch)
    raw_last_updated = patch.get("last_updated")
    if raw_last_updated is None:
        patch["last_updated"] = format_utc_timestamp(now or utc_now())
    else:
        try:
            last_updated = parse_timestamp(raw_last_updated, "last_updated")
        except ParseError as exc:
            return _reject(record, f"Invalid {what} patch: {exc}")
        if not allow_downgrades and last_updated <= record.last_updated:
            return _reject(
                record,
                f"The 'last_updated' timestamp of the {what} patch must be newer than "
                f"the timestamp of the existing {what}.",
            )
    patched, error = try_parse(merge_patch(current, patch))
    if patched is None:
        return _reject(record, f"Invalid JSON merge patch of {what}: {error}")
    return patched, None


def _reject(record: R, message: str) -> tuple[R, str]:
    _LOGGER.debug("Patch rejected: %s", message)
    return record, message
