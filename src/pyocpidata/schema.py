"""Bundled JSON schemas for emitted tariff and token documents."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from importlib import resources
from importlib.resources.abc import Traversable
from types import MappingProxyType
from typing import Any

import jsonschema

from .exceptions import SchemaError, ValidationError

_LOGGER = logging.getLogger(__name__)

SCHEMA_SUFFIX = ".schema.json"
SCHEMA_NAMES = ("tariff", "token")
_SCHEMA_CACHE: Mapping[str, Mapping[str, Any]] = MappingProxyType({})


def _schema_root() -> Traversable:
    return resources.files("pyocpidata") / "schemas"


def _read_schema(name: str) -> dict[str, Any]:
    schema_path = _schema_root() / f"{name}{SCHEMA_SUFFIX}"
    if not schema_path.is_file():
        raise SchemaError(f"Schema '{name}' was not found.")
    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Schema '{name}' is not valid JSON.") from exc
    try:
        jsonschema.Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as exc:
        raise SchemaError(f"Schema '{name}' is invalid: {exc.message}") from exc
    return schema


def load_schema(name: str) -> Mapping[str, Any]:
    global _SCHEMA_CACHE
    cached = _SCHEMA_CACHE.get(name)
    if cached is not None:
        return cached
    schema = _read_schema(name)
    _LOGGER.debug("Loaded schema %s", name)
    updated = dict(_SCHEMA_CACHE)
    updated[name] = MappingProxyType(schema)
    _SCHEMA_CACHE = MappingProxyType(updated)
    return _SCHEMA_CACHE[name]


def clear_schema_cache() -> None:
    """Clear cached schemas (used in tests)."""
    global _SCHEMA_CACHE
    _SCHEMA_CACHE = MappingProxyType({})


def _error_path(error: jsonschema.ValidationError) -> str | None:
    path = ""
    for part in error.absolute_path:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or None


def validate_document(document: Any, name: str) -> None:
    """Check ``document`` against the bundled schema ``name``.

    Raises ``ValidationError`` naming the first failing path (the most
    relevant error as ranked by jsonschema).
    """
    schema = load_schema(name)
    validator = jsonschema.Draft202012Validator(dict(schema))
    error = jsonschema.exceptions.best_match(validator.iter_errors(document))
    if error is None:
        return
    raise ValidationError(
        error.message,
        field=_error_path(error),
        raw=error.instance,
        kind=name,
    )
