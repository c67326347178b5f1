"""Library exceptions."""

from __future__ import annotations

from typing import Any


class PyOCPIDataError(Exception):
    """Base exception for the library."""

    error_type = "unknown"
    default_error_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.detail = detail if detail is not None else message
        super().__init__(message if message is not None else self.detail)
        self.error_code = error_code if error_code is not None else self.default_error_code


class SchemaError(PyOCPIDataError):
    """Raised when a bundled wire schema is missing or invalid."""

    error_type = "schema"
    default_error_code = "schema_error"


class ParseError(PyOCPIDataError):
    """Raised when a wire value cannot be turned into a domain value."""

    error_type = "parse"
    default_error_code = "parse_error"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        raw: Any = None,
        kind: str | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code, detail=message)
        self.field = field
        self.raw = raw
        self.kind = kind

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.detail}"
        return self.detail or ""

    def at(self, prefix: str) -> ParseError:
        """Return a copy of this error with ``prefix`` prepended to its field path."""
        if not prefix:
            return self
        if not self.field:
            path = prefix
        elif self.field.startswith("["):
            path = f"{prefix}{self.field}"
        else:
            path = f"{prefix}.{self.field}"
        return type(self)(
            self.detail or "",
            field=path,
            raw=self.raw,
            kind=self.kind,
            error_code=self.error_code,
        )


class MissingFieldError(ParseError):
    """Raised when a required key is absent."""

    default_error_code = "missing_field"


class TypeMismatchError(ParseError):
    """Raised when a key holds a JSON node of the wrong type."""

    default_error_code = "type_mismatch"


class UnknownEnumValueError(ParseError):
    """Raised when an enum-valued field holds an unknown wire token."""

    default_error_code = "unknown_enum_value"


class ValidationError(ParseError):
    """Raised when a value violates a semantic invariant."""

    default_error_code = "validation_error"
