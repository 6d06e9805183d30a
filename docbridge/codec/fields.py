"""Typed field envelope used on the document store wire."""

from __future__ import annotations

import collections.abc as cabc
import enum
import typing as typ

import msgspec

from docbridge.logging import get_logger, log_debug

logger = get_logger(__name__)

FieldScalar = str | bool | float


class FieldKind(enum.StrEnum):
    """Field variants, valued by their wire key."""

    TEXT = "stringValue"
    INTEGER = "integerValue"
    FLOAT = "doubleValue"
    BOOLEAN = "booleanValue"
    TIMESTAMP = "timestampValue"


class TypedField(msgspec.Struct, frozen=True):
    """One populated field variant and its wire-ready value.

    Integers travel as decimal text and timestamps as RFC 3339 strings, so
    ``value`` is always already in the representation the store expects.
    Use the classmethod constructors rather than building instances by hand.
    """

    kind: FieldKind
    value: FieldScalar

    @classmethod
    def text(cls, value: str) -> TypedField:
        """Build a text field."""
        return cls(FieldKind.TEXT, value)

    @classmethod
    def integer(cls, value: int) -> TypedField:
        """Build an integer field carrying ``value`` as decimal text."""
        return cls(FieldKind.INTEGER, str(value))

    @classmethod
    def double(cls, value: float) -> TypedField:
        """Build a floating-point field."""
        return cls(FieldKind.FLOAT, float(value))

    @classmethod
    def boolean(cls, value: bool) -> TypedField:  # noqa: FBT001
        """Build a boolean field."""
        return cls(FieldKind.BOOLEAN, value)

    @classmethod
    def timestamp(cls, value: str) -> TypedField:
        """Build a timestamp field from a formatted instant string."""
        return cls(FieldKind.TIMESTAMP, value)

    def to_wire(self) -> dict[str, FieldScalar]:
        """Return the single-key envelope, e.g. ``{"stringValue": "Ali"}``."""
        return {self.kind.value: self.value}


def _coerce_variant(kind: FieldKind, raw: object) -> FieldScalar | None:
    """Return ``raw`` if it has the shape ``kind`` requires, else ``None``."""
    if kind is FieldKind.BOOLEAN:
        return raw if isinstance(raw, bool) else None
    if isinstance(raw, bool):
        return None
    if kind is FieldKind.FLOAT:
        return float(raw) if isinstance(raw, int | float) else None
    if kind is FieldKind.INTEGER and isinstance(raw, int):
        return str(raw)
    return raw if isinstance(raw, str) else None


def field_from_wire(envelope: object) -> TypedField | None:
    """Parse a wire envelope, returning ``None`` when no variant is usable.

    Variants are probed in declaration order, so an envelope carrying more
    than one key resolves to the first recognised, populated one. Envelopes
    holding only unknown keys (``mapValue``, ``nullValue``...) or only
    ``null`` values yield ``None``.
    """
    if not isinstance(envelope, dict):
        return None
    mapping = typ.cast("dict[str, object]", envelope)
    for kind in FieldKind:
        raw = mapping.get(kind.value)
        if raw is None:
            continue
        value = _coerce_variant(kind, raw)
        if value is not None:
            return TypedField(kind, value)
    return None


def fields_to_wire(
    fields: cabc.Mapping[str, TypedField],
) -> dict[str, dict[str, FieldScalar]]:
    """Render a typed field map as the JSON-ready ``fields`` object."""
    return {name: field.to_wire() for name, field in fields.items()}


def fields_from_wire(raw: object) -> dict[str, TypedField]:
    """Parse a wire ``fields`` object, dropping entries with no usable variant."""
    if not isinstance(raw, dict):
        return {}
    parsed: dict[str, TypedField] = {}
    for name, envelope in typ.cast("dict[str, object]", raw).items():
        field = field_from_wire(envelope)
        if field is None:
            log_debug(logger, "Dropping field %r with no usable variant", name)
            continue
        parsed[name] = field
    return parsed
