"""Closed value type for generic record entries.

Records arrive as arbitrary JSON objects. :func:`classify` inspects each
value once and maps it onto one of five tagged variants, so the encoder can
branch exhaustively instead of repeating runtime type checks.
"""

from __future__ import annotations

import math
import sys

import msgspec

from docbridge.errors import EncodingError


class TextValue(msgspec.Struct, frozen=True, tag="text"):
    """A plain string."""

    value: str


class IntegerValue(msgspec.Struct, frozen=True, tag="integer"):
    """An integral number of any magnitude."""

    value: int


class FloatValue(msgspec.Struct, frozen=True, tag="float"):
    """A finite number with a fractional component."""

    value: float


class BooleanValue(msgspec.Struct, frozen=True, tag="boolean"):
    """A boolean."""

    value: bool


class OpaqueValue(msgspec.Struct, frozen=True, tag="opaque"):
    """A value with no dedicated field type, held as canonical JSON text.

    Objects, arrays and ``null`` collapse to their compact JSON
    serialisation. Decoding yields the text back, not the structure.
    """

    json: str


RecordValue = TextValue | IntegerValue | FloatValue | BooleanValue | OpaqueValue


def _classify_number(field: str, value: float) -> RecordValue:
    if not math.isfinite(value):
        raise EncodingError.non_finite(field, value)
    if value.is_integer():
        return IntegerValue(int(value))
    return FloatValue(value)


def _classify_integer(field: str, value: int) -> IntegerValue:
    # Integers travel as decimal text, bounded by the interpreter's
    # int/str conversion limit (4300 digits unless reconfigured).
    try:
        str(value)
    except ValueError as exc:
        raise EncodingError.integer_too_long(
            field, sys.get_int_max_str_digits()
        ) from exc
    return IntegerValue(value)


def _opaque(field: str, value: object) -> OpaqueValue:
    try:
        encoded = msgspec.json.encode(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise EncodingError.unserialisable(field, type(value).__name__) from exc
    return OpaqueValue(encoded.decode("utf-8"))


def classify(field: str, value: object) -> RecordValue:
    """Map a raw record value onto its :data:`RecordValue` variant.

    Parameters
    ----------
    field
        Name of the record entry, used only for error context.
    value
        Raw value as parsed from JSON or supplied by a Python caller.

    Returns
    -------
    RecordValue
        The tagged variant. Floats without a fractional component become
        :class:`IntegerValue`; anything that is not a scalar becomes
        :class:`OpaqueValue`.

    Raises
    ------
    EncodingError
        If ``value`` is a non-finite float, an integer too long to render as
        decimal text, or cannot be serialised as JSON.

    """
    # bool is a subclass of int, so it must be checked first.
    if isinstance(value, bool):
        return BooleanValue(value)
    if isinstance(value, str):
        return TextValue(value)
    if isinstance(value, int):
        return _classify_integer(field, value)
    if isinstance(value, float):
        return _classify_number(field, value)
    return _opaque(field, value)
