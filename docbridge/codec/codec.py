"""Conversion between generic records and typed field maps."""

from __future__ import annotations

import typing as typ

from docbridge.common.time import format_timestamp, utcnow
from docbridge.errors import EncodingError
from docbridge.logging import get_logger, log_debug

from .fields import FieldKind, TypedField
from .values import (
    BooleanValue,
    FloatValue,
    IntegerValue,
    OpaqueValue,
    RecordValue,
    TextValue,
    classify,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

logger = get_logger(__name__)

ID_FIELD = "id"
TIMESTAMP_FIELD = "timestamp"

GenericRecord = dict[str, object]


def encode_value(value: RecordValue) -> TypedField:
    """Return the typed field for a classified record value."""
    match value:
        case TextValue(value=text):
            return TypedField.text(text)
        case IntegerValue(value=number):
            return TypedField.integer(number)
        case FloatValue(value=number):
            return TypedField.double(number)
        case BooleanValue(value=flag):
            return TypedField.boolean(flag)
        case OpaqueValue(json=text):
            return TypedField.text(text)
    typ.assert_never(value)


def decode_value(field: TypedField) -> object | None:
    """Unpack a typed field, returning ``None`` if its payload is unusable.

    Integers are parsed with Python's arbitrary-precision ``int``, within the
    interpreter's int/str conversion limit (``sys.get_int_max_str_digits()``,
    4300 digits by default); longer decimal text counts as unusable.
    Timestamps are returned as the wire string; callers needing ordering must
    parse it themselves.
    """
    value = field.value
    match field.kind:
        case FieldKind.INTEGER:
            if not isinstance(value, str):
                return None
            try:
                return int(value)
            except ValueError:
                return None
        case FieldKind.FLOAT:
            if isinstance(value, bool) or not isinstance(value, int | float):
                return None
            return float(value)
        case FieldKind.BOOLEAN:
            return value if isinstance(value, bool) else None
        case FieldKind.TEXT | FieldKind.TIMESTAMP:
            return value if isinstance(value, str) else None
    typ.assert_never(field.kind)


class DocumentCodec:
    """Encode generic records for the store and decode stored fields back.

    Parameters
    ----------
    clock
        Callable returning the current aware datetime. Encoding stamps every
        record with this instant under the ``timestamp`` key.

    """

    def __init__(self, *, clock: cabc.Callable[[], dt.datetime] = utcnow) -> None:
        """Initialise the codec with the clock used for receipt timestamps."""
        self._clock = clock

    def encode(
        self,
        record: cabc.Mapping[str, object],
        *,
        now: dt.datetime | None = None,
    ) -> dict[str, TypedField]:
        """Encode ``record`` into a typed field map.

        A synthetic ``timestamp`` field is always appended, replacing any
        caller-supplied ``timestamp``: server receipt time is authoritative.
        It holds ``now`` when given, otherwise the codec clock's reading.

        Raises
        ------
        EncodingError
            If a key is not a string or a value has no JSON representation.

        """
        fields: dict[str, TypedField] = {}
        for key, raw in record.items():
            if not isinstance(key, str):
                raise EncodingError.invalid_key(key)
            if key == TIMESTAMP_FIELD:
                continue
            fields[key] = encode_value(classify(key, raw))
        received_at = self._clock() if now is None else now
        fields[TIMESTAMP_FIELD] = TypedField.timestamp(format_timestamp(received_at))
        return fields

    def decode(
        self,
        fields: cabc.Mapping[str, TypedField],
        document_id: str,
    ) -> GenericRecord:
        """Decode a typed field map into a generic record keyed first by ``id``.

        Entries whose payload cannot be unpacked are skipped. A stored field
        named ``id`` is skipped too, since the document identifier owns that
        key. Decoding never raises for malformed entries.
        """
        record: GenericRecord = {ID_FIELD: document_id}
        for name, field in fields.items():
            if name == ID_FIELD:
                log_debug(
                    logger, "Field %r shadowed by document id %s", name, document_id
                )
                continue
            value = decode_value(field)
            if value is None:
                log_debug(logger, "Dropping unusable %s field %r", field.kind, name)
                continue
            record[name] = value
        return record
