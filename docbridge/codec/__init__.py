"""Codec between generic JSON records and the store's typed field envelope.

Public API
----------
DocumentCodec
    Encodes records (stamping a receipt ``timestamp``) and decodes stored
    field maps back into records keyed by ``id``.
TypedField
    One populated wire variant (text, integer, float, boolean, timestamp).
FieldKind
    Variant enum valued by wire key (``stringValue``...).
RecordValue
    Closed tagged type produced by :func:`classify`.
EncodingError
    Raised for values with no JSON representation.

Examples
--------
>>> codec = DocumentCodec()
>>> fields = codec.encode({"name": "Ali", "age": 30, "active": True})
>>> fields["age"].to_wire()
{'integerValue': '30'}
>>> codec.decode({"city": TypedField.text("Cairo")}, "abc123")
{'id': 'abc123', 'city': 'Cairo'}

"""

from __future__ import annotations

from docbridge.errors import EncodingError

from .codec import (
    ID_FIELD,
    TIMESTAMP_FIELD,
    DocumentCodec,
    GenericRecord,
    decode_value,
    encode_value,
)
from .fields import (
    FieldKind,
    TypedField,
    field_from_wire,
    fields_from_wire,
    fields_to_wire,
)
from .values import (
    BooleanValue,
    FloatValue,
    IntegerValue,
    OpaqueValue,
    RecordValue,
    TextValue,
    classify,
)

__all__ = [
    "ID_FIELD",
    "TIMESTAMP_FIELD",
    "BooleanValue",
    "DocumentCodec",
    "EncodingError",
    "FieldKind",
    "FloatValue",
    "GenericRecord",
    "IntegerValue",
    "OpaqueValue",
    "RecordValue",
    "TextValue",
    "TypedField",
    "classify",
    "decode_value",
    "encode_value",
    "field_from_wire",
    "fields_from_wire",
    "fields_to_wire",
]
