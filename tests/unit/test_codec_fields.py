"""Unit tests for the typed field envelope."""

from __future__ import annotations

import pytest

from docbridge.codec import (
    FieldKind,
    TypedField,
    field_from_wire,
    fields_from_wire,
    fields_to_wire,
)


class TestTypedFieldConstructors:
    """Tests for the TypedField classmethod constructors."""

    def test_integer_is_carried_as_decimal_text(self) -> None:
        """Integers travel as decimal strings, even past 64 bits."""
        field = TypedField.integer(2**70)
        assert field.to_wire() == {"integerValue": "1180591620717411303424"}

    def test_double_coerces_to_float(self) -> None:
        """Double fields always carry a float."""
        field = TypedField.double(2)
        assert field.to_wire() == {"doubleValue": 2.0}
        assert isinstance(field.value, float)

    @pytest.mark.parametrize(
        ("field", "wire"),
        [
            (TypedField.text("Ali"), {"stringValue": "Ali"}),
            (TypedField.boolean(False), {"booleanValue": False}),  # noqa: FBT003
            (
                TypedField.timestamp("2025-01-02T03:04:05.678Z"),
                {"timestampValue": "2025-01-02T03:04:05.678Z"},
            ),
        ],
    )
    def test_to_wire_uses_single_key_envelope(
        self, field: TypedField, wire: dict[str, object]
    ) -> None:
        """Each variant renders under its own wire key."""
        assert field.to_wire() == wire


class TestFieldFromWire:
    """Tests for parsing one wire envelope."""

    @pytest.mark.parametrize(
        ("envelope", "expected"),
        [
            ({"stringValue": "Cairo"}, TypedField.text("Cairo")),
            ({"integerValue": "30"}, TypedField(FieldKind.INTEGER, "30")),
            ({"integerValue": 30}, TypedField(FieldKind.INTEGER, "30")),
            ({"doubleValue": 1.5}, TypedField.double(1.5)),
            ({"doubleValue": 2}, TypedField.double(2.0)),
            ({"booleanValue": True}, TypedField.boolean(True)),  # noqa: FBT003
            (
                {"timestampValue": "2025-01-02T03:04:05Z"},
                TypedField.timestamp("2025-01-02T03:04:05Z"),
            ),
        ],
    )
    def test_known_variants_parse(
        self, envelope: dict[str, object], expected: TypedField
    ) -> None:
        """Every modelled variant parses into its TypedField."""
        assert field_from_wire(envelope) == expected

    @pytest.mark.parametrize(
        "envelope",
        [
            {},
            {"nullValue": None},
            {"mapValue": {"fields": {}}},
            {"stringValue": None},
            {"booleanValue": "yes"},
            {"doubleValue": True},
            {"integerValue": 1.5},
            "stringValue",
            None,
        ],
    )
    def test_unusable_envelopes_yield_none(self, envelope: object) -> None:
        """Empty, unknown, or mistyped envelopes are not fields."""
        assert field_from_wire(envelope) is None

    def test_first_usable_variant_wins(self) -> None:
        """Variants are probed in declaration order."""
        envelope = {"integerValue": "7", "stringValue": "seven"}
        assert field_from_wire(envelope) == TypedField.text("seven")


def test_fields_from_wire_drops_unusable_entries() -> None:
    """Entries without a usable variant are omitted, others kept in order."""
    parsed = fields_from_wire(
        {
            "name": {"stringValue": "Ali"},
            "ghost": {},
            "tags": {"arrayValue": {"values": []}},
            "age": {"integerValue": "30"},
        }
    )
    assert list(parsed) == ["name", "age"]


def test_fields_from_wire_tolerates_non_mapping() -> None:
    """A missing or malformed ``fields`` object parses as empty."""
    assert fields_from_wire(None) == {}
    assert fields_from_wire(["stringValue"]) == {}


def test_fields_to_wire_renders_every_entry() -> None:
    """fields_to_wire renders each TypedField under its name."""
    fields = {"name": TypedField.text("Ali"), "age": TypedField.integer(30)}
    assert fields_to_wire(fields) == {
        "name": {"stringValue": "Ali"},
        "age": {"integerValue": "30"},
    }
