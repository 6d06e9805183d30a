"""Clock and timestamp helpers shared by the codec and credential layers."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def format_timestamp(value: dt.datetime) -> str:
    """Render ``value`` as an RFC 3339 UTC instant with millisecond precision.

    The output matches the store's ``timestampValue`` representation, e.g.
    ``2025-01-02T03:04:05.678Z``. Naive datetimes are rejected because the
    wire format has no way to express local time.
    """
    if value.tzinfo is None:
        msg = "timestamp must be timezone-aware"
        raise ValueError(msg)
    text = value.astimezone(dt.UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def epoch_seconds(value: dt.datetime) -> int:
    """Return whole seconds since the Unix epoch for an aware datetime."""
    return int(value.timestamp())


def parse_timestamp(value: object) -> dt.datetime | None:
    """Parse an RFC 3339 instant, returning ``None`` for anything else.

    Naive results are assumed to be UTC so mixed inputs remain comparable.
    """
    if not isinstance(value, str):
        return None
    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed
