"""Unit tests for femtologging integration helpers.

Run with:
    pytest tests/unit/test_logging.py
"""

from __future__ import annotations

from unittest import mock

import pytest

from docbridge import logging as docbridge_logging
from docbridge.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_warning,
    normalize_log_level,
)
from tests.helpers import FakeLogger


class TestNormalizeLogLevel:
    """Tests for normalize_log_level."""

    @pytest.mark.parametrize(
        ("input_level", "expected_level", "invalid_label"),
        [
            ("warning", "WARNING", "valid"),
            ("  debug ", "DEBUG", "valid"),
            ("TRACE", "TRACE", "valid"),
            (None, "INFO", "invalid"),
            ("", "INFO", "invalid"),
            ("nope", "INFO", "invalid"),
        ],
    )
    def test_normalize_log_level(
        self,
        input_level: str | None,
        expected_level: str,
        invalid_label: str,
    ) -> None:
        """Normalize log levels and flag invalid inputs."""
        expected_invalid = invalid_label == "invalid"
        level, invalid = normalize_log_level(input_level)
        assert level == expected_level, (
            f"Expected {input_level!r} to normalize to {expected_level}."
        )
        assert invalid is expected_invalid, (
            f"Expected invalid flag to be {expected_invalid} for {input_level!r}."
        )


def test_configure_logging_passes_normalized_level() -> None:
    """configure_logging hands the normalized level to basicConfig."""
    with mock.patch.object(docbridge_logging, "basicConfig") as basic_config:
        level, invalid = configure_logging("bogus", force=True)

    assert (level, invalid) == ("INFO", True)
    basic_config.assert_called_once_with(level="INFO", force=True)


@pytest.mark.parametrize(
    ("helper", "expected_level"),
    [
        (log_debug, "DEBUG"),
        (log_info, "INFO"),
        (log_warning, "WARNING"),
        (log_error, "ERROR"),
    ],
)
def test_helpers_format_and_pass_level(
    helper: object, expected_level: str
) -> None:
    """Each helper formats with percent-style args and emits its level."""
    logger = FakeLogger()

    helper(logger, "listed %d from %s", 3, "received_data")  # type: ignore[operator]

    assert logger.calls == [(expected_level, "listed 3 from received_data", None)]


def test_template_without_args_is_not_interpolated() -> None:
    """A template with no args is emitted verbatim, percent signs included."""
    logger = FakeLogger()

    log_info(logger, "100% done")

    assert logger.messages == ["100% done"]


def test_log_error_forwards_exc_info() -> None:
    """log_error passes exception info through to the logger."""
    logger = FakeLogger()
    exc = RuntimeError("boom")

    log_error(logger, "failed: %s", exc, exc_info=exc)

    assert logger.calls == [("ERROR", "failed: boom", exc)]
