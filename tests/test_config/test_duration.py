"""Tests for duration parsing."""

import logging
from datetime import timedelta

import pytest

from ssh_exporter.config.duration import parse_duration, resolve_timeout


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("5s", timedelta(seconds=5)),
        ("1m30s", timedelta(seconds=90)),
        ("1.5h", timedelta(hours=1.5)),
        ("300ms", timedelta(milliseconds=300)),
        ("2h45m", timedelta(hours=2, minutes=45)),
        ("0", timedelta(0)),
        ("-2s", timedelta(seconds=-2)),
        (" 10s ", timedelta(seconds=10)),
    ],
)
def test_parse_duration_valid(text: str, expected: timedelta) -> None:
    """Valid duration strings parse to the expected timedelta."""
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "abc", "5x", "s", "1s2", "-", "1 s"])
def test_parse_duration_invalid(text: str) -> None:
    """Malformed duration strings raise ValueError."""
    with pytest.raises(ValueError):
        parse_duration(text)


def test_resolve_timeout_uses_parsed_value() -> None:
    """A valid timeout is used as-is."""
    assert resolve_timeout("5s", "echo") == timedelta(seconds=5)


def test_resolve_timeout_falls_back_on_garbage(caplog: pytest.LogCaptureFixture) -> None:
    """Unparsable timeouts fall back to 10s and log a warning."""
    with caplog.at_level(logging.WARNING):
        assert resolve_timeout("soon", "echo") == timedelta(seconds=10)

    assert "Failed to parse `timeout` for echo" in caplog.text


@pytest.mark.parametrize("text", ["0", "-1s", ""])
def test_resolve_timeout_rejects_non_positive_and_empty(text: str) -> None:
    """Zero, negative and missing timeouts fall back to the default."""
    assert resolve_timeout(text, "echo") == timedelta(seconds=10)


@pytest.mark.parametrize("text", ["100000000000h", "1" * 400 + "s", "2562048h"])
def test_parse_duration_out_of_range(text: str) -> None:
    """Durations beyond the int64 nanosecond range are rejected."""
    with pytest.raises(ValueError, match="out of range"):
        parse_duration(text)


def test_parse_duration_accepts_largest_hour_count() -> None:
    """The largest whole-hour duration still parses."""
    assert parse_duration("2562047h") == timedelta(hours=2562047)


def test_resolve_timeout_falls_back_on_overflow(caplog: pytest.LogCaptureFixture) -> None:
    """Overflowing timeouts fall back to 10s instead of raising."""
    with caplog.at_level(logging.WARNING):
        assert resolve_timeout("1" * 400 + "s", "huge") == timedelta(seconds=10)

    assert "Failed to parse `timeout` for huge" in caplog.text
