"""Tests for pattern matching."""

import logging

import pytest

from ssh_exporter.services.matcher import (
    InvalidPattern,
    compile_or_never,
    compile_pattern,
)


def test_matches_anywhere_in_text() -> None:
    """Patterns are unanchored."""
    matcher = compile_pattern("logs")

    assert matcher.test("chef_logs")
    assert matcher.test("logs_rotated")
    assert not matcher.test("proc_status")


def test_dot_star_matches_empty_string() -> None:
    """'.*' matches even empty output."""
    assert compile_pattern(".*").test("")


def test_invalid_pattern_raises() -> None:
    """Compilation errors surface as InvalidPattern."""
    with pytest.raises(InvalidPattern) as exc_info:
        compile_pattern("(unclosed")

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.pattern == "(unclosed"


def test_compile_or_never_substitutes_never_matching(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """An invalid pattern becomes a matcher that never matches."""
    with caplog.at_level(logging.WARNING):
        matcher = compile_or_never("[bad", owner="disk")

    assert matcher.pattern == "[bad"
    assert not matcher.test("")
    assert not matcher.test("[bad")
    assert "disk" in caplog.text


def test_compile_or_never_passes_valid_pattern() -> None:
    """Valid patterns compile normally."""
    assert compile_or_never("hi").test("say hi")
