"""Tests for the console log formatter."""

import logging

from ssh_exporter.utils.console import ColorfulFormatter, request_id


def make_record(name: str = "ssh_exporter.services.executor", msg: str = "hello %s") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=("world",),
        exc_info=None,
    )


def test_plain_format_without_colors() -> None:
    """Without colors the line is plain pipe-separated text."""
    line = ColorfulFormatter(use_colors=False).format(make_record())

    assert "\033[" not in line
    assert "| WARNING  |" in line
    assert "services.executor" in line
    assert "ssh_exporter.services" not in line
    assert line.endswith("hello world")


def test_request_id_prefix() -> None:
    """Records emitted during a request carry its id."""
    token = request_id.set("abcd1234")
    try:
        line = ColorfulFormatter(use_colors=False).format(make_record())
    finally:
        request_id.reset(token)

    assert line.endswith("[req:abcd1234] hello world")


def test_colors_highlight_addresses() -> None:
    """SSH addresses are highlighted when colors are on."""
    record = make_record(msg="Cannot run on %s")
    record.args = ("root@web-01:22",)

    line = ColorfulFormatter(use_colors=True).format(record)

    assert "\033[95mroot@web-01:22\033[0m" in line
