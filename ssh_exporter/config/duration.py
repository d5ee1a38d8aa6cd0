"""Duration string parsing.

Accepts the duration syntax used by the probe configuration: an optional
sign followed by one or more ``<number><unit>`` groups, e.g. ``5s``,
``1m30s``, ``1.5h`` or ``300ms``. The bare string ``0`` is also accepted.
"""

import logging
import math
import re
from datetime import timedelta
from typing import Final

from ssh_exporter.models.probe import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# Unit suffix -> seconds
UNITS: Final[dict[str, float]] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # U+00B5 micro sign
    "μs": 1e-6,  # U+03BC greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

# Largest duration representable as int64 nanoseconds (about 2562047h)
MAX_SECONDS: Final[float] = (2**63 - 1) / 1e9


def parse_duration(value: str) -> timedelta:
    """Parse a duration string.

    Args:
        value: Duration such as ``"5s"`` or ``"1m30s"``

    Returns:
        Parsed duration

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if text == "0":
        return timedelta(0)

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        total += float(number) * UNITS[unit]
        pos = match.end()

    if pos == 0:
        raise ValueError(f"invalid duration {value!r}")

    if not math.isfinite(total) or total > MAX_SECONDS:
        raise ValueError(f"invalid duration {value!r}: out of range")

    try:
        return timedelta(seconds=sign * total)
    except OverflowError:
        raise ValueError(f"invalid duration {value!r}: out of range") from None


def resolve_timeout(value: str, script_name: str = "") -> timedelta:
    """Parse a script timeout, falling back to the default on bad input.

    Non-positive durations are treated as invalid.
    """
    try:
        parsed = parse_duration(value)
    except ValueError as e:
        logger.warning(
            "Failed to parse `timeout` for %s (%s). Default to %ds",
            script_name or "<unnamed>",
            e,
            DEFAULT_TIMEOUT.total_seconds(),
        )
        return DEFAULT_TIMEOUT

    if parsed <= timedelta(0):
        logger.warning(
            "Non-positive `timeout` %r for %s. Default to %ds",
            value,
            script_name or "<unnamed>",
            DEFAULT_TIMEOUT.total_seconds(),
        )
        return DEFAULT_TIMEOUT

    return parsed
