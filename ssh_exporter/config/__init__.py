"""Configuration module for ssh_exporter.

- load_config: Reads and normalizes the probe configuration document
- parse_duration / resolve_timeout: Duration strings used for timeouts
- Settings: Flags and environment variable configuration
"""

from ssh_exporter.config.duration import parse_duration, resolve_timeout
from ssh_exporter.config.loader import (
    ConfigLoadError,
    ConfigParseError,
    load_config,
    normalize_config,
)
from ssh_exporter.config.settings import Settings

__all__ = [
    "ConfigLoadError",
    "ConfigParseError",
    "Settings",
    "load_config",
    "normalize_config",
    "parse_duration",
    "resolve_timeout",
]
