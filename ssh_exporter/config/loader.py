"""Probe configuration loader.

Reads the YAML document described below and normalizes it into a
``ProbeConfig``::

    version: v0
    scripts:
      - name: 'name'
        script: 'command'
        timeout: 5s
        pattern: 'regex'
        credentials:
          - host: 'host'
            port: '22'
            user: 'user'
            keyfile: '/path/to/keyfile'

Only an unreadable file is an error for the caller. Anything wrong inside
the document is logged and normalized away.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ssh_exporter.config.duration import resolve_timeout
from ssh_exporter.models import HostCredential, ProbeConfig, ScriptSpec
from ssh_exporter.models.probe import DEFAULT_PORT

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = "v0"


class ConfigLoadError(Exception):
    """Configuration file could not be read."""

    def __init__(self, path: Path | str, original_error: Exception):
        """Initialize load error.

        Args:
            path: Path of the configuration file
            original_error: Exception raised while reading it
        """
        self.path = Path(path)
        self.original_error = original_error
        super().__init__(f"Cannot read config {path}: {original_error}")


class ConfigParseError(Exception):
    """Configuration document is malformed."""


def load_config(path: Path | str) -> ProbeConfig:
    """Read, parse and normalize a probe configuration file.

    Args:
        path: Path to the YAML configuration

    Returns:
        Normalized configuration, possibly with no scripts if the
        document could not be parsed

    Raises:
        ConfigLoadError: If the file cannot be read
    """
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(config_path, e) from e

    logger.debug("Reading probe config from %s", config_path)

    try:
        document = parse_document(raw)
    except ConfigParseError as e:
        logger.warning("%s", e)
        document = {}

    return normalize_config(document)


def parse_document(raw: str) -> dict[str, Any]:
    """Parse YAML text into a mapping.

    Raises:
        ConfigParseError: If the text is not valid YAML or not a mapping
    """
    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Malformed config document: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigParseError(
            f"Config document must be a mapping, got {type(document).__name__}"
        )
    return document


def normalize_config(document: dict[str, Any]) -> ProbeConfig:
    """Build a ``ProbeConfig`` from a parsed document, applying defaults."""
    version = _as_str(document.get("version", SUPPORTED_VERSION))
    if version != SUPPORTED_VERSION:
        logger.warning(
            "Unsupported config version %r, expected %r", version, SUPPORTED_VERSION
        )

    raw_scripts = document.get("scripts") or []
    if not isinstance(raw_scripts, list):
        logger.warning("`scripts` must be a list, got %s", type(raw_scripts).__name__)
        raw_scripts = []

    scripts: list[ScriptSpec] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_scripts):
        if not isinstance(entry, dict):
            logger.warning("Skipping scripts[%d]: not a mapping", index)
            continue

        script = _normalize_script(entry)
        if script.name in seen:
            logger.warning("Skipping duplicate script name %r", script.name)
            continue
        seen.add(script.name)
        scripts.append(script)

    logger.debug("Loaded %d script(s) from config", len(scripts))
    return ProbeConfig(version=version, scripts=scripts)


def _normalize_script(entry: dict[str, Any]) -> ScriptSpec:
    name = _as_str(entry.get("name"))
    timeout_spec = _as_str(entry.get("timeout"))

    raw_credentials = entry.get("credentials") or []
    if not isinstance(raw_credentials, list):
        logger.warning("`credentials` of %s must be a list", name or "<unnamed>")
        raw_credentials = []

    targets = []
    for index, cred in enumerate(raw_credentials):
        if not isinstance(cred, dict):
            logger.warning("Skipping %s credentials[%d]: not a mapping", name, index)
            continue
        targets.append(_normalize_credential(cred))

    return ScriptSpec(
        name=name,
        command=_as_str(entry.get("script")),
        timeout_spec=timeout_spec,
        pattern=_as_str(entry.get("pattern")),
        targets=targets,
        parsed_timeout=resolve_timeout(timeout_spec, name),
    )


def _normalize_credential(cred: dict[str, Any]) -> HostCredential:
    keyfile = _as_str(cred.get("keyfile"))
    return HostCredential(
        host=_as_str(cred.get("host")),
        port=_as_str(cred.get("port")) or DEFAULT_PORT,
        user=_as_str(cred.get("user")),
        keyfile=os.path.expanduser(keyfile) if keyfile else "",
    )


def _as_str(value: Any) -> str:
    """Coerce a scalar YAML value to a string, mapping None to ''."""
    if value is None:
        return ""
    return str(value)
