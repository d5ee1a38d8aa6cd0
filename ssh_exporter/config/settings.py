"""Process settings from command-line flags and environment variables.

Centralized parsing and validation of everything that is fixed for the
lifetime of the process. The probe configuration document is handled
separately by ``ssh_exporter.config.loader`` because it is re-read on
every request.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "SSH_EXPORTER_"


@dataclass
class Settings:
    """Application settings.

    Handles parsing, validation, and defaults for flags and env vars.
    """

    # Flags
    config_path: Path = field(default_factory=lambda: Path("config.yml"))
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=9428)

    # Execution
    max_concurrency: int = field(default=100)
    connect_timeout: int = field(default=10)
    known_hosts: str | None = field(default=None)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)
    slow_threshold_ms: int = field(default=1000)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(
        cls,
        config_path: Path | str = "config.yml",
        http_port: int = 9428,
        http_host: str = "0.0.0.0",
    ) -> "Settings":
        """Load settings from environment variables.

        Args:
            config_path: Value of the ``--config`` flag
            http_port: Value of the ``--port`` flag
            http_host: Value of the ``--host`` flag

        Returns:
            Settings instance with values from environment

        Raises:
            FileNotFoundError: If SSH_EXPORTER_KNOWN_HOSTS names a missing file
        """
        max_concurrency = cls._get_int("MAX_CONCURRENCY", 100)
        if max_concurrency <= 0:
            logger.warning(
                "%sMAX_CONCURRENCY must be > 0, got %d. Using default: %d",
                ENV_PREFIX,
                max_concurrency,
                100,
            )
            max_concurrency = 100

        return cls(
            config_path=Path(config_path),
            http_host=http_host,
            http_port=http_port,
            max_concurrency=max_concurrency,
            connect_timeout=cls._get_int("CONNECT_TIMEOUT", 10),
            known_hosts=cls._get_known_hosts(),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("LOG_COLORS", True),
            slow_threshold_ms=cls._get_int("SLOW_THRESHOLD_MS", 1000),
            include_traceback=cls._get_bool("INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key without the prefix
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(f"{ENV_PREFIX}{key}")
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid int for %s%s: %s, using default %d",
                ENV_PREFIX,
                key,
                value,
                default,
            )
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment."""
        value = os.getenv(f"{ENV_PREFIX}{key}")
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_known_hosts() -> str | None:
        """Resolve the known_hosts file used for host key verification.

        Environment: SSH_EXPORTER_KNOWN_HOSTS
        Default: ~/.ssh/known_hosts if it exists, otherwise disabled
        Special value: "none" disables verification

        Returns:
            Path to known_hosts file or None if verification is disabled

        Raises:
            FileNotFoundError: If an explicitly configured file is missing
        """
        value = os.getenv(f"{ENV_PREFIX}KNOWN_HOSTS", "").strip()

        if value.lower() == "none":
            return None

        if value:
            custom_path = Path(os.path.expanduser(value))
            if not custom_path.exists():
                raise FileNotFoundError(
                    f"known_hosts file not found: {custom_path}\n"
                    f"Create it with: ssh-keyscan <hostname> >> {custom_path}\n"
                    f"or set {ENV_PREFIX}KNOWN_HOSTS=none to disable verification."
                )
            return str(custom_path)

        default = Path.home() / ".ssh" / "known_hosts"
        if default.exists():
            return str(default)
        return None
