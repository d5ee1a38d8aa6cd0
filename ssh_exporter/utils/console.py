"""Colorful console logging formatter with request-scoped prefixes."""

import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime

# Id of the HTTP request being handled; tasks spawned for it inherit the value
request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

COMPONENT_COLORS = {
    "ssh_exporter.server": COLORS["bright_cyan"],
    "ssh_exporter.services.dispatcher": COLORS["bright_magenta"],
    "ssh_exporter.services": COLORS["bright_blue"],
    "ssh_exporter.middleware": COLORS["yellow"],
    "ssh_exporter.config": COLORS["green"],
    "default": COLORS["white"],
}

NOISY_LOGGERS = [
    "asyncssh",
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "starlette",
    "anyio",
    "httpx",
    "httpcore",
]

_SSH_ADDRESS = re.compile(r"([\w.-]*@[\w.\-]+:\d+)")
_DURATION = re.compile(r"(\d+\.?\d*ms)")


class ColorfulFormatter(logging.Formatter):
    """Log formatter: timestamp | level | component | [req:id] message."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name.removeprefix("ssh_exporter.")
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        if not self.use_colors:
            return message
        message = _SSH_ADDRESS.sub(
            f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message
        )
        return _DURATION.sub(f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._colorize(
            f"{record.levelname:<8}",
            LEVEL_COLORS.get(record.levelname, COLORS["white"]),
        )
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])

        message = self._highlight_message(record.getMessage())
        req = request_id.get()
        if req:
            message = f"{self._colorize(f'[req:{req}]', COLORS['cyan'])} {message}"

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO", use_colors: bool = True) -> None:
    """Install the console handler on the ``ssh_exporter`` logger.

    Colors are disabled when stderr is not a TTY.
    """
    if not sys.stderr.isatty():
        use_colors = False

    package_logger = logging.getLogger("ssh_exporter")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)
