"""ssh_exporter HTTP middleware components."""

from ssh_exporter.middleware.errors import ErrorHandlingMiddleware
from ssh_exporter.middleware.logging import LoggingMiddleware
from ssh_exporter.middleware.timing import TimingRegistry, TimingStats

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "TimingRegistry",
    "TimingStats",
]
