"""Request logging middleware with integrated timing."""

import logging
import secrets
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ssh_exporter.middleware.timing import TimingRegistry
from ssh_exporter.utils.console import request_id

# Paths that are neither logged nor timed
QUIET_PATHS = frozenset({"/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each HTTP request with a request id, status and duration.

    The request id is stored in a context variable for the lifetime of the
    request, so every log record emitted while serving it, including those
    from per-host execution tasks, carries the same ``[req:<id>]`` prefix.

    Example:
        >>> app.add_middleware(LoggingMiddleware, timing=TimingRegistry())
    """

    def __init__(
        self,
        app: Any,
        timing: TimingRegistry | None = None,
        slow_threshold_ms: float = 1000.0,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize logging middleware.

        Args:
            app: Downstream ASGI app.
            timing: Registry that receives per-route durations.
            slow_threshold_ms: Threshold in ms for slow request warnings.
            logger: Optional custom logger.
        """
        super().__init__(app)
        self.timing = timing if timing is not None else TimingRegistry()
        self.slow_threshold_ms = slow_threshold_ms
        self.logger = logger or logging.getLogger(__name__)

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        """Log and time the request."""
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        token = request_id.set(secrets.token_hex(4))
        start = time.perf_counter()
        query = f"?{request.url.query}" if request.url.query else ""
        self.logger.info(">>> %s %s%s", request.method, path, query)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.timing.record(path, duration_ms)
            self.logger.error(
                "!!! %s %s failed after %.1fms: %s",
                request.method,
                path,
                duration_ms,
                e,
            )
            raise
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            self.timing.record(path, duration_ms)
            log_level = (
                logging.WARNING
                if duration_ms >= self.slow_threshold_ms
                else logging.INFO
            )
            self.logger.log(
                log_level,
                "<<< %s %s -> %d [%s]",
                request.method,
                path,
                response.status_code,
                self._format_duration(duration_ms),
            )
            return response
        finally:
            request_id.reset(token)
