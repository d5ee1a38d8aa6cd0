"""Error handling middleware for consistent error logging."""

import logging
import traceback
from collections import Counter
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Log unhandled exceptions and count them by type.

    The exception is re-raised so Starlette still produces its 500 response.
    """

    def __init__(
        self,
        app: Any,
        error_counts: Counter[str] | None = None,
        include_traceback: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            app: Downstream ASGI app.
            error_counts: Counter updated with exception type names.
            include_traceback: Whether to include full traceback in logs.
            logger: Optional custom logger.
        """
        super().__init__(app)
        self.error_counts = error_counts if error_counts is not None else Counter()
        self.include_traceback = include_traceback
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        """Handle errors during request processing."""
        try:
            return await call_next(request)
        except Exception as e:
            error_type = type(e).__name__
            self.error_counts[error_type] += 1

            if self.include_traceback:
                self.logger.error(
                    "Error in %s: %s: %s\n%s",
                    request.url.path,
                    error_type,
                    e,
                    traceback.format_exc(),
                )
            else:
                self.logger.error(
                    "Error in %s: %s: %s", request.url.path, error_type, e
                )
            raise
