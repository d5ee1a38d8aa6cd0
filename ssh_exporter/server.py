"""ssh_exporter HTTP server.

Thin Starlette wiring around the probe pipeline:
load config -> dispatch -> render. Business logic lives in services/.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, Response
from starlette.routing import Route

from ssh_exporter.config import ConfigLoadError, Settings, load_config
from ssh_exporter.dependencies import Dependencies
from ssh_exporter.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from ssh_exporter.services import (
    InvalidPattern,
    compile_pattern,
    outcome_counts,
    render,
)
from ssh_exporter.services.formatter import CONTENT_TYPE, render_self_metrics

logger = logging.getLogger(__name__)

INDEX_HTML = """<h1>ssh exporter</h1>
<p><a href='/probe'>probe</a></p>
<p><a href='/metrics'>metrics</a></p>"""

PATTERN_HELP_TEXT = """<p>Please include a valid <code>?pattern=[regex]</code>
query parameter in your URL. This should match the <bold>name</bold> of the
scripts you want to run (e.g., <code>?pattern=.*logs</code> matches
<code>chef_logs</code> and not <code>proc_status</code>)</p>."""


async def index(request: Request) -> Response:
    """Human readable navigation help."""
    return HTMLResponse(INDEX_HTML)


async def health(request: Request) -> Response:
    """Health check endpoint."""
    return PlainTextResponse("OK")


async def probe(request: Request) -> Response:
    """Run the scripts whose names match ``?pattern=`` and render results."""
    deps: Dependencies = request.app.state.deps

    pattern = request.query_params.get("pattern", "")
    if not pattern:
        logger.info("Probe endpoint was hit, but pattern parameter was not passed.")
        return HTMLResponse(PATTERN_HELP_TEXT)

    try:
        name_pattern = compile_pattern(pattern)
    except InvalidPattern as e:
        logger.warning("%s", e)
        return HTMLResponse(PATTERN_HELP_TEXT, status_code=400)

    try:
        config = await asyncio.to_thread(load_config, deps.settings.config_path)
    except ConfigLoadError as e:
        logger.error("%s", e)
        return PlainTextResponse(
            "error: configuration could not be loaded\n", status_code=500
        )

    await deps.dispatcher.run(config, name_pattern)
    deps.host_outcomes.update(outcome_counts(config))

    return PlainTextResponse(render(config), media_type=CONTENT_TYPE)


async def metrics(request: Request) -> Response:
    """Exporter self-telemetry."""
    deps: Dependencies = request.app.state.deps
    body = render_self_metrics(
        timing=deps.timing.get_timing_stats(),
        host_outcomes=dict(deps.host_outcomes),
        pool_slots={
            "max": deps.pool.max_size,
            "active": deps.pool.active,
            "queued": deps.pool.queued,
            "completed": deps.pool.completed,
        },
        error_counts=dict(deps.error_counts),
    )
    return PlainTextResponse(body, media_type=CONTENT_TYPE)


def create_app(settings: Settings, deps: Dependencies | None = None) -> Starlette:
    """Create the Starlette application.

    Args:
        settings: Process settings
        deps: Optional pre-built dependencies (tests inject fakes here)

    Returns:
        Configured application
    """
    if deps is None:
        deps = Dependencies.create(settings)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(
            "ssh_exporter starting up (config=%s, max_concurrency=%d)",
            settings.config_path,
            deps.pool.max_size,
        )
        try:
            yield
        finally:
            logger.info("ssh_exporter shutting down")

    # First listed = outermost
    middleware = [
        Middleware(
            LoggingMiddleware,
            timing=deps.timing,
            slow_threshold_ms=settings.slow_threshold_ms,
        ),
        Middleware(
            ErrorHandlingMiddleware,
            error_counts=deps.error_counts,
            include_traceback=settings.include_traceback,
        ),
    ]

    app = Starlette(
        routes=[
            Route("/", index, methods=["GET"]),
            Route("/probe", probe, methods=["GET"]),
            Route("/metrics", metrics, methods=["GET"]),
            Route("/health", health, methods=["GET"]),
        ],
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.deps = deps
    return app
