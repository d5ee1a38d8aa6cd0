"""Tests for request logging middleware."""

import logging

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from ssh_exporter.middleware.logging import LoggingMiddleware
from ssh_exporter.middleware.timing import TimingRegistry
from ssh_exporter.utils.console import request_id


def make_app(timing: TimingRegistry, seen: list, slow_threshold_ms: float = 1000.0) -> Starlette:
    """App whose endpoints record the request id they observe."""

    async def handler(request: Request) -> PlainTextResponse:
        seen.append(request_id.get())
        return PlainTextResponse("OK")

    return Starlette(
        routes=[Route("/probe", handler), Route("/health", handler)],
        middleware=[
            Middleware(
                LoggingMiddleware,
                timing=timing,
                slow_threshold_ms=slow_threshold_ms,
            )
        ],
    )


class TestLoggingMiddleware:
    """Test request logging middleware."""

    def test_sets_request_id_for_handler(self):
        """Handlers see a request id; it is cleared afterwards."""
        seen: list = []
        client = TestClient(make_app(TimingRegistry(), seen))

        client.get("/probe")
        client.get("/probe")

        assert len(seen) == 2
        assert all(seen)
        assert seen[0] != seen[1]
        assert request_id.get() is None

    def test_records_timing_per_path(self):
        """Durations are recorded under the request path."""
        timing = TimingRegistry()
        client = TestClient(make_app(timing, []))

        client.get("/probe?pattern=.*")
        client.get("/probe?pattern=.*")

        stats = timing.get_timing_stats()
        assert stats["/probe"]["count"] == 2

    def test_health_is_not_logged_or_timed(self):
        """Health checks bypass logging."""
        timing = TimingRegistry()
        seen: list = []
        client = TestClient(make_app(timing, seen))

        response = client.get("/health")

        assert response.status_code == 200
        assert seen == [None]
        assert timing.get_timing_stats() == {}

    def test_logs_request_and_response(self, caplog):
        """Request start and completion are logged."""
        client = TestClient(make_app(TimingRegistry(), []))

        with caplog.at_level(logging.INFO, logger="ssh_exporter.middleware.logging"):
            client.get("/probe?pattern=echo")

        assert ">>> GET /probe?pattern=echo" in caplog.text
        assert "<<< GET /probe -> 200" in caplog.text

    def test_slow_requests_warn(self, caplog):
        """Requests over the threshold log at WARNING."""
        client = TestClient(make_app(TimingRegistry(), [], slow_threshold_ms=0.0))

        with caplog.at_level(logging.INFO, logger="ssh_exporter.middleware.logging"):
            client.get("/probe")

        slow = [r for r in caplog.records if "SLOW!" in r.getMessage()]
        assert slow and slow[0].levelno == logging.WARNING
