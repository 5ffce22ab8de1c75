"""Prometheus metrics & middleware for the stats calculator service.

Collects per-route request count and latency plus the number of live
calculator handles per registry, and exposes them on /metrics for Prometheus.
"""
from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
import time

# Prometheus metric names as constants
REQUEST_COUNT_NAME = "statscalc_request_total"
REQUEST_LATENCY_NAME = "statscalc_request_duration_seconds"
REQUEST_ERROR_COUNT_NAME = "statscalc_request_errors_total"
LIVE_HANDLES_NAME = "statscalc_live_handles"

# -----------------------------------------------------------------------------
# Metric objects
# -----------------------------------------------------------------------------
REQUEST_COUNT = Counter(
    name=REQUEST_COUNT_NAME,
    documentation="Total HTTP requests",
    labelnames=["path", "method", "status"],
)

REQUEST_LATENCY = Histogram(
    name=REQUEST_LATENCY_NAME,
    documentation="Request latency in seconds",
    labelnames=["path", "method"],
)

REQUEST_ERROR_COUNT = Counter(
    name=REQUEST_ERROR_COUNT_NAME,
    documentation="Total HTTP error responses (status >= 400)",
    labelnames=["path", "method", "status"],
)

# One series per app instance; the label is removed when the app shuts down
LIVE_HANDLES = Gauge(
    name=LIVE_HANDLES_NAME,
    documentation="Number of live calculator handles",
    labelnames=["registry"],
)


def route_label(scope) -> str:
    """Route template (e.g. "/calculators/{handle}/stats"), else the raw path."""
    route = scope.get("route")
    return getattr(route, "path", None) or scope.get("path", "")


def observe_request(scope, status: int, elapsed: float) -> None:
    path, method = route_label(scope), scope.get("method", "")
    REQUEST_COUNT.labels(path, method, status).inc()
    if status >= 400:
        REQUEST_ERROR_COUNT.labels(path, method, status).inc()
    REQUEST_LATENCY.labels(path, method).observe(elapsed)

# -----------------------------------------------------------------------------
# ASGI middleware
# -----------------------------------------------------------------------------
class MetricsMiddleware:
    """Times each HTTP request up to its response start and records it."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()

        async def send_and_observe(message):
            if message["type"] == "http.response.start":
                observe_request(scope, int(message["status"]), time.perf_counter() - started_at)
            await send(message)

        await self.app(scope, receive, send_and_observe)

# -----------------------------------------------------------------------------
# /metrics endpoint
# -----------------------------------------------------------------------------
metrics_router = APIRouter()

@metrics_router.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
