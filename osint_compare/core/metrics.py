"""Prometheus metrics for the application."""

import time

from prometheus_client import Counter, Histogram, Info, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from osint_compare import __version__

# --- Metrics ---

APP_INFO = Info("app", "OSINT comparison application info")
APP_INFO.info({"version": __version__, "name": "osint_compare"})

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30],
)

NORMALIZATIONS = Counter(
    "response_normalizations_total",
    "Raw tool responses normalized into the canonical shape",
    ["format", "outcome"],
)

TOOL_CALLS = Counter(
    "tool_calls_total",
    "Total tool calls dispatched by investigations",
    ["tool", "status"],
)

TOOL_CALL_DURATION = Histogram(
    "tool_call_duration_seconds",
    "Tool call duration in seconds",
    ["tool"],
    buckets=[0.1, 0.5, 1, 2, 3, 5, 10, 30],
)


# --- Middleware ---

# Normalize dynamic path segments to reduce cardinality
_PATH_PREFIXES = ("/api/v1/tools/", "/api/v1/investigations/")

# Static segments that follow a prefix and must not be collapsed
_STATIC_SEGMENTS = frozenset({"active", "stats"})


def _normalize_path(path: str) -> str:
    """Replace entity IDs in paths with {id} / {tool_id} to avoid high cardinality.

    /api/v1/investigations/ab12/results/3/rating -> /api/v1/investigations/{id}/results/{tool_id}/rating
    """
    for prefix in _PATH_PREFIXES:
        if not path.startswith(prefix):
            continue
        parts = path[len(prefix) :].split("/")
        if parts[0] and parts[0] not in _STATIC_SEGMENTS:
            parts[0] = "{id}"
        for i in range(1, len(parts) - 1):
            if parts[i] == "results" and parts[i + 1]:
                parts[i + 1] = "{tool_id}"
        return prefix + "/".join(parts)
    return path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect HTTP request metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = _normalize_path(request.url.path)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        REQUEST_COUNT.labels(method=method, path=path, status=response.status_code).inc()
        REQUEST_DURATION.labels(method=method, path=path).observe(duration)

        return response


def metrics_response() -> Response:
    """Generate Prometheus /metrics response."""
    return Response(
        content=generate_latest(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
