"""Prometheus metrics for the application."""

import time

from prometheus_client import Counter, Histogram, Info, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import settings

# --- Metrics ---

APP_INFO = Info("app", "Image description service info")
APP_INFO.info({"version": settings.app_version, "name": "alt_text_service"})

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

DESCRIPTION_REQUESTS = Counter(
    "image_description_requests_total",
    "Image description requests by provider family and outcome",
    ["provider", "outcome"],
)

PROVIDER_DURATION = Histogram(
    "image_description_provider_seconds",
    "Time spent waiting on the provider (including image download)",
    ["provider"],
    buckets=[0.5, 1, 2.5, 5, 10, 20, 30, 60, 120],
)


# --- Middleware ---

# Model identifiers are free-form; collapse them to keep label cardinality bounded
_PATH_PREFIXES = ("/api/generate-description/",)


def _normalize_path(path: str) -> str:
    """Replace the model segment of description routes with {model}."""
    for prefix in _PATH_PREFIXES:
        if path.startswith(prefix):
            return f"{prefix}{{model}}"
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
