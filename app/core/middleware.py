"""Request logging middleware with request-id propagation."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import request_id_var

logger = logging.getLogger("app.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and echo an X-Request-ID header.

    The id is also published through ``request_id_var`` so every log line
    emitted while handling the request carries it. Headers are never
    logged; the caller's provider key travels in x-api-key.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = int((time.perf_counter() - start) * 1000)

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "%s %s -> %d (%d ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response
        finally:
            request_id_var.reset(token)
