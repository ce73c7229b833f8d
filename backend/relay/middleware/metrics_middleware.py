"""
ASGI middleware for tracking HTTP request metrics.
Records request count, duration, and errors.
"""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from relay.utils.metrics import http_requests_total, http_request_duration_seconds, errors_total

# Label for requests no API route matched (static assets, unknown paths)
UNMATCHED_PATH = "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Process request and record metrics."""
        start_time = time.time()

        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method

        try:
            response = await call_next(request)
        except Exception:
            errors_total.labels(error_type="exception").inc()
            raise

        status_code = response.status_code
        path = self._route_path(request)

        http_requests_total.labels(
            method=method,
            path=path,
            status=status_code
        ).inc()

        duration = time.time() - start_time
        http_request_duration_seconds.labels(
            method=method,
            path=path
        ).observe(duration)

        # Track errors (4xx and 5xx)
        if status_code >= 400:
            errors_total.labels(error_type=f"{status_code // 100}xx").inc()

        return response

    def _route_path(self, request: Request) -> str:
        """
        Path template of the matched route, e.g. /share/{file_id}.
        The router fills scope["route"] during dispatch; anything else
        shares one label so arbitrary URLs cannot grow the label set.
        """
        route = request.scope.get("route")
        return getattr(route, "path", None) or UNMATCHED_PATH
