"""
Pure ASGI Timing Middleware

Logs one access line per request in the form
``[2024-05-01T12:00:00.000Z] GET /lessons 200 3.21ms`` and feeds the
Prometheus HTTP metrics. Implemented as pure ASGI to avoid the
BaseHTTPMiddleware "No response returned" issue.
"""

from datetime import datetime, timezone
import logging
import time

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger("app.access")

SLOW_REQUEST_MS = 500

# Scrapes would otherwise dominate the request metrics.
_UNTRACKED_PATHS = frozenset({"/metrics/prometheus"})


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _endpoint_label(scope: Scope) -> str:
    """Route template when the router matched one, so ids don't explode label cardinality."""
    route = scope.get("route")
    path_format = getattr(route, "path_format", None) or getattr(route, "path", None)
    if isinstance(path_format, str) and path_format:
        return path_format
    return "unmatched"


class TimingMiddlewareASGI:
    """
    Pure ASGI middleware to measure and log request processing time.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI application entrypoint."""

        # Only handle HTTP requests
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        method = scope.get("method", "")
        track = path not in _UNTRACKED_PATHS
        start_time = time.time()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                process_time = (time.time() - start_time) * 1000  # Convert to ms
                headers = MutableHeaders(scope=message)
                headers["X-Process-Time"] = f"{process_time:.2f}ms"

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed = time.time() - start_time
            process_time = elapsed * 1000
            logger.info(f"[{_iso_now()}] {method} {path} {status_code} {process_time:.2f}ms")

            if process_time > SLOW_REQUEST_MS:
                logger.warning(f"[TIMING] Slow request: {method} {path} took {process_time:.2f}ms")

            if track:
                prometheus_metrics.record_http_request(
                    method=method,
                    endpoint=_endpoint_label(scope),
                    duration=elapsed,
                    status_code=status_code,
                )
