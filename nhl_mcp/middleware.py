"""
Request/response logging middleware for the NHL MCP Server.

Logs every HTTP request with timing and records request metrics.
"""

import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable, List, Optional

from .logging_config import get_logger
from .metrics import get_metrics_collector


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses with metrics."""

    def __init__(self, app, exclude_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.request_logger = get_logger("nhl_mcp.requests")
        self.metrics = get_metrics_collector()
        self.exclude_paths = exclude_paths or []

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            self._record(method, path, 500, start_time, error=str(e))
            raise

        self._record(method, path, response.status_code, start_time)
        return response

    def _record(self, method: str, path: str, status_code: int, start_time: float, error: str = None) -> None:
        response_time_ms = (time.perf_counter() - start_time) * 1000
        metric_path = self._normalize_path_for_metrics(path)

        self.metrics.increment_counter(
            "http_requests_total", method=method, path=metric_path, status_code=str(status_code)
        )
        self.metrics.record_timing("http_request_duration", response_time_ms, method=method, path=metric_path)
        if status_code >= 400:
            self.metrics.increment_counter(
                "http_errors_total", method=method, path=metric_path, status_code=str(status_code)
            )

        if path in self.exclude_paths:
            return

        extra = {
            "method": method,
            "path": path,
            "status_code": status_code,
            "response_time_ms": round(response_time_ms, 2),
        }
        message = f"{method} {path} - {status_code} - {response_time_ms:.2f}ms"
        if error:
            extra["error"] = error
            self.request_logger.error(f"{message} - ERROR: {error}", extra=extra)
        else:
            self.request_logger.info(message, extra=extra)

    def _normalize_path_for_metrics(self, path: str) -> str:
        """Collapse paths to a small fixed set to keep label cardinality low."""
        for prefix in ("/health", "/metrics", "/mcp"):
            if path.startswith(prefix):
                return prefix
        return "/other"
