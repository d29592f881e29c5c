"""Monitoring and observability middleware"""
import threading
import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from chirpy.utils.logger import logger


# ===== Prometheus Metrics =====

http_requests_total = Counter(
    "chirpy_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "chirpy_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"]
)

http_errors_total = Counter(
    "chirpy_http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "status"]
)

authentication_failures_total = Counter(
    "chirpy_authentication_failures_total",
    "Total authentication failures",
    ["endpoint"]
)

fileserver_hits_total = Counter(
    "chirpy_fileserver_hits_total",
    "Total requests served from /app"
)

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: Request) -> str:
    """Route template for metric labels, so /api/chirps/1 and /api/chirps/2 share one series"""
    route = request.scope.get("route")
    if route is None:
        return UNMATCHED_ENDPOINT
    return route.path


class HitCounter:
    """Resettable count of static file requests shown on /admin/metrics"""

    def __init__(self) -> None:
        self._hits = 0
        self._lock = threading.Lock()

    def increment(self) -> None:
        with self._lock:
            self._hits += 1
        fileserver_hits_total.inc()

    def reset(self) -> None:
        with self._lock:
            self._hits = 0

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits


fileserver_hits = HitCounter()


class FileserverHitsMiddleware(BaseHTTPMiddleware):
    """Count every request under the static file prefix"""

    def __init__(self, app, prefix: str = "/app") -> None:
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path == self.prefix or path.startswith(self.prefix + "/"):
            fileserver_hits.increment()
        return await call_next(request)


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Middleware for monitoring and metrics collection"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics"""
        start_time = time.time()

        method = request.method
        path = request.url.path

        # Add request ID for tracing
        request_id = request.headers.get("x-request-id", f"req_{int(time.time() * 1000)}")
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            status = response.status_code
            endpoint = endpoint_label(request)

            duration = time.time() - start_time
            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=status
            ).inc()

            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            if duration > 1.0:
                logger.warning(
                    f"Slow request detected: {method} {path}",
                    extra={
                        "request_id": request_id,
                        "method": method,
                        "path": path,
                        "duration": duration,
                        "status": status
                    }
                )

            if status >= 400:
                http_errors_total.labels(
                    method=method,
                    endpoint=endpoint,
                    status=status
                ).inc()

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration:.3f}s"

            return response

        except Exception as e:
            duration = time.time() - start_time
            endpoint = endpoint_label(request)
            http_errors_total.labels(
                method=method,
                endpoint=endpoint,
                status=500
            ).inc()

            logger.error(
                f"Request failed: {method} {path}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration": duration,
                    "error": str(e)
                },
                exc_info=True
            )
            raise


def record_auth_failure(endpoint: str) -> None:
    """Record authentication failure"""
    authentication_failures_total.labels(endpoint=endpoint).inc()
