"""Monitoring and observability middleware"""
import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from voyage_admin.utils.logger import logger


# ===== Prometheus Metrics =====

# Request metrics
http_requests_total = Counter(
    "voyage_admin_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "voyage_admin_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"]
)

# Auth metrics
login_attempts_total = Counter(
    "voyage_admin_login_attempts_total",
    "Total admin login attempts",
    ["outcome"]  # success, invalid_credentials, access_denied, auth_error
)

authentication_failures_total = Counter(
    "voyage_admin_authentication_failures_total",
    "Total rejected bearer sessions",
    ["reason"]  # missing, invalid_credentials, access_denied, auth_error, forbidden
)

# Error metrics
http_errors_total = Counter(
    "voyage_admin_http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "status"]
)


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Middleware for monitoring and metrics collection"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics"""
        start_time = time.time()

        method = request.method
        endpoint = request.url.path

        # Add request ID for tracing
        request_id = request.headers.get("x-request-id", f"req_{int(time.time() * 1000)}")
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            status = response.status_code

            duration = time.time() - start_time
            http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

            if duration > 1.0:
                logger.warning(
                    f"Slow request detected: {method} {endpoint}",
                    extra={"request_id": request_id, "method": method, "path": endpoint},
                )

            if status >= 400:
                http_errors_total.labels(method=method, endpoint=endpoint, status=status).inc()

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration:.3f}s"

            return response

        except Exception:
            http_errors_total.labels(method=method, endpoint=endpoint, status=500).inc()
            logger.error(
                f"Request failed: {method} {endpoint}",
                extra={"request_id": request_id, "method": method, "path": endpoint},
                exc_info=True
            )
            raise


def record_login_attempt(outcome: str):
    """Record a login attempt by outcome (success or error code)"""
    login_attempts_total.labels(outcome=outcome).inc()


def record_auth_failure(reason: str):
    """Record a rejected bearer session"""
    authentication_failures_total.labels(reason=reason).inc()
