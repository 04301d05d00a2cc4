"""Middleware modules for production-ready features"""
from voyage_admin.middleware.monitoring import (
    MonitoringMiddleware,
    record_auth_failure,
    record_login_attempt,
)
from voyage_admin.middleware.rate_limit import get_rate_limit, limiter

__all__ = [
    "MonitoringMiddleware",
    "record_auth_failure",
    "record_login_attempt",
    "limiter",
    "get_rate_limit",
]
