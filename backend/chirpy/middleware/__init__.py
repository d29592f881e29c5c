"""Middleware modules for metrics, hit counting and rate limiting"""
from chirpy.middleware.monitoring import (
    FileserverHitsMiddleware,
    HitCounter,
    MonitoringMiddleware,
    fileserver_hits,
    record_auth_failure,
)
from chirpy.middleware.rate_limit import limiter

__all__ = [
    "FileserverHitsMiddleware",
    "HitCounter",
    "MonitoringMiddleware",
    "fileserver_hits",
    "record_auth_failure",
    "limiter",
]
