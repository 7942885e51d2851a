"""
Observability: structured logging, request IDs, request logging and health checks.

Usage:
    from lib.observability import configure_logging, RequestContext, HealthChecker

    configure_logging(level="INFO")

    with RequestContext() as ctx:
        logger.info("Planning run started")

    report = HealthChecker().run_all()
"""

from .context import RequestContext, generate_request_id, get_request_id, set_request_id
from .health import HealthChecker, HealthCheckResult, HealthReport, HealthStatus
from .logging import (
    HumanFormatter,
    JSONFormatter,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from .middleware import CorrelationIdMiddleware, RequestLoggingMiddleware

__all__ = [
    # Logging
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "HumanFormatter",
    "JSONFormatter",
    # Context
    "RequestContext",
    "generate_request_id",
    "get_request_id",
    "set_request_id",
    # Middleware
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    # Health
    "HealthChecker",
    "HealthCheckResult",
    "HealthReport",
    "HealthStatus",
]
