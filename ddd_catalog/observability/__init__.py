"""
DDD Catalog - Observability Package

- logging: structlog configuration with trace context
- tracing: OpenTelemetry span helpers
"""
from ddd_catalog.observability.logging import (
    LogContext,
    LoggingConfig,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from ddd_catalog.observability.tracing import create_span, get_tracer

__all__ = [
    "LogContext",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "create_span",
    "get_tracer",
]
