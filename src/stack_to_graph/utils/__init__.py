"""Utility functions and helpers.

This module provides various utilities for stack-to-graph:
- errors: Exception hierarchy
- security: Credential redaction
- logging: Structured logging with credential sanitization
- retry: Retry with exponential backoff
- health: Health check utilities
- metrics: Reporting counters
"""

from stack_to_graph.utils.errors import (
    ConfigurationError,
    ReporterNotConfiguredError,
    SinkWriteError,
    StackToGraphError,
)
from stack_to_graph.utils.health import (
    HealthChecker,
    HealthReport,
    HealthStatus,
)
from stack_to_graph.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from stack_to_graph.utils.metrics import (
    Counter,
    MetricsRegistry,
    get_metrics,
)
from stack_to_graph.utils.security import CredentialRedactor, RedactionError

__all__ = [
    # Errors
    "ConfigurationError",
    "ReporterNotConfiguredError",
    "SinkWriteError",
    "StackToGraphError",
    # Metrics
    "Counter",
    "MetricsRegistry",
    "get_metrics",
    # Health
    "HealthChecker",
    "HealthReport",
    "HealthStatus",
    # Logging
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # Security
    "CredentialRedactor",
    "RedactionError",
]
