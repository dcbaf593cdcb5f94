"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    AppConfig,
    LoggingConfig,
    Neo4jConfig,
    RetryConfig,
    SinkConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "AppConfig",
    # Sections
    "SinkConfig",
    "LoggingConfig",
    "RetryConfig",
    # Provider-specific configs
    "Neo4jConfig",
]
