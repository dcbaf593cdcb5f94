"""Graph sink adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .memory import InMemoryGraphSink

if TYPE_CHECKING:
    from ...config.schema import AppConfig
    from ...interfaces.sink import GraphSink

__all__ = ["InMemoryGraphSink", "create_sink"]


def create_sink(config: AppConfig) -> GraphSink:
    """Create the graph sink selected by the configuration.

    Args:
        config: Application configuration

    Returns:
        Configured GraphSink

    Raises:
        ConfigurationError: If the selected provider has no configuration
    """
    from ...utils.errors import ConfigurationError

    if config.sink.provider == "memory":
        return InMemoryGraphSink()

    if config.sink.provider == "neo4j":
        if config.sink.neo4j is None:
            raise ConfigurationError("Neo4j sink selected but neo4j config missing")

        from .neo4j import Neo4jGraphSink

        return Neo4jGraphSink.from_config(config.sink.neo4j, config.retry)

    raise ConfigurationError(f"Unknown sink provider: {config.sink.provider}")
