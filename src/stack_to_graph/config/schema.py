"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NEO4J_SCHEMES = frozenset({"neo4j", "neo4j+s", "neo4j+ssc", "bolt", "bolt+s", "bolt+ssc"})


class Neo4jConfig(BaseModel):
    """Neo4j-specific configuration."""

    uri: str = "neo4j://localhost:7687"
    username: str = "neo4j"
    password: str
    database: str = "neo4j"
    connection_timeout: float = Field(30.0, gt=0)

    @field_validator("uri")
    @classmethod
    def validate_uri(cls, v: str) -> str:
        """Validate the Neo4j connection URI scheme."""
        parsed = urlparse(v)
        if parsed.scheme not in NEO4J_SCHEMES:
            raise ValueError(
                f"Unsupported Neo4j URI scheme: {parsed.scheme or '<none>'}. "
                f"Expected one of: {', '.join(sorted(NEO4J_SCHEMES))}"
            )
        if not parsed.hostname:
            raise ValueError(f"Neo4j URI has no host: {v}")
        return v


class SinkConfig(BaseModel):
    """Graph sink configuration."""

    provider: Literal["neo4j", "memory"] = "memory"
    neo4j: Neo4jConfig | None = None


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/stack-to-graph/stack-to-graph.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: FileLoggingConfig = FileLoggingConfig()


class RetryConfig(BaseModel):
    """Retry configuration for transient sink failures."""

    max_attempts: int = Field(3, ge=1, le=10)
    initial_delay: float = Field(1.0, ge=0.0, le=10.0)
    max_delay: float = Field(30.0, ge=0.0, le=300.0)


class AppConfig(BaseSettings):
    """Root configuration for stack-to-graph."""

    sink: SinkConfig = SinkConfig()
    logging: LoggingConfig = LoggingConfig()
    retry: RetryConfig = RetryConfig()

    model_config = SettingsConfigDict(
        env_prefix="STACK_TO_GRAPH_",
        env_nested_delimiter="__",
    )
