"""Tests for configuration loading and validation."""

from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest
from pydantic import ValidationError

from stack_to_graph.adapters.graph import InMemoryGraphSink, create_sink
from stack_to_graph.config.loader import load_config, substitute_env_vars, validate_config
from stack_to_graph.config.schema import (
    AppConfig,
    LoggingConfig,
    Neo4jConfig,
    RetryConfig,
    SinkConfig,
)
from stack_to_graph.utils.errors import ConfigurationError


class TestSubstituteEnvVars:
    """Test environment variable substitution."""

    def test_substitute_single_var(self, monkeypatch: pytest.MonkeyPatch):
        """Test substituting a single environment variable."""
        monkeypatch.setenv("TEST_VAR", "test_value")
        assert substitute_env_vars("Value is ${TEST_VAR}") == "Value is test_value"

    def test_missing_env_var_raises(self, monkeypatch: pytest.MonkeyPatch):
        """Test that missing environment variables raise ValueError."""
        monkeypatch.delenv("MISSING", raising=False)
        with pytest.raises(ValueError, match="Environment variable MISSING not found"):
            substitute_env_vars("Value is ${MISSING}")

    def test_no_substitution_needed(self):
        """Test text without environment variables passes through unchanged."""
        assert substitute_env_vars("plain text") == "plain text"


class TestNeo4jConfig:
    """Test Neo4jConfig validation."""

    def test_defaults(self):
        """Test default connection settings."""
        config = Neo4jConfig(password="secret")
        assert config.uri == "neo4j://localhost:7687"
        assert config.username == "neo4j"
        assert config.database == "neo4j"

    @pytest.mark.parametrize(
        "uri",
        ["neo4j://db", "neo4j+s://db.example.com", "bolt://127.0.0.1:7687", "bolt+ssc://db"],
    )
    def test_valid_schemes(self, uri: str):
        """Test that Neo4j URI schemes are accepted."""
        assert Neo4jConfig(uri=uri, password="secret").uri == uri

    def test_invalid_scheme_rejected(self):
        """Test that other schemes are rejected."""
        with pytest.raises(ValidationError, match="Unsupported Neo4j URI scheme"):
            Neo4jConfig(uri="http://localhost:7474", password="secret")

    def test_missing_host_rejected(self):
        """Test that a URI without a host is rejected."""
        with pytest.raises(ValidationError, match="has no host"):
            Neo4jConfig(uri="bolt://", password="secret")

    def test_password_required(self):
        """Test that the password has no default."""
        with pytest.raises(ValidationError):
            Neo4jConfig()


class TestRetryConfig:
    """Test RetryConfig bounds."""

    def test_attempts_bounds(self):
        """Test that attempts must be at least one."""
        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=0)


class TestAppConfig:
    """Test the root configuration."""

    def test_defaults(self):
        """Test that the default sink is the in-memory one."""
        config = AppConfig()
        assert config.sink.provider == "memory"
        assert config.logging == LoggingConfig()

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        """Test nested settings from environment variables."""
        monkeypatch.setenv("STACK_TO_GRAPH_LOGGING__LEVEL", "DEBUG")
        assert AppConfig().logging.level == "DEBUG"


class TestLoadConfig:
    """Test loading configuration files."""

    def _write(self, content: str) -> Path:
        with NamedTemporaryFile("w", suffix=".yaml", delete=False) as f:
            f.write(content)
        return Path(f.name)

    def test_load_neo4j_config(self, monkeypatch: pytest.MonkeyPatch):
        """Test loading a Neo4j configuration with a secret from the environment."""
        monkeypatch.setenv("NEO4J_PASSWORD", "hunter2")
        path = self._write(
            "sink:\n"
            "  provider: neo4j\n"
            "  neo4j:\n"
            "    uri: bolt://db:7687\n"
            "    password: ${NEO4J_PASSWORD}\n"
            "logging:\n"
            "  level: WARNING\n"
            "  format: console\n"
        )
        try:
            config = load_config(path)
        finally:
            path.unlink()

        assert config.sink.provider == "neo4j"
        assert config.sink.neo4j is not None
        assert config.sink.neo4j.password == "hunter2"
        assert config.logging.level == "WARNING"

    def test_empty_file_uses_defaults(self):
        """Test that an empty file is a valid configuration."""
        path = self._write("")
        try:
            config = load_config(path)
        finally:
            path.unlink()

        assert config.sink.provider == "memory"

    def test_missing_file(self):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/config.yaml"))

    def test_missing_provider_section(self):
        """Test that selecting Neo4j without its section is rejected."""
        path = self._write("sink:\n  provider: neo4j\n")
        try:
            with pytest.raises(ConfigurationError, match="neo4j config missing"):
                load_config(path)
        finally:
            path.unlink()


class TestValidateConfig:
    """Test cross-field validation."""

    def test_memory_needs_nothing(self):
        """Test that the memory sink needs no extra section."""
        validate_config(AppConfig(sink=SinkConfig(provider="memory")))

    def test_configuration_error_is_value_error(self):
        """Test that callers catching ValueError also catch config errors."""
        with pytest.raises(ValueError):
            validate_config(AppConfig(sink=SinkConfig(provider="neo4j")))


class TestCreateSink:
    """Test sink selection from configuration."""

    def test_memory(self):
        """Test that the memory provider gives an in-memory sink."""
        assert isinstance(create_sink(AppConfig()), InMemoryGraphSink)

    def test_neo4j_without_section(self):
        """Test that a missing Neo4j section is reported."""
        with pytest.raises(ConfigurationError):
            create_sink(AppConfig(sink=SinkConfig(provider="neo4j")))
