"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
import structlog

from stack_to_graph.__main__ import main, parse_args
from stack_to_graph.adapters.graph.memory import InMemoryGraphSink
from stack_to_graph.models.graph import NodeIdentity


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def stack_file(fixtures_dir: Path) -> str:
    """Path to the example Go stack."""
    return str(fixtures_dir / "stacks" / "go_example.txt")


@pytest.fixture
def memory_config(tmp_path: Path) -> Path:
    """Write a configuration selecting the in-memory sink."""
    path = tmp_path / "config.yaml"
    path.write_text("sink:\n  provider: memory\nlogging:\n  level: INFO\n")
    return path


class TestParseArgs:
    """Tests for argument parsing."""

    def test_report_defaults(self):
        """Test defaults of the report subcommand."""
        args = parse_args(["report", "stack.txt"])

        assert args.command == "report"
        assert args.config == Path("config/config.yaml")
        assert args.debug is False
        assert args.format == "console"

    def test_command_required(self):
        """Test that a subcommand is required."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestParseCommand:
    """Tests for the parse subcommand."""

    def test_prints_frames(self, stack_file: str, capsys: pytest.CaptureFixture[str]):
        """Test that one JSON object per frame is printed."""
        assert main(["parse", stack_file]) == 0

        lines = capsys.readouterr().out.splitlines()
        frames = [json.loads(line) for line in lines]
        assert [f["function"] for f in frames] == [
            "captureStackTrace",
            "ReportStacktrace",
            "DoSomething",
            "SayHello",
            "functionA",
            "main",
        ]
        assert frames[3]["receiver"] == "Person"

    def test_missing_file(self, capsys: pytest.CaptureFixture[str]):
        """Test that a missing stack file exits with an error."""
        assert main(["parse", "/nonexistent/stack.txt"]) == 1
        assert "file_not_found" in capsys.readouterr().err


class TestReportCommand:
    """Tests for the report subcommand."""

    def test_report_to_memory_sink(
        self,
        stack_file: str,
        memory_config: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test that the stack is written to the configured sink."""
        sink = InMemoryGraphSink()
        monkeypatch.setattr("stack_to_graph.adapters.graph.create_sink", lambda config: sink)

        assert main(["report", stack_file, "--config", str(memory_config)]) == 0

        assert len(sink.nodes) == 6
        assert sink.has_edge(
            NodeIdentity("main", "", "main"),
            NodeIdentity("functionA", "", "main"),
        )
        assert sink.closed is True

    def test_missing_config(self, stack_file: str):
        """Test that a missing configuration file exits with an error."""
        assert main(["report", stack_file, "--config", "/nonexistent/config.yaml"]) == 1

    def test_invalid_config(self, stack_file: str, tmp_path: Path):
        """Test that an invalid configuration exits with an error."""
        path = tmp_path / "config.yaml"
        path.write_text("sink:\n  provider: neo4j\n")

        assert main(["report", stack_file, "--config", str(path)]) == 1


class TestHealthCommand:
    """Tests for the health subcommand."""

    def test_memory_sink_healthy(
        self, memory_config: Path, capsys: pytest.CaptureFixture[str]
    ):
        """Test the health report for the in-memory sink."""
        assert main(["health", "--config", str(memory_config)]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["healthy"] is True
        assert report["status"] == "healthy"


class TestLoggingFromConfig:
    """Tests for applying the logging section of the configuration."""

    def test_file_logging_from_config(
        self,
        stack_file: str,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test that file logging configured in YAML is enabled for a report."""
        log_file = tmp_path / "logs" / "stack-to-graph.log"
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "sink:\n"
            "  provider: memory\n"
            "logging:\n"
            "  level: DEBUG\n"
            "  format: json\n"
            "  file:\n"
            "    enabled: true\n"
            f"    path: {log_file}\n"
        )
        monkeypatch.setattr(
            "stack_to_graph.adapters.graph.create_sink", lambda config: InMemoryGraphSink()
        )

        assert main(["report", stack_file, "--config", str(config_path)]) == 0

        assert log_file.exists()
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert "report_complete" in {entry["event"] for entry in entries}

    def test_configured_level_applies(
        self,
        memory_config: Path,
        capsys: pytest.CaptureFixture[str],
    ):
        """Test that the configured level filters the health command's logs."""
        memory_config.write_text("sink:\n  provider: memory\nlogging:\n  level: ERROR\n")

        assert main(["health", "--config", str(memory_config)]) == 0

        assert "health_check_complete" not in capsys.readouterr().err
