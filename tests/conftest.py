"""Shared test fixtures for stack-to-graph."""

from pathlib import Path

import pytest

from stack_to_graph.adapters.graph.memory import InMemoryGraphSink
from stack_to_graph.core.reporter import StackToGraph, clear_default_reporter
from stack_to_graph.models.frame import StackFrame
from stack_to_graph.utils.metrics import MetricsRegistry

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
STACKS_DIR = FIXTURES_DIR / "stacks"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def go_stack() -> str:
    """Load a stack captured from the example Go program."""
    return (STACKS_DIR / "go_example.txt").read_text()


@pytest.fixture
def http_stack() -> str:
    """Load a stack from an HTTP handler, with closures and a 'created by' trailer."""
    return (STACKS_DIR / "http_server.txt").read_text()


@pytest.fixture
def three_frame_stack() -> str:
    """Return a stack with frames C, B, A (innermost first)."""
    return (
        "goroutine 1 [running]:\n"
        "main.c()\n"
        "\t/src/app/main.go:30 +0x10\n"
        "main.b()\n"
        "\t/src/app/main.go:20 +0x10\n"
        "main.a()\n"
        "\t/src/app/main.go:10 +0x10\n"
    )


@pytest.fixture
def make_frame():
    """Factory for StackFrames with only the identity fields set."""

    def _make(function: str, receiver: str = "", package: str = "main") -> StackFrame:
        return StackFrame(
            original_signature=f"{package}.{function}",
            function=function,
            receiver=receiver,
            package=package,
            package_name=package.rsplit("/", 1)[-1],
            file="/src/app/main.go",
            folder="/src/app",
            folder_name="app",
            line="1",
        )

    return _make


@pytest.fixture
def memory_sink() -> InMemoryGraphSink:
    """Return an empty in-memory graph sink."""
    return InMemoryGraphSink()


@pytest.fixture
def metrics() -> MetricsRegistry:
    """Return a metrics registry isolated from the global one."""
    return MetricsRegistry()


@pytest.fixture
def reporter(memory_sink: InMemoryGraphSink, metrics: MetricsRegistry) -> StackToGraph:
    """Return a reporter writing to the in-memory sink."""
    return StackToGraph(memory_sink, metrics=metrics)


@pytest.fixture(autouse=True)
def _reset_default_reporter():
    """Make sure no test leaks a default reporter into the next one."""
    clear_default_reporter()
    yield
    clear_default_reporter()
