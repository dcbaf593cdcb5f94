"""Metrics collection for observability.

This module counts reporting activity:
- Stacks received, reported and skipped as duplicates
- Report failures
- Frames parsed and graph operations written

Metrics can be exported as a dictionary or in Prometheus text format.
"""

from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from threading import Lock
from typing import Any


class MetricType(StrEnum):
    """Types of metrics."""

    COUNTER = "counter"


@dataclass
class MetricValue:
    """A single metric value with metadata."""

    name: str
    type: MetricType
    value: float
    labels: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    help_text: str = ""


class Counter:
    """A monotonically increasing counter.

    Example:
        counter = Counter("stacks_reported", "Total stacks reported")
        counter.inc()  # Increment by 1
        counter.inc(5)  # Increment by 5
        counter.inc(labels={"sink": "neo4j"})  # With labels
    """

    def __init__(self, name: str, help_text: str = "") -> None:
        """Initialize counter.

        Args:
            name: Metric name
            help_text: Description of the metric
        """
        self.name = name
        self.help_text = help_text
        self._values: dict[tuple[tuple[str, str], ...], float] = defaultdict(float)
        self._lock = Lock()

    def inc(self, value: float = 1, labels: dict[str, str] | None = None) -> None:
        """Increment the counter.

        Args:
            value: Amount to increment (default 1)
            labels: Optional labels for this observation
        """
        if value < 0:
            raise ValueError("Counter can only increase")

        label_key = tuple(sorted(labels.items())) if labels else ()
        with self._lock:
            self._values[label_key] += value

    def get(self, labels: dict[str, str] | None = None) -> float:
        """Get current counter value for the given labels."""
        label_key = tuple(sorted(labels.items())) if labels else ()
        with self._lock:
            return self._values.get(label_key, 0)

    def get_all(self) -> list[MetricValue]:
        """Get all counter values with their labels."""
        with self._lock:
            return [
                MetricValue(
                    name=self.name,
                    type=MetricType.COUNTER,
                    value=value,
                    labels=dict(label_key),
                    help_text=self.help_text,
                )
                for label_key, value in self._values.items()
            ]

    def reset(self) -> None:
        """Reset all values to zero."""
        with self._lock:
            self._values.clear()


class MetricsRegistry:
    """Registry for all application metrics.

    This is a singleton that holds all metrics and provides
    methods for exporting them.

    Example:
        registry = MetricsRegistry.get_instance()
        registry.stacks_reported.inc()
        metrics = registry.get_all_metrics()
    """

    _instance: MetricsRegistry | None = None
    _lock = Lock()

    def __init__(self) -> None:
        """Initialize the metrics registry."""
        self.stacks_received = Counter(
            "stack_to_graph_stacks_received_total",
            "Total stacks submitted for reporting",
        )
        self.stacks_reported = Counter(
            "stack_to_graph_stacks_reported_total",
            "Total stacks written to the graph sink",
        )
        self.stacks_duplicate = Counter(
            "stack_to_graph_stacks_duplicate_total",
            "Total stacks skipped because they were already reported",
        )
        self.report_errors = Counter(
            "stack_to_graph_report_errors_total",
            "Total failed stack reports",
        )
        self.frames_parsed = Counter(
            "stack_to_graph_frames_parsed_total",
            "Total frames parsed from reported stacks",
        )
        self.nodes_written = Counter(
            "stack_to_graph_nodes_written_total",
            "Total node upserts sent to the graph sink",
        )
        self.edges_written = Counter(
            "stack_to_graph_edges_written_total",
            "Total edge upserts sent to the graph sink",
        )

        self._start_time = time.time()

    @classmethod
    def get_instance(cls) -> MetricsRegistry:
        """Get the singleton metrics registry instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @property
    def counters(self) -> list[Counter]:
        """All counters held by the registry."""
        return [
            self.stacks_received,
            self.stacks_reported,
            self.stacks_duplicate,
            self.report_errors,
            self.frames_parsed,
            self.nodes_written,
            self.edges_written,
        ]

    def get_uptime_seconds(self) -> float:
        """Get uptime in seconds."""
        return time.time() - self._start_time

    def get_all_metrics(self) -> dict[str, Any]:
        """Get all metrics as a dictionary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "stacks": {
                "received": self.stacks_received.get(),
                "reported": self.stacks_reported.get(),
                "duplicate": self.stacks_duplicate.get(),
                "errors": self.report_errors.get(),
            },
            "graph": {
                "frames_parsed": self.frames_parsed.get(),
                "nodes_written": self.nodes_written.get(),
                "edges_written": self.edges_written.get(),
            },
        }

    def to_prometheus_format(self) -> str:
        """Export metrics in Prometheus text format."""
        lines: list[str] = []

        for counter in self.counters:
            if counter.help_text:
                lines.append(f"# HELP {counter.name} {counter.help_text}")
            lines.append(f"# TYPE {counter.name} counter")
            for metric in counter.get_all():
                if metric.labels:
                    label_str = ",".join(f'{k}="{v}"' for k, v in metric.labels.items())
                    lines.append(f"{counter.name}{{{label_str}}} {metric.value}")
                else:
                    lines.append(f"{counter.name} {metric.value}")

        lines.append("# HELP stack_to_graph_uptime_seconds Uptime in seconds")
        lines.append("# TYPE stack_to_graph_uptime_seconds gauge")
        lines.append(f"stack_to_graph_uptime_seconds {self.get_uptime_seconds()}")

        return "\n".join(lines)

    def reset(self) -> None:
        """Reset every counter. Intended for tests."""
        for counter in self.counters:
            counter.reset()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    return MetricsRegistry.get_instance()
