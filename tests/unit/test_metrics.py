"""Tests for metrics collection."""

import pytest

from stack_to_graph.utils.metrics import Counter, MetricsRegistry, MetricType, get_metrics


class TestCounter:
    """Tests for Counter."""

    def test_increment(self):
        """Test default and explicit increments."""
        counter = Counter("test_total")
        counter.inc()
        counter.inc(4)
        assert counter.get() == 5

    def test_labels_are_separate(self):
        """Test that labelled values are tracked independently."""
        counter = Counter("test_total")
        counter.inc(labels={"sink": "neo4j"})
        counter.inc(2, labels={"sink": "memory"})

        assert counter.get(labels={"sink": "neo4j"}) == 1
        assert counter.get(labels={"sink": "memory"}) == 2
        assert counter.get() == 0

    def test_negative_rejected(self):
        """Test that counters cannot decrease."""
        with pytest.raises(ValueError, match="only increase"):
            Counter("test_total").inc(-1)

    def test_get_all(self):
        """Test exporting values with metadata."""
        counter = Counter("test_total", "Help")
        counter.inc(3)

        (value,) = counter.get_all()
        assert value.type == MetricType.COUNTER
        assert value.value == 3
        assert value.help_text == "Help"

    def test_reset(self):
        """Test resetting a counter."""
        counter = Counter("test_total")
        counter.inc()
        counter.reset()
        assert counter.get() == 0


class TestMetricsRegistry:
    """Tests for MetricsRegistry."""

    def test_get_all_metrics(self, metrics: MetricsRegistry):
        """Test the dictionary export."""
        metrics.stacks_received.inc(2)
        metrics.stacks_reported.inc()
        metrics.edges_written.inc(5)

        result = metrics.get_all_metrics()

        assert result["stacks"]["received"] == 2
        assert result["stacks"]["reported"] == 1
        assert result["graph"]["edges_written"] == 5
        assert result["uptime_seconds"] >= 0

    def test_prometheus_format(self, metrics: MetricsRegistry):
        """Test the Prometheus text export."""
        metrics.stacks_duplicate.inc()

        output = metrics.to_prometheus_format()

        assert "# TYPE stack_to_graph_stacks_duplicate_total counter" in output
        assert "stack_to_graph_stacks_duplicate_total 1" in output
        assert "stack_to_graph_uptime_seconds" in output

    def test_reset(self, metrics: MetricsRegistry):
        """Test resetting all counters."""
        metrics.report_errors.inc()
        metrics.reset()
        assert metrics.report_errors.get() == 0

    def test_singleton(self):
        """Test that the global registry is shared."""
        assert get_metrics() is MetricsRegistry.get_instance()
