"""Health check utilities.

This module checks that stack-to-graph can do its job:
- Configuration selects a sink and carries its settings
- The graph sink is reachable
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from stack_to_graph.utils.logging import LogEventNames

if TYPE_CHECKING:
    from stack_to_graph.config.schema import AppConfig
    from stack_to_graph.interfaces.sink import GraphSink

log = structlog.get_logger()


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str
    latency_ms: float | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Overall health report."""

    healthy: bool
    status: HealthStatus
    timestamp: datetime
    checks: list[CheckResult]
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "healthy": self.healthy,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "checks": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                    "details": c.details,
                }
                for c in self.checks
            ],
            "details": self.details,
        }


class HealthChecker:
    """Runs health checks against the configuration and the graph sink.

    Example:
        checker = HealthChecker(config, sink)
        report = checker.run_all_checks()
        if not report.healthy:
            print(report.to_dict())
    """

    def __init__(self, config: AppConfig, sink: GraphSink | None = None) -> None:
        """Initialize the health checker.

        Args:
            config: Application configuration
            sink: Sink to probe; connectivity is skipped when omitted
        """
        self._config = config
        self._sink = sink

    def run_all_checks(self) -> HealthReport:
        """Run all health checks and return a report."""
        log.info(LogEventNames.HEALTH_CHECK_START)
        start_time = datetime.now(UTC)

        checks = [self._check_config(), self._check_sink()]

        if all(c.status == HealthStatus.HEALTHY for c in checks):
            overall_status = HealthStatus.HEALTHY
            healthy = True
        elif any(c.status == HealthStatus.UNHEALTHY for c in checks):
            overall_status = HealthStatus.UNHEALTHY
            healthy = False
        else:
            overall_status = HealthStatus.DEGRADED
            healthy = True

        report = HealthReport(
            healthy=healthy,
            status=overall_status,
            timestamp=start_time,
            checks=checks,
            details={
                "total_checks": len(checks),
                "healthy_checks": sum(1 for c in checks if c.status == HealthStatus.HEALTHY),
                "unhealthy_checks": sum(1 for c in checks if c.status == HealthStatus.UNHEALTHY),
            },
        )

        log.info(
            LogEventNames.HEALTH_CHECK_COMPLETE,
            healthy=healthy,
            status=overall_status.value,
            checks_run=len(checks),
        )

        return report

    def _check_config(self) -> CheckResult:
        """Check that the selected sink is configured."""
        provider = self._config.sink.provider

        if provider == "neo4j" and self._config.sink.neo4j is None:
            return CheckResult(
                name="config",
                status=HealthStatus.UNHEALTHY,
                message="Neo4j sink selected but neo4j config missing",
            )

        return CheckResult(
            name="config",
            status=HealthStatus.HEALTHY,
            message="Configuration valid",
            details={"sink_provider": provider},
        )

    def _check_sink(self) -> CheckResult:
        """Check that the sink is reachable."""
        if self._sink is None:
            return CheckResult(
                name="sink",
                status=HealthStatus.UNKNOWN,
                message="No sink provided, skipping",
            )

        verify = getattr(self._sink, "verify_connectivity", None)
        if verify is None:
            return CheckResult(
                name="sink",
                status=HealthStatus.HEALTHY,
                message="Sink does not need a connection",
                details={"sink": type(self._sink).__name__},
            )

        start = time.perf_counter()
        try:
            verify()
        except Exception as e:
            log.warning(LogEventNames.HEALTH_CHECK_FAILED, check="sink", error=str(e))
            return CheckResult(
                name="sink",
                status=HealthStatus.UNHEALTHY,
                message=f"Sink unreachable: {e}",
            )
        latency_ms = (time.perf_counter() - start) * 1000

        return CheckResult(
            name="sink",
            status=HealthStatus.HEALTHY,
            message="Sink reachable",
            latency_ms=latency_ms,
            details={"sink": type(self._sink).__name__},
        )
