"""Reporting of captured stacks to a graph sink.

StackToGraph ties the pipeline together:
1. Capture (or accept) the raw stack text
2. Skip the stack if the same text was already reported
3. Parse it into frames and build the caller-to-callee chain
4. Write the chain to the sink in one transaction
5. Mark the text reported, only after the write succeeded

A process-wide default reporter can be registered for call sites that do
not hold a handle; see set_default_reporter() and report_stacktrace().
"""

from __future__ import annotations

from threading import Lock
from typing import TYPE_CHECKING, Any

import structlog

from stack_to_graph.core.capture import capture_stack_trace
from stack_to_graph.core.chain_builder import build_chain
from stack_to_graph.core.dedup import ReportedStackSet
from stack_to_graph.core.stack_parser import StackParser
from stack_to_graph.utils.errors import ReporterNotConfiguredError, SinkWriteError
from stack_to_graph.utils.logging import LogEventNames
from stack_to_graph.utils.metrics import MetricsRegistry, get_metrics

if TYPE_CHECKING:
    from stack_to_graph.config.schema import AppConfig
    from stack_to_graph.interfaces.sink import GraphSink
    from stack_to_graph.interfaces.source import StackSource

log = structlog.get_logger()


class StackToGraph:
    """Reports call stacks as call graphs.

    Safe to call from many threads at once. Parsing and chain building
    share no state; the set of reported stacks is the only shared
    structure and is never locked while the sink is being written.

    Example:
        with StackToGraph(InMemoryGraphSink()) as reporter:
            reporter.report_stacktrace(stack_text)
    """

    def __init__(
        self,
        sink: GraphSink,
        *,
        parser: StackParser | None = None,
        cache: ReportedStackSet | None = None,
        stack_source: StackSource | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            sink: Graph sink the chains are written to
            parser: Stack parser (default: StackParser())
            cache: Set of reported stacks (default: a new, empty set)
            stack_source: Producer of stack text used when
                report_stacktrace() is called without text
                (default: capture_stack_trace)
            metrics: Metrics registry (default: the global registry)
        """
        self._sink = sink
        self._parser = parser or StackParser()
        self._cache = cache if cache is not None else ReportedStackSet()
        self._stack_source = stack_source or capture_stack_trace
        self._metrics = metrics or get_metrics()

    @classmethod
    def from_neo4j(
        cls,
        uri: str,
        username: str,
        password: str,
        database: str = "neo4j",
        **kwargs: Any,
    ) -> StackToGraph:
        """Create a reporter writing to a Neo4j server.

        Args:
            uri: Neo4j connection URI, e.g. ``neo4j://localhost:7687``
            username: Neo4j user
            password: Neo4j password
            database: Database name
            **kwargs: Forwarded to StackToGraph()
        """
        from stack_to_graph.adapters.graph.neo4j import Neo4jGraphSink

        sink = Neo4jGraphSink.from_credentials(uri, username, password, database=database)
        return cls(sink, **kwargs)

    @property
    def sink(self) -> GraphSink:
        """The sink chains are written to."""
        return self._sink

    @property
    def cache(self) -> ReportedStackSet:
        """The set of already reported stacks."""
        return self._cache

    def report_stacktrace(self, stack_text: str | None = None) -> bool:
        """Report a stack to the graph sink.

        Args:
            stack_text: Raw stack text. When omitted the current stack is
                captured from the configured stack source.

        Returns:
            True if a chain was written, False if the stack was a duplicate
            or contained no frames

        Raises:
            SinkWriteError: If the sink write failed. The stack stays
                eligible for a later retry.
        """
        if stack_text is None:
            stack_text = self._stack_source()
            log.debug(LogEventNames.STACK_CAPTURED, length=len(stack_text))

        self._metrics.stacks_received.inc()

        # The claim is released if anything below raises, marked otherwise
        with self._cache.claim(stack_text) as granted:
            if not granted:
                self._metrics.stacks_duplicate.inc()
                log.debug(LogEventNames.STACK_DUPLICATE)
                return False

            try:
                frames = self._parser.parse(stack_text)
                chain = build_chain(frames, raw_text=stack_text)

                if chain.is_empty:
                    log.warning(LogEventNames.STACK_EMPTY, length=len(stack_text))
                    return False

                self._sink.write_chain(chain)
            except SinkWriteError as e:
                self._metrics.report_errors.inc()
                log.error(
                    LogEventNames.STACK_REPORT_ERROR,
                    error=str(e),
                    operations=e.operations,
                )
                raise
            except Exception as e:
                self._metrics.report_errors.inc()
                log.error(
                    LogEventNames.STACK_REPORT_ERROR,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

        self._metrics.stacks_reported.inc()
        self._metrics.frames_parsed.inc(len(frames))
        self._metrics.nodes_written.inc(len(chain.nodes))
        self._metrics.edges_written.inc(len(chain.edges))
        log.info(
            LogEventNames.STACK_REPORTED,
            frames=len(frames),
            root=frames[-1].qualified_name,
            leaf=frames[0].qualified_name,
        )
        return True

    def setup_global(self) -> None:
        """Register this reporter as the process-wide default."""
        set_default_reporter(self)

    def close(self) -> None:
        """Close the sink. Unregisters this reporter if it is the default."""
        global _default_reporter
        with _default_lock:
            if _default_reporter is self:
                _default_reporter = None
        self._sink.close()

    def __enter__(self) -> StackToGraph:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def create_reporter(config: AppConfig) -> StackToGraph:
    """Create a reporter and its sink from configuration.

    Args:
        config: Application configuration

    Returns:
        Reporter writing to the configured sink
    """
    from stack_to_graph.adapters.graph import create_sink

    return StackToGraph(create_sink(config))


# =============================================================================
# Process-wide default reporter
# =============================================================================

_default_reporter: StackToGraph | None = None
_default_lock = Lock()


def set_default_reporter(reporter: StackToGraph) -> None:
    """Register the reporter used by report_stacktrace()."""
    global _default_reporter
    with _default_lock:
        _default_reporter = reporter
    log.debug(LogEventNames.DEFAULT_REPORTER_SET)


def get_default_reporter() -> StackToGraph:
    """Return the registered default reporter.

    Raises:
        ReporterNotConfiguredError: If no reporter was registered
    """
    with _default_lock:
        reporter = _default_reporter
    if reporter is None:
        log.warning(LogEventNames.DEFAULT_REPORTER_MISSING)
        raise ReporterNotConfiguredError(
            "Default reporter is not set. Call set_default_reporter() or "
            "StackToGraph.setup_global() before using report_stacktrace()."
        )
    return reporter


def clear_default_reporter() -> None:
    """Unregister the default reporter without closing it."""
    global _default_reporter
    with _default_lock:
        _default_reporter = None


def report_stacktrace(stack_text: str | None = None) -> bool:
    """Report a stack with the default reporter.

    Args:
        stack_text: Raw stack text; the current stack is captured if omitted

    Returns:
        True if a chain was written, False otherwise

    Raises:
        ReporterNotConfiguredError: If no default reporter was registered
        SinkWriteError: If the sink write failed
    """
    return get_default_reporter().report_stacktrace(stack_text)
