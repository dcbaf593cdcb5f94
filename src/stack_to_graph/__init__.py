"""Turn captured call stacks into deduplicated call graphs."""

from stack_to_graph._version import __version__
from stack_to_graph.core import (
    ReportedStackSet,
    StackParser,
    StackToGraph,
    build_chain,
    capture_stack_trace,
    clear_default_reporter,
    get_default_reporter,
    report_stacktrace,
    set_default_reporter,
)
from stack_to_graph.models import CallChain, EdgeUpsert, NodeIdentity, NodeUpsert, StackFrame
from stack_to_graph.utils.errors import (
    ReporterNotConfiguredError,
    SinkWriteError,
    StackToGraphError,
)

__all__ = [
    "CallChain",
    "EdgeUpsert",
    "NodeIdentity",
    "NodeUpsert",
    "ReportedStackSet",
    "ReporterNotConfiguredError",
    "SinkWriteError",
    "StackFrame",
    "StackParser",
    "StackToGraph",
    "StackToGraphError",
    "__version__",
    "build_chain",
    "capture_stack_trace",
    "clear_default_reporter",
    "get_default_reporter",
    "report_stacktrace",
    "set_default_reporter",
]
