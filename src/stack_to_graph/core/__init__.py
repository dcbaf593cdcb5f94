"""Core stack parsing and reporting components.

This module exports:
- StackParser: Turns raw stack text into normalized StackFrames
- ReportedStackSet: Thread-safe record of already reported stacks
- build_chain: Caller-to-callee graph operations for a parsed stack
- StackToGraph: Reporter tying parsing, dedup and the graph sink together
"""

from stack_to_graph.core.capture import capture_stack_trace
from stack_to_graph.core.chain_builder import build_chain
from stack_to_graph.core.dedup import ReportedStackSet
from stack_to_graph.core.frame_splitter import split_frames
from stack_to_graph.core.identity import (
    normalize_frame,
    parse_folder,
    parse_package_name,
    parse_receiver,
    parse_repository,
)
from stack_to_graph.core.reporter import (
    StackToGraph,
    clear_default_reporter,
    create_reporter,
    get_default_reporter,
    report_stacktrace,
    set_default_reporter,
)
from stack_to_graph.core.signature import clean_function_name
from stack_to_graph.core.stack_parser import StackParser

__all__ = [
    "ReportedStackSet",
    "StackParser",
    "StackToGraph",
    "build_chain",
    "capture_stack_trace",
    "clean_function_name",
    "clear_default_reporter",
    "create_reporter",
    "get_default_reporter",
    "normalize_frame",
    "parse_folder",
    "parse_package_name",
    "parse_receiver",
    "parse_repository",
    "report_stacktrace",
    "set_default_reporter",
    "split_frames",
]
