"""Protocol definitions for pluggable adapters."""

from .sink import GraphSink
from .source import StackSource

__all__ = ["GraphSink", "StackSource"]
