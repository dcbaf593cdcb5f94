"""Data models and transfer objects."""

from .frame import RawFrame, StackFrame
from .graph import CallChain, EdgeUpsert, GraphOperation, NodeIdentity, NodeUpsert

__all__ = [
    # Frame models
    "RawFrame",
    "StackFrame",
    # Graph models
    "NodeIdentity",
    "NodeUpsert",
    "EdgeUpsert",
    "GraphOperation",
    "CallChain",
]
