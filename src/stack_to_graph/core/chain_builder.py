"""Construction of caller-to-callee graph writes from parsed frames."""

from __future__ import annotations

from collections.abc import Sequence

from stack_to_graph.models.frame import StackFrame
from stack_to_graph.models.graph import (
    CallChain,
    EdgeUpsert,
    GraphOperation,
    NodeIdentity,
    NodeUpsert,
)


def build_chain(frames: Sequence[StackFrame], raw_text: str = "") -> CallChain:
    """Build the write operations for one captured stack.

    Stacks are captured innermost call first, so frames are walked in
    reverse: the outermost caller becomes the first node and each following
    node is linked from its predecessor with a CALLS edge.

    Args:
        frames: Parsed frames, innermost call first
        raw_text: Raw stack text the frames were parsed from

    Returns:
        CallChain whose operations alternate node, node, edge, node, edge...

    Example:
        frames [C, B, A] give node(A), node(B), edge(A->B), node(C), edge(B->C)
    """
    operations: list[GraphOperation] = []
    previous: NodeIdentity | None = None

    for frame in reversed(frames):
        current = NodeIdentity.from_frame(frame)
        operations.append(NodeUpsert(identity=current, properties=frame.to_properties()))

        if previous is not None:
            operations.append(EdgeUpsert(caller=previous, callee=current))

        previous = current

    return CallChain(operations=tuple(operations), raw_text=raw_text)
