"""In-memory graph sink.

Keeps nodes and CALLS edges in dictionaries. Useful for tests, dry runs and
for inspecting what a report would write without a running graph store.
"""

from __future__ import annotations

from threading import Lock

import structlog

from ...models.graph import CallChain, EdgeUpsert, NodeIdentity, NodeUpsert
from ...utils.errors import SinkWriteError
from ...utils.logging import LogEventNames

log = structlog.get_logger()


class InMemoryGraphSink:
    """Graph sink backed by process memory.

    Each chain is applied to a staged copy of the graph and committed only
    when every operation succeeds, so a failed chain leaves nothing behind.
    Edges whose endpoints have not been upserted are rejected.

    Example:
        sink = InMemoryGraphSink()
        sink.write_chain(chain)
        assert sink.has_edge(caller, callee)
    """

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._lock = Lock()
        self._nodes: dict[NodeIdentity, dict[str, str]] = {}
        self._edges: set[tuple[NodeIdentity, NodeIdentity]] = set()
        self._transactions = 0
        self._closed = False

    def write_chain(self, chain: CallChain) -> None:
        """Apply a call chain atomically.

        Args:
            chain: Ordered node and edge upserts

        Raises:
            SinkWriteError: If the sink is closed or an edge references an
                unknown node
        """
        with self._lock:
            if self._closed:
                raise SinkWriteError("In-memory sink is closed", operations=len(chain))

            nodes = dict(self._nodes)
            edges = set(self._edges)

            for operation in chain.operations:
                if isinstance(operation, NodeUpsert):
                    merged = dict(nodes.get(operation.identity, {}))
                    merged.update(operation.properties)
                    nodes[operation.identity] = merged
                elif isinstance(operation, EdgeUpsert):
                    if operation.caller not in nodes or operation.callee not in nodes:
                        raise SinkWriteError(
                            f"Edge references unknown node: {operation.caller} -> {operation.callee}",
                            operations=len(chain),
                        )
                    edges.add((operation.caller, operation.callee))

            self._nodes = nodes
            self._edges = edges
            self._transactions += 1

        log.debug(
            LogEventNames.SINK_WRITE_COMPLETE,
            sink="memory",
            nodes=len(chain.nodes),
            edges=len(chain.edges),
        )

    def close(self) -> None:
        """Mark the sink closed. Stored data stays readable."""
        with self._lock:
            self._closed = True
        log.debug(LogEventNames.SINK_CLOSED, sink="memory")

    @property
    def nodes(self) -> dict[NodeIdentity, dict[str, str]]:
        """Copy of all nodes and their properties."""
        with self._lock:
            return {identity: dict(props) for identity, props in self._nodes.items()}

    @property
    def edges(self) -> set[tuple[NodeIdentity, NodeIdentity]]:
        """Copy of all (caller, callee) edges."""
        with self._lock:
            return set(self._edges)

    @property
    def transaction_count(self) -> int:
        """Number of chains committed so far."""
        with self._lock:
            return self._transactions

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        with self._lock:
            return self._closed

    def has_edge(self, caller: NodeIdentity, callee: NodeIdentity) -> bool:
        """Check if a CALLS edge exists between two nodes."""
        with self._lock:
            return (caller, callee) in self._edges

    def callees_of(self, caller: NodeIdentity) -> set[NodeIdentity]:
        """Return every node called directly by ``caller``."""
        with self._lock:
            return {callee for src, callee in self._edges if src == caller}
