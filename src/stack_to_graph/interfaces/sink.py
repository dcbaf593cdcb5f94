"""Abstract interface for graph store integrations."""

from typing import Protocol

from ..models.graph import CallChain


class GraphSink(Protocol):
    """Abstract interface for graph stores that persist call chains.

    This protocol defines the contract that all sink adapters
    (Neo4j, in-memory, etc.) must implement.
    """

    def write_chain(self, chain: CallChain) -> None:
        """
        Apply every operation of a call chain in one transaction.

        Node upserts merge on the node identity and update its properties.
        Edge upserts merge a CALLS relationship between two identities.
        Repeating a chain must not create duplicate nodes or edges.

        Args:
            chain: Ordered node and edge upserts for one stack

        Raises:
            SinkWriteError: If the transaction fails. Nothing from a failed
                chain may be visible afterwards.
        """
        ...

    def close(self) -> None:
        """
        Release connections held by the sink.

        Calling close() more than once must be safe.
        """
        ...
