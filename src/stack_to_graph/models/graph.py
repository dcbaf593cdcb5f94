"""Graph write operations produced from a parsed stack."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from .frame import StackFrame


@dataclass(frozen=True)
class NodeIdentity:
    """Identity tuple a function node is merged on."""

    name: str
    receiver: str
    package: str

    @classmethod
    def from_frame(cls, frame: StackFrame) -> NodeIdentity:
        """Build the identity of the node representing ``frame``."""
        return cls(name=frame.function, receiver=frame.receiver, package=frame.package)

    def as_params(self, prefix: str = "") -> dict[str, str]:
        """Return the identity as query parameters, optionally prefixed."""
        return {
            f"{prefix}name": self.name,
            f"{prefix}receiver": self.receiver,
            f"{prefix}package": self.package,
        }


@dataclass(frozen=True)
class NodeUpsert:
    """Create-or-update a function node."""

    identity: NodeIdentity
    properties: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EdgeUpsert:
    """Create a directed CALLS relationship if it does not exist yet."""

    caller: NodeIdentity
    callee: NodeIdentity


GraphOperation: TypeAlias = NodeUpsert | EdgeUpsert


@dataclass(frozen=True)
class CallChain:
    """Ordered caller-to-callee write operations for one stack."""

    operations: tuple[GraphOperation, ...]
    raw_text: str = ""

    @property
    def nodes(self) -> tuple[NodeUpsert, ...]:
        """Node upserts in emission order."""
        return tuple(op for op in self.operations if isinstance(op, NodeUpsert))

    @property
    def edges(self) -> tuple[EdgeUpsert, ...]:
        """Edge upserts in emission order."""
        return tuple(op for op in self.operations if isinstance(op, EdgeUpsert))

    @property
    def is_empty(self) -> bool:
        """True when the stack produced no frames."""
        return not self.operations

    def __len__(self) -> int:
        return len(self.operations)
