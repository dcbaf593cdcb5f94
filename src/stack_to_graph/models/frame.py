"""Data models for captured stack frames."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RawFrame:
    """One call line / location line pair, before normalization."""

    call_description: str
    file: str
    line: str


@dataclass(frozen=True)
class StackFrame:
    """A normalized call-site entry, persisted as a graph node."""

    original_signature: str
    function: str
    receiver: str = ""
    package: str = ""
    package_name: str = ""
    repository: str = ""
    repository_organization: str = ""
    repository_name: str = ""
    file: str = ""
    folder: str = ""
    folder_name: str = ""
    line: str = ""

    @property
    def identity(self) -> tuple[str, str, str]:
        """Key used to merge this frame into an existing graph node.

        Format: (function, receiver, package)
        """
        return (self.function, self.receiver, self.package)

    @property
    def qualified_name(self) -> str:
        """Human readable name, e.g. 'net/http.ServeMux.ServeHTTP'."""
        parts = [p for p in (self.package, self.receiver, self.function) if p]
        return ".".join(parts)

    @property
    def is_method(self) -> bool:
        """Check if this frame belongs to a method rather than a free function."""
        return bool(self.receiver)

    def to_properties(self) -> dict[str, str]:
        """Node properties, i.e. every field that is not part of the identity."""
        props = asdict(self)
        for key in ("function", "receiver", "package"):
            props.pop(key)
        return props
