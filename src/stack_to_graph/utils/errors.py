"""Exceptions raised by stack-to-graph.

Parsing never raises: malformed frames are skipped and identity fields
degrade to best-effort values. Only configuration problems and sink
failures reach the caller.
"""


class StackToGraphError(Exception):
    """Base exception for all stack-to-graph errors."""


class ReporterNotConfiguredError(StackToGraphError):
    """The default reporter was used before one was set up."""


class SinkWriteError(StackToGraphError):
    """Writing a call chain to the graph sink failed.

    Attributes:
        operations: Number of operations in the chain that failed.
    """

    def __init__(self, message: str, operations: int = 0) -> None:
        super().__init__(message)
        self.operations = operations


class ConfigurationError(StackToGraphError, ValueError):
    """Configuration is missing or inconsistent."""
