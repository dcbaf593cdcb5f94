"""Abstract interface for stack text producers."""

from typing import Protocol


class StackSource(Protocol):
    """Callable returning the current call stack as text.

    The text must follow the two-line frame convention: a call description
    line followed by an indented ``file:line`` line, innermost call first.
    """

    def __call__(self) -> str:
        """
        Capture the current stack.

        Returns:
            Raw stack trace text
        """
        ...
