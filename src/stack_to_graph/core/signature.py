"""Cleanup of call descriptions taken from a stack trace."""

from __future__ import annotations


def clean_function_name(signature: str) -> str:
    """Strip the trailing argument list from a call description.

    The string is scanned backwards while tracking parenthesis depth, so
    nested groups such as ``f(g(x))`` are removed as one unit and earlier
    groups such as the ``()`` in ``f()(arg)`` are kept.

    Args:
        signature: Call description, e.g. ``main.isError({0x1, 0x2})``

    Returns:
        The signature without its argument list, e.g. ``main.isError``.
        Trailing whitespace is removed; leading whitespace is kept.
    """
    signature = signature.rstrip(" \t\n\r")

    depth = 0
    for i in range(len(signature) - 1, -1, -1):
        char = signature[i]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
            if depth == 0:
                return signature[:i]

    return signature
