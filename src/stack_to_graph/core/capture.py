"""Capture of the running Python thread's stack as text.

The output mimics the two-line frame format the parser understands, so a
Python call stack can be reported the same way as any other captured stack:

    thread 140230 [MainThread]:
    app/service.Handler.run(...)
    	/srv/app/service.py:42

Module paths use '/' between components so that the package path and the
qualified function name stay separable. Nested functions keep only the part
of their qualified name after the last ``<locals>``.
"""

from __future__ import annotations

import sys
import threading
import traceback
from types import FrameType

INTERNAL_PACKAGE = "stack_to_graph"


def _module_path(frame: FrameType) -> str:
    module = frame.f_globals.get("__name__") or "__unknown__"
    return str(module).replace(".", "/")


def _qualified_name(frame: FrameType) -> str:
    # outer.<locals>.inner is named inner; the enclosing function is not its receiver
    return frame.f_code.co_qualname.rsplit("<locals>.", 1)[-1]


def _is_internal(frame: FrameType) -> bool:
    module = str(frame.f_globals.get("__name__", ""))
    return module == INTERNAL_PACKAGE or module.startswith(INTERNAL_PACKAGE + ".")


def format_frame(frame: FrameType, lineno: int) -> str:
    """Render one frame as a call line and an indented location line."""
    call = f"{_module_path(frame)}.{_qualified_name(frame)}(...)"
    return f"{call}\n\t{frame.f_code.co_filename}:{lineno}"


def capture_stack_trace(skip_internal: bool = True, limit: int | None = None) -> str:
    """Capture the calling thread's stack, innermost call first.

    Args:
        skip_internal: Drop frames that belong to this package
        limit: Maximum number of frames to include

    Returns:
        Stack text in the two-line frame format
    """
    current = threading.current_thread()
    lines = [f"thread {current.ident} [{current.name}]:"]

    count = 0
    for frame, lineno in traceback.walk_stack(sys._getframe(1)):
        if skip_internal and _is_internal(frame):
            continue
        if limit is not None and count >= limit:
            break
        lines.append(format_frame(frame, lineno))
        count += 1

    return "\n".join(lines) + "\n"
