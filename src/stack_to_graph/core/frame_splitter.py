"""Line tokenizer that splits raw stack text into frames.

Each frame in a captured stack is two lines:

    main.(*Person).SayHello(0x1400010aeb8)
        /home/user/app/main.go:16 +0x24

The first line is the call description, the second (indented) line is the
source location with an optional ``+0x..`` offset. Lines that do not fit
this shape are skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import Enum

from stack_to_graph.models.frame import RawFrame

LOCATION_PATTERN = re.compile(r"^\s+(?P<file>.*?):(?P<line>\d+)(?: \+0x[0-9a-fA-F]+)?\s*$")

# Go appends these after the last frame of a goroutine
CREATED_BY_PREFIX = "created by "


class _State(Enum):
    SEEKING_CALL = "seeking_call"
    SEEKING_LOCATION = "seeking_location"


def parse_location(line: str) -> tuple[str, str] | None:
    """Parse a location line into (file, line), or None if it is not one."""
    match = LOCATION_PATTERN.match(line)
    if not match:
        return None
    return match.group("file"), match.group("line")


def iter_raw_frames(stack_text: str) -> Iterator[RawFrame]:
    """Yield RawFrames in the order they appear in the text.

    Args:
        stack_text: Raw stack trace text

    Yields:
        RawFrame for each call/location line pair
    """
    state = _State.SEEKING_CALL
    pending_call = ""

    for line in stack_text.splitlines():
        if not line.strip():
            continue

        location = parse_location(line)

        if state is _State.SEEKING_LOCATION and location is not None:
            state = _State.SEEKING_CALL
            call = pending_call.strip()
            if call and not call.startswith(CREATED_BY_PREFIX):
                yield RawFrame(call_description=call, file=location[0], line=location[1])
            continue

        # Any other line may be the call line of the next frame
        pending_call = line
        state = _State.SEEKING_LOCATION


def split_frames(stack_text: str) -> list[RawFrame]:
    """Split raw stack text into RawFrames. Returns [] when nothing matches."""
    return list(iter_raw_frames(stack_text))
