"""Parser for captured call stacks.

This module implements the StackParser class, which turns the raw text of a
captured stack into normalized StackFrames. The pipeline is:
- split the text into call/location line pairs
- strip argument lists from each call description
- decompose each signature into package, receiver, function and repository
"""

from __future__ import annotations

import structlog

from stack_to_graph.core.frame_splitter import iter_raw_frames
from stack_to_graph.core.identity import normalize_frame
from stack_to_graph.models.frame import StackFrame

log = structlog.get_logger()


class StackParser:
    """Parser for raw stack trace text.

    The parser holds no state and can be shared between threads.

    Example:
        parser = StackParser()
        frames = parser.parse(stack_text)
        print(frames[0].function)  # innermost call
    """

    def contains_frames(self, text: str) -> bool:
        """Check if text contains at least one recognisable frame.

        Args:
            text: Text to check

        Returns:
            True if a frame is found, False otherwise
        """
        if not text:
            return False
        return next(iter_raw_frames(text), None) is not None

    def parse(self, text: str) -> list[StackFrame]:
        """Parse stack text into frames, innermost call first.

        Args:
            text: Raw stack trace text

        Returns:
            List of StackFrames in the order they appear in the text
        """
        if not text:
            return []

        frames = [normalize_frame(raw) for raw in iter_raw_frames(text)]
        log.debug("stack_parsed", frame_count=len(frames))
        return frames
