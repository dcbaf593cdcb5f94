"""Thread-safe record of stacks that were already reported.

The raw stack text is the key: two stacks are duplicates only if their text
is identical. Entries are never evicted, so the set lives as long as the
reporter that owns it.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

import structlog

log = structlog.get_logger()


class ReportedStackSet:
    """Set of raw stack texts with an atomic check-and-claim.

    A stack moves through three states: unknown, in flight (claimed by one
    caller that is writing it to the sink) and reported. Only the caller
    holding the claim may mark the stack reported or release it again, so a
    failed write leaves the stack eligible for a later retry.

    The lock only guards the set operations; it is never held while a stack
    is being written.

    Example:
        cache = ReportedStackSet()
        with cache.claim(stack_text) as granted:
            if granted:
                sink.write_chain(chain)
    """

    def __init__(self) -> None:
        """Initialize an empty set. Storage is allocated on first use."""
        self._lock = Lock()
        self._reported: set[str] | None = None
        self._in_flight: set[str] | None = None

    def _ensure_storage(self) -> tuple[set[str], set[str]]:
        # Caller must hold self._lock
        if self._reported is None or self._in_flight is None:
            self._reported = set()
            self._in_flight = set()
        return self._reported, self._in_flight

    def should_report(self, stack_text: str) -> bool:
        """Claim a stack for reporting.

        Args:
            stack_text: Raw stack trace text

        Returns:
            True if the caller now owns the stack and should write it,
            False if it was already reported or is being reported
        """
        with self._lock:
            reported, in_flight = self._ensure_storage()
            if stack_text in reported or stack_text in in_flight:
                return False
            in_flight.add(stack_text)
            return True

    def mark_reported(self, stack_text: str) -> None:
        """Record that a claimed stack was written successfully."""
        with self._lock:
            reported, in_flight = self._ensure_storage()
            in_flight.discard(stack_text)
            reported.add(stack_text)

    def release(self, stack_text: str) -> None:
        """Drop a claim after a failed write so the stack can be retried."""
        with self._lock:
            _, in_flight = self._ensure_storage()
            in_flight.discard(stack_text)

    @contextmanager
    def claim(self, stack_text: str) -> Iterator[bool]:
        """Claim a stack for the duration of a ``with`` block.

        Yields the result of should_report(). If the claim was granted the
        stack is marked reported when the block exits normally and released
        when it raises.
        """
        granted = self.should_report(stack_text)
        if not granted:
            yield False
            return

        try:
            yield True
        except BaseException:
            self.release(stack_text)
            raise
        self.mark_reported(stack_text)

    def clear(self) -> None:
        """Forget every reported stack."""
        with self._lock:
            self._reported = None
            self._in_flight = None

    @property
    def is_initialized(self) -> bool:
        """True once storage has been allocated."""
        with self._lock:
            return self._reported is not None

    def __contains__(self, stack_text: object) -> bool:
        with self._lock:
            return self._reported is not None and stack_text in self._reported

    def __len__(self) -> int:
        with self._lock:
            return len(self._reported) if self._reported is not None else 0
