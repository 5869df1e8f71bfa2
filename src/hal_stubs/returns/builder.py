"""
Fluent grammar for building response sequences.

    returns(Err).once().returns(Ok).always()

returns() stores a pending result; exactly one repeat qualifier (once, twice,
times, always) turns it into a ResponseSequence. Calling returns() on that
sequence starts the next pending result. Each finalize produces a new
sequence and leaves the one it was started from untouched, so a common
prefix can be reused for several arrangements.
"""

import logging
from typing import Any, Optional

from ..error import ArrangementError
from .sequence import ResponseSequence, validate_count

logger = logging.getLogger(__name__)


class SequenceBuilder:
    """A pending result waiting for its repeat qualifier."""

    def __init__(self, pending: Any, previous: Optional[ResponseSequence] = None):
        """
        Initialize a builder.

        Args:
            pending: Result value to pair with a repeat policy
            previous: Sequence built so far (None to start a new one)
        """
        self._previous = previous
        self._pending = pending
        self._finalized = False

    def __repr__(self) -> str:
        return f"SequenceBuilder(pending={self._pending!r}, previous={self._previous!r})"

    def once(self) -> ResponseSequence:
        """Return the pending result for exactly one call."""
        return self._finalize(1)

    def twice(self) -> ResponseSequence:
        """Return the pending result for exactly two calls."""
        return self._finalize(2)

    def times(self, n: int) -> ResponseSequence:
        """Return the pending result for exactly n calls (n >= 1)."""
        return self._finalize(validate_count(n))

    def always(self) -> ResponseSequence:
        """Return the pending result on every call once it is reached."""
        return self._finalize(None)

    def _finalize(self, times: Optional[int]) -> ResponseSequence:
        if self._finalized:
            logger.error(f"Builder for {self._pending!r} was already finalized")
            raise ArrangementError(
                f"Result {self._pending!r} already has a repeat qualifier; "
                "call returns() again to add another response."
            )
        self._finalized = True

        if self._previous is None:
            sequence = ResponseSequence()
        else:
            sequence = self._previous.copy()
        sequence.append(self._pending, times)
        return sequence


def returns(value: Any) -> SequenceBuilder:
    """Start a response sequence with value as its first pending result."""
    return SequenceBuilder(pending=value)
