"""
Ordered response queue for a single stubbed operation.

A ResponseSequence holds the programmed outcomes of one logical operation
(e.g. SPI write) in declaration order. Every call to the operation asks the
sequence for the next result via match_and_consume(): the first spec that
still has budget wins. Spent finite specs stay in the list so that the
priority order of the remaining specs never changes.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, List, Optional

from ..error import ArrangementError, ResponsesExhaustedError

if TYPE_CHECKING:
    from .builder import SequenceBuilder

logger = logging.getLogger(__name__)

EXHAUSTED_MESSAGE = "No expected result available"


@dataclass
class ResponseSpec:
    """One programmed outcome: a result value and its remaining use budget.

    remaining is None for an unlimited ("always") spec. A finite spec counts
    down to 0 and then never matches again.
    """

    result: Any
    remaining: Optional[int] = None

    @property
    def is_unlimited(self) -> bool:
        return self.remaining is None

    @property
    def is_exhausted(self) -> bool:
        return self.remaining == 0

    def describe(self) -> str:
        """Human-readable repeat policy (e.g. 'always', '2 left')."""
        if self.remaining is None:
            return "always"
        return f"{self.remaining} left"


def validate_count(n: Any) -> int:
    """Validate a finite repeat count. Raises ArrangementError unless n >= 1."""
    if isinstance(n, bool) or not isinstance(n, int):
        logger.error(f"Invalid repeat count {n!r}: expected a positive integer")
        raise ArrangementError(
            f"Repeat count must be a positive integer, got {n!r}."
        )
    if n < 1:
        logger.error(f"Invalid repeat count {n}: a response must be usable at least once")
        raise ArrangementError(
            f"Repeat count must be at least 1, got {n}. "
            "Use a separate sequence instead of a response that never matches."
        )
    return n


class ResponseSequence:
    """Ordered collection of ResponseSpecs with call-count based matching."""

    def __init__(
        self,
        specs: Optional[List[ResponseSpec]] = None,
        name: Optional[str] = None,
    ):
        """
        Initialize a sequence.

        Args:
            specs: Initial specs in priority order (copied, not aliased)
            name: Operation name used in log lines and exhaustion messages
        """
        self._specs: List[ResponseSpec] = [
            ResponseSpec(spec.result, spec.remaining) for spec in specs or []
        ]
        self.name = name
        self._call_count = 0

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[ResponseSpec]:
        return iter(self._specs)

    def __repr__(self) -> str:
        specs = ", ".join(f"{spec.result!r} ({spec.describe()})" for spec in self._specs)
        label = f"{self.name}: " if self.name else ""
        return f"ResponseSequence({label}[{specs}])"

    @property
    def call_count(self) -> int:
        """Number of calls answered so far."""
        return self._call_count

    @property
    def is_exhausted(self) -> bool:
        """True when no spec can satisfy another call."""
        return all(spec.is_exhausted for spec in self._specs)

    def append(self, result: Any, times: Optional[int] = None) -> None:
        """
        Append a spec with the lowest matching priority.

        Args:
            result: Value to hand back when the spec matches
            times: Finite use budget (>= 1), or None for unlimited

        Raises:
            ArrangementError: If times is not a positive integer
        """
        if times is not None:
            times = validate_count(times)
        self._specs.append(ResponseSpec(result, times))

    def match_and_consume(self) -> Any:
        """
        Return the result of the first spec with remaining budget.

        Finite specs are decremented; unlimited specs are left untouched.
        The returned value is a deep copy, so callers may mutate it freely.
        Exception instances are returned as programmed: copying them goes
        through their constructor, which often does not accept their args.

        Returns:
            Copy of the matched spec's result

        Raises:
            ResponsesExhaustedError: If no spec has budget left
        """
        for index, spec in enumerate(self._specs):
            if spec.is_exhausted:
                continue
            # Copy first: a failing copy must not spend budget
            result = _clone(spec.result)
            if spec.remaining is not None:
                spec.remaining -= 1
                if spec.remaining == 0:
                    logger.debug(f"{self._label()}: response {index} used up")
            self._call_count += 1
            logger.debug(
                f"{self._label()}: call {self._call_count} matched response {index} "
                f"-> {spec.result!r} ({spec.describe()})"
            )
            return result

        message = (
            f"{EXHAUSTED_MESSAGE} for {self._label()} "
            f"(call {self._call_count + 1}, {len(self._specs)} response(s) programmed)"
        )
        logger.error(message)
        raise ResponsesExhaustedError(message)

    def returns(self, value: Any) -> "SequenceBuilder":
        """Start another spec after the ones already in this sequence."""
        from .builder import SequenceBuilder

        return SequenceBuilder(previous=self, pending=value)

    def copy(self, name: Optional[str] = None) -> "ResponseSequence":
        """Independent copy of this sequence, optionally renamed."""
        return ResponseSequence(self._specs, name=name if name is not None else self.name)

    def _label(self) -> str:
        return self.name or "unnamed sequence"


def _clone(result: Any) -> Any:
    if isinstance(result, BaseException):
        return result
    return deepcopy(result)


def unconfigured(success: Any = None) -> ResponseSequence:
    """Default sequence for an operation nobody programmed: always succeed."""
    sequence = ResponseSequence()
    sequence.append(success)
    return sequence
