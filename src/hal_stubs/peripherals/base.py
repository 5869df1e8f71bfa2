"""
Arrange/go plumbing shared by all peripheral stubs.

A stub has two phases. StubArrangement is the arrange phase: one setter per
operation stores a ResponseSequence, and every operation nobody programmed
keeps the default "always succeed" sequence. go() freezes the arrangement
into a StubRunner, which owns private copies of the sequences and answers
the actual peripheral calls. Arguments of those calls never influence which
response is picked.
"""

import logging
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, TypeVar

from ..arrangement import load_arrangement
from ..error import ArrangementError
from ..returns import ResponseSequence, unconfigured

logger = logging.getLogger(__name__)

A = TypeVar("A", bound="StubArrangement")


class StubArrangement:
    """Arrange phase of a peripheral stub.

    Subclasses list their operation names in OPERATIONS and add one named
    setter per operation that calls program().
    """

    OPERATIONS: ClassVar[tuple[str, ...]] = ()

    def __init__(self) -> None:
        self._sequences: Dict[str, ResponseSequence] = {
            operation: unconfigured() for operation in self.OPERATIONS
        }

    @classmethod
    def arrange(cls: type[A]) -> A:
        """Start arranging a stub. All operations default to success."""
        return cls()

    @classmethod
    def from_config(cls: type[A], name: str, config_dir: Optional[Path] = None) -> A:
        """Arrange a stub from a YAML arrangement file.

        Args:
            name: Arrangement name (file name without extension).
            config_dir: Optional directory for arrangement files.

        Raises:
            ArrangementError: If the file is invalid or names an unknown operation.
        """
        arrangement = cls()
        for operation, sequence in load_arrangement(name, config_dir).items():
            arrangement.program(operation, sequence)
        return arrangement

    def program(self: A, operation: str, sequence: ResponseSequence) -> A:
        """Set the response sequence of one operation.

        Raises:
            ArrangementError: If operation is unknown, sequence is not a
                ResponseSequence, or a result is an exception class.
        """
        if operation not in self.OPERATIONS:
            logger.error(f"{type(self).__name__} has no operation {operation!r}")
            raise ArrangementError(
                f"Unknown operation {operation!r} for {type(self).__name__}. "
                f"Known: {list(self.OPERATIONS)}."
            )
        if not isinstance(sequence, ResponseSequence):
            raise ArrangementError(
                f"Operation {operation!r} needs a ResponseSequence, got {type(sequence).__name__}. "
                "Did you forget .once(), .twice(), .times(n) or .always()?"
            )
        for spec in sequence:
            if isinstance(spec.result, type) and issubclass(spec.result, BaseException):
                logger.error(
                    f"{type(self).__name__}.{operation} programmed with exception class "
                    f"{spec.result.__name__}"
                )
                raise ArrangementError(
                    f"Operation {operation!r} returns the class {spec.result.__name__}; "
                    f"program an instance instead, e.g. {spec.result.__name__}()."
                )
        self._sequences[operation] = sequence
        return self

    def _bind(self) -> Dict[str, ResponseSequence]:
        """Private, named copies of the sequences for a runner."""
        stub_name = type(self).__name__
        return {
            operation: sequence.copy(name=f"{stub_name}.{operation}")
            for operation, sequence in self._sequences.items()
        }


class StubRunner:
    """Go phase of a peripheral stub: answers calls from the code under test."""

    def __init__(self, sequences: Dict[str, ResponseSequence]):
        """
        Initialize a runner.

        Args:
            sequences: Response sequence per operation; the runner owns them
        """
        self._sequences = sequences

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self._sequences)})"

    def _respond(self, operation: str) -> Any:
        """Consume the next programmed result of operation.

        Exception instances are raised, anything else is returned.
        """
        result = self._sequences[operation].match_and_consume()
        if isinstance(result, BaseException):
            # Same instance on every match of an "always" spec
            raise result.with_traceback(None)
        return result

    def call_count(self, operation: str) -> int:
        """Number of answered calls of operation."""
        if operation not in self._sequences:
            raise KeyError(f"Operation '{operation}' is not part of {type(self).__name__}")
        return self._sequences[operation].call_count

    def sequence(self, operation: str) -> ResponseSequence:
        """The live response sequence of operation (for inspection)."""
        return self._sequences[operation]


def fill_buffer(buffer: Any, data: Optional[bytes]) -> bytes:
    """Copy programmed read data into a caller buffer and return what was read.

    With data None the buffer is left alone. A mutable buffer receives at most
    len(buffer) bytes; immutable buffers are not touched and the programmed data
    is returned as is.

    Raises:
        ArrangementError: If data is neither None nor bytes-like.
    """
    if data is None:
        return bytes(buffer)
    if not isinstance(data, (bytes, bytearray, memoryview)):
        logger.error(f"Read data must be bytes-like, got {type(data).__name__}")
        raise ArrangementError(
            f"Programmed read data must be bytes, bytearray or memoryview, "
            f"got {type(data).__name__}: {data!r}."
        )
    data = bytes(data)
    if isinstance(buffer, (bytearray, memoryview)):
        count = min(len(buffer), len(data))
        buffer[:count] = data[:count]
        return bytes(buffer)
    return data
