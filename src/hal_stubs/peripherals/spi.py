"""
Stubs for SPI bus drivers.

SpiStub is the entry point: program the behaviour of each SPI operation and
call go() to get a SpiStubRunner that code under test can use wherever it
expects an SpiBus. go_async() returns the same behaviour behind coroutines.

    spi = (
        SpiStub.arrange()
        .write(returns(StubbedError()).once().returns(None).always())
        .go()
    )
"""

import logging
from typing import Iterable, Optional, Protocol, Union, runtime_checkable

from ..returns import ResponseSequence
from .base import StubArrangement, StubRunner, fill_buffer

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


@runtime_checkable
class SpiBus(Protocol):
    """Protocol for a blocking SPI bus driver."""

    def write(self, words: Buffer) -> None:
        """Write words to the bus, discarding what is read back."""
        ...

    def write_iter(self, words: Iterable[int]) -> None:
        """Write words produced by an iterable."""
        ...

    def transfer(self, words: bytearray) -> bytes:
        """Write words and replace them in place with the words read back."""
        ...


@runtime_checkable
class AsyncSpiBus(Protocol):
    """Protocol for an async SPI bus driver. Same operations as SpiBus, as coroutines."""

    async def write(self, words: Buffer) -> None: ...

    async def write_iter(self, words: Iterable[int]) -> None: ...

    async def transfer(self, words: bytearray) -> bytes: ...


class SpiStub(StubArrangement):
    """Arrange phase of an SPI stub. Unprogrammed operations always succeed."""

    OPERATIONS = ("write", "write_iter", "transfer")

    def write(self, responses: ResponseSequence) -> "SpiStub":
        """Program write behavior."""
        return self.program("write", responses)

    def write_iter(self, responses: ResponseSequence) -> "SpiStub":
        """Program write_iter behavior."""
        return self.program("write_iter", responses)

    def transfer(self, responses: ResponseSequence) -> "SpiStub":
        """Program transfer behavior.

        A bytes result is the data read back; None echoes the written words.
        """
        return self.program("transfer", responses)

    def go(self) -> "SpiStubRunner":
        """Finalize the arrangement and return a SpiStubRunner."""
        return SpiStubRunner(self._bind())

    def go_async(self) -> "AsyncSpiStubRunner":
        """Finalize the arrangement and return an AsyncSpiStubRunner."""
        return AsyncSpiStubRunner(self._bind())


class SpiStubRunner(StubRunner):
    """Handles SPI calls during a test. Implements SpiBus."""

    def write(self, words: Buffer) -> None:
        logger.debug(f"SPI write of {len(words)} word(s)")
        self._respond("write")

    def write_iter(self, words: Iterable[int]) -> None:
        count = sum(1 for _ in words)
        logger.debug(f"SPI write_iter of {count} word(s)")
        self._respond("write_iter")

    def transfer(self, words: bytearray) -> bytes:
        logger.debug(f"SPI transfer of {len(words)} word(s)")
        data: Optional[bytes] = self._respond("transfer")
        return fill_buffer(words, data)


class AsyncSpiStubRunner(SpiStubRunner):
    """SpiStubRunner with coroutine operations. Implements AsyncSpiBus.

    It shares the sync runner's bookkeeping by subclassing, so a runtime
    isinstance() check against SpiBus also passes (runtime_checkable only
    checks method names). Type checkers see the overrides as coroutines;
    annotate async drivers with AsyncSpiBus.
    """

    async def write(self, words: Buffer) -> None:  # type: ignore[override]
        super().write(words)

    async def write_iter(self, words: Iterable[int]) -> None:  # type: ignore[override]
        super().write_iter(words)

    async def transfer(self, words: bytearray) -> bytes:  # type: ignore[override]
        return super().transfer(words)
