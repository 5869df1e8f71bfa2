"""
Stubs for I2C bus drivers.

Same arrange/go flow as the SPI stub. Reads return the programmed bytes
(copied into the caller's buffer when it is mutable); a None result leaves
the buffer untouched.
"""

import logging
from typing import Optional, Protocol, Union, runtime_checkable

from ..returns import ResponseSequence
from .base import StubArrangement, StubRunner, fill_buffer

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


@runtime_checkable
class I2cBus(Protocol):
    """Protocol for a blocking I2C bus driver (7-bit addressing)."""

    def write(self, address: int, data: Buffer) -> None: ...

    def read(self, address: int, buffer: bytearray) -> bytes: ...

    def write_read(self, address: int, data: Buffer, buffer: bytearray) -> bytes: ...


@runtime_checkable
class AsyncI2cBus(Protocol):
    """Protocol for an async I2C bus driver."""

    async def write(self, address: int, data: Buffer) -> None: ...

    async def read(self, address: int, buffer: bytearray) -> bytes: ...

    async def write_read(self, address: int, data: Buffer, buffer: bytearray) -> bytes: ...


class I2cStub(StubArrangement):
    """Arrange phase of an I2C stub. Unprogrammed operations always succeed."""

    OPERATIONS = ("write", "read", "write_read")

    def write(self, responses: ResponseSequence) -> "I2cStub":
        return self.program("write", responses)

    def read(self, responses: ResponseSequence) -> "I2cStub":
        return self.program("read", responses)

    def write_read(self, responses: ResponseSequence) -> "I2cStub":
        return self.program("write_read", responses)

    def go(self) -> "I2cStubRunner":
        return I2cStubRunner(self._bind())

    def go_async(self) -> "AsyncI2cStubRunner":
        return AsyncI2cStubRunner(self._bind())


class I2cStubRunner(StubRunner):
    """Handles I2C calls during a test. Implements I2cBus."""

    def write(self, address: int, data: Buffer) -> None:
        logger.debug(f"I2C write to 0x{address:02x}: {len(data)} byte(s)")
        self._respond("write")

    def read(self, address: int, buffer: bytearray) -> bytes:
        logger.debug(f"I2C read from 0x{address:02x}: {len(buffer)} byte(s)")
        data: Optional[bytes] = self._respond("read")
        return fill_buffer(buffer, data)

    def write_read(self, address: int, data: Buffer, buffer: bytearray) -> bytes:
        logger.debug(
            f"I2C write_read at 0x{address:02x}: {len(data)} byte(s) out, {len(buffer)} in"
        )
        read_data: Optional[bytes] = self._respond("write_read")
        return fill_buffer(buffer, read_data)


class AsyncI2cStubRunner(I2cStubRunner):
    """I2cStubRunner with coroutine operations. Implements AsyncI2cBus.

    As with AsyncSpiStubRunner, isinstance() against I2cBus also passes at
    runtime; annotate async drivers with AsyncI2cBus.
    """

    async def write(self, address: int, data: Buffer) -> None:  # type: ignore[override]
        super().write(address, data)

    async def read(self, address: int, buffer: bytearray) -> bytes:  # type: ignore[override]
        return super().read(address, buffer)

    async def write_read(  # type: ignore[override]
        self, address: int, data: Buffer, buffer: bytearray
    ) -> bytes:
        return super().write_read(address, data, buffer)
