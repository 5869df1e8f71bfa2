"""
Peripheral stubs: arrange per-operation responses, then go() to get a runner.
"""

from .base import StubArrangement, StubRunner
from .i2c import AsyncI2cBus, AsyncI2cStubRunner, I2cBus, I2cStub, I2cStubRunner
from .spi import AsyncSpiBus, AsyncSpiStubRunner, SpiBus, SpiStub, SpiStubRunner

__all__ = [
    "AsyncI2cBus",
    "AsyncI2cStubRunner",
    "AsyncSpiBus",
    "AsyncSpiStubRunner",
    "I2cBus",
    "I2cStub",
    "I2cStubRunner",
    "SpiBus",
    "SpiStub",
    "SpiStubRunner",
    "StubArrangement",
    "StubRunner",
]
