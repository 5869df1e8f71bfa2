"""
hal-stubs: programmable test doubles for peripheral drivers.

    from hal_stubs import SpiStub, StubbedError, returns

    spi = SpiStub.arrange().write(returns(StubbedError()).once()).go()
"""

from .error import (
    ArrangementError,
    ResponsesExhaustedError,
    StubbedError,
    StubError,
    StubIoError,
)
from .peripherals import I2cStub, SpiStub
from .returns import ResponseSequence, SequenceBuilder, returns

__all__ = [
    "ArrangementError",
    "I2cStub",
    "ResponseSequence",
    "ResponsesExhaustedError",
    "SequenceBuilder",
    "SpiStub",
    "StubError",
    "StubIoError",
    "StubbedError",
    "returns",
]
