"""
Error types for hal-stubs.

Two disjoint families live here. StubError and its subclasses are domain
errors: values a test author programs into a response sequence so that the
code under test sees a failing peripheral. ArrangementError and
ResponsesExhaustedError describe mistakes in the test itself.
"""

import errno as errno_codes
from typing import Optional


class StubError(Exception):
    """Base class for errors handed back by stubbed peripheral operations."""


class StubbedError(StubError):
    """Generic error that can be programmed as part of a test."""

    def __init__(self, message: str = "Stubbed error") -> None:
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.args == self.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class StubIoError(StubError):
    """I/O failure of a stubbed peripheral, identified by its errno value."""

    def __init__(self, errno: int = errno_codes.EIO, message: Optional[str] = None) -> None:
        self.errno = errno
        if message is None:
            message = errno_codes.errorcode.get(errno, f"errno {errno}")
        super().__init__(errno, message)

    @classmethod
    def from_os_error(cls, error: OSError) -> "StubIoError":
        """Build a StubIoError carrying the errno of an OSError."""
        code = error.errno if error.errno is not None else errno_codes.EIO
        return cls(code, error.strerror)

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.errno == self.errno

    def __hash__(self) -> int:
        return hash((type(self), self.errno))


class ArrangementError(Exception):
    """Raised when a stub arrangement is malformed (e.g. a repeat count of zero)."""


class ResponsesExhaustedError(AssertionError):
    """Raised when a stubbed operation is called more often than it was programmed.

    Subclasses AssertionError so that test runners report it as a failed test.
    """
