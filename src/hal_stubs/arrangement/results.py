"""
Named result values for YAML arrangements.

The loader resolves the `result` field of each entry through RESULT_REGISTRY.
Entries are factories so that every loaded sequence gets its own value.
Parameterized results ({type: bytes, hex: ...}, {type: io_error, errno: ...})
are built by the make_* functions below.
"""

import errno as errno_codes
from typing import Any, Callable

from ..error import StubbedError, StubIoError


def make_bytes(hex: str) -> bytes:
    """Build a bytes result from a hex string such as 'a1b2'."""
    return bytes.fromhex(hex)


def make_io_error(errno: int = errno_codes.EIO) -> StubIoError:
    """Build a StubIoError result for the given errno value."""
    return StubIoError(errno)


# Registry for the arrangement loader: maps YAML result names to factories.
# "bytes" and "io_error" are also available as parameterized types.
RESULT_REGISTRY: dict[str, Callable[[], Any]] = {
    "ok": lambda: None,
    "stubbed_error": StubbedError,
    "io_error": make_io_error,
}

RESULT_TYPE_REGISTRY: dict[str, Callable[..., Any]] = {
    "bytes": make_bytes,
    "io_error": make_io_error,
}
