"""
Programmed-response engine: response sequences and the fluent builder.
"""

from .builder import SequenceBuilder, returns
from .sequence import ResponseSequence, ResponseSpec, unconfigured

__all__ = [
    "ResponseSequence",
    "ResponseSpec",
    "SequenceBuilder",
    "returns",
    "unconfigured",
]
