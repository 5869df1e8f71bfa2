"""
YAML arrangements: load programmed response sequences from config files.
"""

from .loader import aload_arrangement, load_arrangement, parse_arrangement
from .results import RESULT_REGISTRY, RESULT_TYPE_REGISTRY

__all__ = [
    "RESULT_REGISTRY",
    "RESULT_TYPE_REGISTRY",
    "aload_arrangement",
    "load_arrangement",
    "parse_arrangement",
]
