"""Command-line tools for working with stub arrangements."""

from .arrangement_check import (
    format_summary,
    serialize_summary,
    summarize_arrangement,
)

__all__ = [
    "format_summary",
    "serialize_summary",
    "summarize_arrangement",
]
