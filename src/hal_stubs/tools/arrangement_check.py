"""
Check a stub arrangement file and show what it programs.

Loads an arrangement the same way SpiStub.from_config / I2cStub.from_config
do, then prints each operation with its responses in matching order, or
writes the summary as YAML.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TypedDict

import aiofiles
import yaml

from ..arrangement import aload_arrangement
from ..error import ArrangementError
from ..returns import ResponseSequence

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1"


class ResponseEntryDict(TypedDict):
    """Single response in the YAML summary."""

    result: str
    repeat: str


class SummaryDict(TypedDict):
    """Top-level dict structure returned by _summary_to_dict."""

    format_version: str
    arrangement: str
    operations: dict[str, list[ResponseEntryDict]]


@dataclass
class ResponseSummary:
    """One response of an operation, rendered for display."""

    result: str
    repeat: str


@dataclass
class ArrangementSummary:
    """All operations of an arrangement with their responses."""

    name: str
    operations: dict[str, list[ResponseSummary]] = field(default_factory=dict)


def _describe_repeat(remaining: Optional[int]) -> str:
    """Repeat policy as written in arrangement files."""
    if remaining is None:
        return "always"
    if remaining == 1:
        return "once"
    if remaining == 2:
        return "twice"
    return f"{remaining} times"


def summarize_arrangement(
    name: str, sequences: dict[str, ResponseSequence]
) -> ArrangementSummary:
    """
    Build a display summary of loaded sequences.

    Args:
        name: Arrangement name.
        sequences: Loaded sequences keyed by operation.

    Returns:
        ArrangementSummary with one entry per response, in matching order.
    """
    summary = ArrangementSummary(name=name)
    for operation, sequence in sequences.items():
        summary.operations[operation] = [
            ResponseSummary(result=repr(spec.result), repeat=_describe_repeat(spec.remaining))
            for spec in sequence
        ]
    return summary


def format_summary(summary: ArrangementSummary) -> str:
    """Format summary as a human-readable table."""
    lines: list[str] = [f"Arrangement: {summary.name}", ""]
    header = f"{'Operation':<12} {'#':>2}  {'Repeat':<10} Result"
    lines.append(header)
    lines.append("-" * 12 + " " + "-" * 2 + "  " + "-" * 10 + " " + "-" * 24)
    for operation, responses in summary.operations.items():
        for index, response in enumerate(responses):
            first_col = operation if index == 0 else ""
            lines.append(
                f"{first_col:<12} {index:>2}  {response.repeat:<10} {response.result}"
            )
    return "\n".join(lines)


def _summary_to_dict(summary: ArrangementSummary) -> SummaryDict:
    """Convert ArrangementSummary to a dict suitable for YAML serialization."""
    operations: dict[str, list[ResponseEntryDict]] = {
        operation: [{"result": r.result, "repeat": r.repeat} for r in responses]
        for operation, responses in summary.operations.items()
    }
    return {
        "format_version": FORMAT_VERSION,
        "arrangement": summary.name,
        "operations": operations,
    }


def serialize_summary(summary: ArrangementSummary) -> str:
    """Serialize summary to a YAML string."""
    return yaml.safe_dump(
        _summary_to_dict(summary),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


async def write_summary(path: Path, summary: ArrangementSummary) -> None:
    """Write summary to a YAML file."""
    content = serialize_summary(summary)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(content)


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Validate a stub arrangement file and list its responses."
    )
    parser.add_argument("name", help="Arrangement name (file name without .yaml)")
    parser.add_argument(
        "--config-dir",
        type=str,
        metavar="DIR",
        help="Directory with arrangement files (default: packaged configs)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        metavar="FILE",
        help="Write summary to file (YAML format)",
    )
    return parser.parse_args(argv)


async def _main_async(argv: Optional[list[str]] = None) -> int:
    """Async main logic. Returns exit code."""
    args = _parse_args(argv)
    config_dir = Path(args.config_dir) if args.config_dir else None

    try:
        sequences = await aload_arrangement(args.name, config_dir)
    except ArrangementError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summary = summarize_arrangement(args.name, sequences)
    if args.output:
        out_path = Path(args.output)
        await write_summary(out_path, summary)
        logger.info(f"Wrote arrangement summary to {out_path}")
        print(f"Wrote summary to {out_path}")
    else:
        print(format_summary(summary))
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point."""
    exit_code = asyncio.run(_main_async(argv))
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
