"""
Loading stub arrangements from YAML files.

An arrangement file maps operation names to an ordered list of responses:

    write:
      - result: stubbed_error
        repeat: twice
      - result: ok
        repeat: always

Each entry is validated with pydantic, its result resolved through
RESULT_REGISTRY, and the list turned into a ResponseSequence with the same
fluent builder a test author would use. Arrangements live in the package
configs/ directory or in a directory passed by the caller.
"""

import errno as errno_codes
import logging
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, Literal, Optional, Union

import aiofiles
import yaml
from pydantic import BaseModel, Field, StrictInt, ValidationError, model_validator

from ..error import ArrangementError
from ..returns import ResponseSequence, SequenceBuilder, returns
from .results import RESULT_REGISTRY, RESULT_TYPE_REGISTRY

logger = logging.getLogger(__name__)


# --- Pydantic schema for YAML validation ---


class BytesResultSpec(BaseModel):
    """Parameterized bytes result, given as a hex string."""

    type: Literal["bytes"]
    hex: str = Field(..., pattern=r"^([0-9a-fA-F]{2})*$")

    model_config = {"extra": "forbid"}


class IoErrorResultSpec(BaseModel):
    """Parameterized I/O error result."""

    type: Literal["io_error"]
    errno: StrictInt = Field(errno_codes.EIO, ge=1)

    model_config = {"extra": "forbid"}


class ResponseEntrySpec(BaseModel):
    """Schema for a single response in an arrangement file."""

    result: Union[str, BytesResultSpec, IoErrorResultSpec]
    repeat: Optional[Literal["once", "twice", "always"]] = None
    times: Optional[StrictInt] = Field(None, ge=1)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_single_repeat_policy(self) -> "ResponseEntrySpec":
        if (self.repeat is None) == (self.times is None):
            raise ValueError("exactly one of 'repeat' or 'times' is required")
        return self


def _resolve_result(
    spec: Union[str, BytesResultSpec, IoErrorResultSpec], operation: str
) -> Any:
    """Resolve a result spec to a fresh result value."""
    if isinstance(spec, str):
        if spec not in RESULT_REGISTRY:
            raise ArrangementError(
                f"Unknown result {spec!r} for operation {operation!r}. "
                f"Known: {list(RESULT_REGISTRY.keys())}."
            )
        return RESULT_REGISTRY[spec]()
    params = spec.model_dump(exclude={"type"})
    return RESULT_TYPE_REGISTRY[spec.type](**params)


def _qualify(builder: SequenceBuilder, entry: ResponseEntrySpec) -> ResponseSequence:
    """Apply the entry's repeat policy to a pending builder."""
    if entry.times is not None:
        return builder.times(entry.times)
    if entry.repeat == "once":
        return builder.once()
    if entry.repeat == "twice":
        return builder.twice()
    return builder.always()


def _build_sequence(operation: str, raw: list[Any]) -> ResponseSequence:
    """Parse a raw YAML response list into a ResponseSequence."""
    sequence: Optional[ResponseSequence] = None
    for raw_entry in raw:
        entry = ResponseEntrySpec.model_validate(raw_entry)
        value = _resolve_result(entry.result, operation)
        builder = returns(value) if sequence is None else sequence.returns(value)
        sequence = _qualify(builder, entry)
    assert sequence is not None  # empty lists are rejected by the caller
    return sequence


def parse_arrangement(name: str, content: str) -> dict[str, ResponseSequence]:
    """Parse arrangement YAML text.

    Args:
        name: Arrangement name (used in error messages).
        content: YAML document text.

    Returns:
        Dict mapping operation names to ResponseSequence.

    Raises:
        ArrangementError: If the document is invalid or incomplete.
    """
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.error("Invalid YAML in arrangement %s: %s", name, e)
        raise ArrangementError(f"Invalid YAML in arrangement {name!r}: {e}.") from e

    if raw is None or raw == {}:
        logger.error("Arrangement %s is empty", name)
        raise ArrangementError(f"Arrangement {name!r} is empty.")

    if not isinstance(raw, dict):
        logger.error("Arrangement %s root must be a dict, got %s", name, type(raw))
        raise ArrangementError(
            f"Arrangement {name!r} root must be a mapping, got {type(raw).__name__}."
        )

    result: dict[str, ResponseSequence] = {}
    for operation, responses in raw.items():
        if not isinstance(responses, list) or not responses:
            raise ArrangementError(
                f"Operation {operation!r} must have a non-empty list of responses."
            )
        try:
            result[str(operation)] = _build_sequence(str(operation), responses)
        except ArrangementError:
            raise
        except (ValidationError, ValueError) as e:
            logger.exception("Failed to parse responses for %s", operation)
            raise ArrangementError(
                f"Failed to parse responses for operation {operation!r}: {e}."
            ) from e

    logger.debug(
        "Loaded arrangement %s with operations: %s", name, ", ".join(result)
    )
    return result


def _locate(name: str, config_dir: Optional[Path]) -> Traversable:
    """Find the arrangement file for name. Raises ArrangementError if missing."""
    if config_dir is not None:
        config_path: Traversable = Path(config_dir) / f"{name}.yaml"
    else:
        config_path = resources.files("hal_stubs") / "configs" / f"{name}.yaml"

    if not config_path.is_file():
        logger.error("Arrangement file not found: %s", config_path)
        raise ArrangementError(f"Arrangement {name!r} not found at {config_path}.")
    return config_path


def load_arrangement(
    name: str,
    config_dir: Optional[Path] = None,
) -> dict[str, ResponseSequence]:
    """Load a stub arrangement from YAML by name.

    Args:
        name: File name without extension (e.g. 'spi_flaky_write').
        config_dir: Optional directory for arrangement files. If None, loads from package configs/.

    Returns:
        Dict mapping operation names to ResponseSequence.

    Raises:
        ArrangementError: If the file is missing, invalid, or incomplete.
    """
    content = _locate(name, config_dir).read_text(encoding="utf-8")
    return parse_arrangement(name, content)


async def aload_arrangement(
    name: str,
    config_dir: Optional[Path] = None,
) -> dict[str, ResponseSequence]:
    """Async variant of load_arrangement; reads the file with aiofiles."""
    config_path = _locate(name, config_dir)
    with resources.as_file(config_path) as path:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    return parse_arrangement(name, content)
