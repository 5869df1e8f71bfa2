"""Shared pytest fixtures for hal-stubs tests."""

from pathlib import Path

import pytest


@pytest.fixture
def fixture_config_dir() -> Path:
    """Directory with arrangement files used by loader and CLI tests."""
    return Path(__file__).resolve().parent / "fixtures" / "configs"
