"""Shared pytest fixtures for all tests."""

import json
from pathlib import Path

import pytest

from mediaprobe.common.config import Config, LoggingConfig, ProbeConfig


@pytest.fixture
def sample_config() -> Config:
    """Provide a sample configuration for tests."""
    return Config(
        logging=LoggingConfig(
            level="DEBUG",
            format="text",
            handlers=["console"],
        ),
        probe=ProbeConfig(
            encoding="utf-8",
            fallback_encoding="latin-1",
        ),
    )


@pytest.fixture
def examples_dir() -> Path:
    """Get path to examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def ffprobe_sample_text(examples_dir: Path) -> str:
    """Load ffprobe sample output as raw JSON text."""
    return (examples_dir / "ffprobe_sample_output.json").read_text(encoding="utf-8")


@pytest.fixture
def ffprobe_sample_output(ffprobe_sample_text: str) -> dict:
    """Load ffprobe sample output as an untyped JSON tree."""
    return json.loads(ffprobe_sample_text)
