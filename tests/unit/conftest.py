"""Fixtures specific to unit tests."""

import json
from typing import Any, Dict, List, Optional

import pytest

from mediaprobe.parsers.ffprobe_parser import FFProbeParser


@pytest.fixture
def parser(sample_config) -> FFProbeParser:
    """Provide a parser using the sample probe configuration."""
    return FFProbeParser(config=sample_config.probe)


@pytest.fixture
def make_probe_json():
    """Build ffprobe-style JSON text from streams and format fields."""

    def _make(
        streams: Optional[List[Dict[str, Any]]] = None,
        fmt: Optional[Dict[str, Any]] = None,
        **extra: Any,
    ) -> str:
        data: Dict[str, Any] = {
            "streams": streams or [],
            "format": fmt if fmt is not None else {"format_name": "matroska,webm"},
        }
        data.update(extra)
        return json.dumps(data)

    return _make


@pytest.fixture
def video_stream() -> Dict[str, Any]:
    """Provide a minimal ffprobe video stream entry."""
    return {
        "index": 0,
        "codec_type": "video",
        "codec_name": "vp9",
        "profile": "Profile 0",
        "pix_fmt": "yuv420p",
        "width": 1280,
        "height": 720,
        "sample_aspect_ratio": "1:1",
        "display_aspect_ratio": "16:9",
        "avg_frame_rate": "25/1",
        "codec_tag_string": "[0][0][0][0]",
        "codec_tag": "0x0000",
    }
