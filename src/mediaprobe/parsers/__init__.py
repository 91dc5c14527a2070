"""Parsers turning raw ffprobe output into typed metadata."""

from .ffprobe_models import (
    AudioStreamInfo,
    FFProbeMetadata,
    Validity,
    VideoStreamInfo,
    channel_layout_name,
)
from .ffprobe_parser import FFProbeParser, evaluate_validity, parse_metadata
from .json_coercion import coerce, coerce_string

__all__ = [
    "AudioStreamInfo",
    "FFProbeMetadata",
    "Validity",
    "VideoStreamInfo",
    "FFProbeParser",
    "channel_layout_name",
    "evaluate_validity",
    "parse_metadata",
    "coerce",
    "coerce_string",
]
