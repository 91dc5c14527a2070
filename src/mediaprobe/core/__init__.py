"""Core exceptions for mediaprobe."""

from .exceptions import (
    CreationTimeParseError,
    FFProbeError,
    FFProbeParseError,
    MalformedLiteralError,
)

__all__ = [
    "FFProbeError",
    "FFProbeParseError",
    "MalformedLiteralError",
    "CreationTimeParseError",
]
