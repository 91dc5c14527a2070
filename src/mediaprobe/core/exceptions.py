"""Exceptions for ffprobe output parsing."""

from typing import Any, Optional


class FFProbeError(Exception):
    """Base exception for ffprobe errors."""

    pass


class FFProbeParseError(FFProbeError):
    """Raised when parsing ffprobe output fails."""

    pass


class MalformedLiteralError(FFProbeParseError):
    """Raised when a string looks like a typed literal but cannot be converted."""

    def __init__(self, message: str, value: Optional[Any] = None):
        super().__init__(message)
        self.value = value


class CreationTimeParseError(FFProbeParseError):
    """Raised when the container creation timestamp is malformed."""

    def __init__(self, message: str, value: Optional[Any] = None):
        super().__init__(message)
        self.value = value
