"""mediaprobe package initialization."""

from typing import Optional

import structlog

from .common.config import Config, FileLoggingConfig, LoggingConfig, ProbeConfig
from .common.logging_config import setup_logging
from .core.exceptions import (
    CreationTimeParseError,
    FFProbeError,
    FFProbeParseError,
    MalformedLiteralError,
)
from .parsers import (
    AudioStreamInfo,
    FFProbeMetadata,
    FFProbeParser,
    Validity,
    VideoStreamInfo,
    channel_layout_name,
    coerce,
    coerce_string,
    evaluate_validity,
    parse_metadata,
)

__version__ = "0.1.0"
__all__ = [
    "Config",
    "FileLoggingConfig",
    "LoggingConfig",
    "ProbeConfig",
    "setup_logging",
    "get_config",
    "configure",
    "FFProbeError",
    "FFProbeParseError",
    "MalformedLiteralError",
    "CreationTimeParseError",
    "AudioStreamInfo",
    "FFProbeMetadata",
    "FFProbeParser",
    "Validity",
    "VideoStreamInfo",
    "channel_layout_name",
    "coerce",
    "coerce_string",
    "evaluate_validity",
    "parse_metadata",
]

# Module-level logger (not configured yet)
logger = structlog.get_logger(__name__)

_config: Optional[Config] = None


def configure(config: Optional[Config] = None) -> Config:
    """
    Configure the mediaprobe package.

    Call once at application startup to install the configuration and
    set up logging.

    Args:
        config: Pre-loaded Config object (defaults are used when omitted)

    Returns:
        The active Config

    Example:
        >>> import mediaprobe
        >>> from pathlib import Path
        >>> mediaprobe.configure(mediaprobe.Config.from_yaml(Path("config.yaml")))
    """
    global _config
    _config = config if config is not None else Config()
    setup_logging(_config.logging)
    logger.info("mediaprobe_configured", version=__version__)
    return _config


def get_config() -> Config:
    """
    Get current configuration, initializing with defaults if needed.

    Returns:
        Current Config object
    """
    global _config
    if _config is None:
        _config = Config()
        setup_logging(_config.logging)
    return _config
