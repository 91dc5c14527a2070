"""Common utilities for mediaprobe."""

from .config import Config, FileLoggingConfig, LoggingConfig, ProbeConfig
from .logging_config import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    "Config",
    "FileLoggingConfig",
    "LoggingConfig",
    "ProbeConfig",
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
