"""
Core module for track-codec.

This module provides the foundational components used throughout the package:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation for the CLI
    - logger: Logging system with console and file outputs

Usage:
    from track_codec.core import (
        Config, load_config,
        setup_logging, get_logger,
        TrackCodecError, TrackDecodeError, TrackEncodeError
    )
"""

from track_codec.core.config import (
    Config,
    LoggingConfig,
    OutputConfig,
    load_config,
)
from track_codec.core.exceptions import (
    ConfigError,
    TrackCodecError,
    TrackDecodeError,
    TrackEncodeError,
    TrackFramingError,
    TrackTextError,
    TrackTruncatedError,
)
from track_codec.core.logger import (
    get_logger,
    log_decode_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
    # Exceptions
    "TrackCodecError",
    "ConfigError",
    "TrackDecodeError",
    "TrackTruncatedError",
    "TrackFramingError",
    "TrackTextError",
    "TrackEncodeError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_decode_failure",
    "shutdown_logging",
]
