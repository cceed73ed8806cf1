"""
Exception classes for track-codec.

This module defines all custom exceptions used throughout the package.
Each exception carries a human-readable message plus a details dictionary
with enough context (byte offset, field index, declared size) to diagnose
a malformed track without re-running the decode.

Exception Hierarchy:
    TrackCodecError (base)
        ConfigError - Configuration file issues
        TrackDecodeError - Any failure while decoding a track
            TrackTruncatedError - A read went past the end of the buffer
                TrackFramingError - Container header problems
            TrackTextError - Invalid UTF-8 in a text field
        TrackEncodeError - Track info that cannot be encoded
"""


class TrackCodecError(Exception):
    """
    Base exception for all track-codec errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every codec failure with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional context (offsets, field names).

    Example:
        try:
            info = decode(encoded)
        except TrackCodecError as e:
            logger.error(f"Bad track: {e.message}")
            logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional context about
                     the error. Common keys include:
                     - 'offset': Absolute byte offset of the failed read
                     - 'field_index': 1-based index of the track field
                     - 'field': Name of the track field
                     - 'original_error': The underlying exception text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(TrackCodecError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - Explicit --config path does not exist
        - Invalid YAML syntax
        - Unknown logging level or output format

    Example:
        raise ConfigError(
            "'output.format' must be one of: json, yaml",
            details={'field': 'output.format', 'value': 'xml'}
        )
    """
    pass


class TrackDecodeError(TrackCodecError):
    """
    Raised when a serialized track cannot be decoded.

    A decode either returns a complete TrackInfo or raises this (or a
    subclass); a partially populated result is never returned.
    """
    pass


class TrackTruncatedError(TrackDecodeError):
    """
    Raised when a fixed-width value or a length prefix would read past
    the end of the available bytes.

    Example:
        raise TrackTruncatedError(
            "Unexpected end of track data at offset 40: need 8 bytes, 3 available",
            details={'offset': 40, 'needed': 8, 'available': 3}
        )
    """
    pass


class TrackFramingError(TrackTruncatedError):
    """
    Raised when the container header does not match the bytes supplied.

    A frame shorter than its header declares is a truncated track, which
    is why this derives from TrackTruncatedError.

    Common causes:
        - Declared payload size larger than the bytes available
        - Bytes left over after the declared frame in a complete buffer
        - Version flag not set in the header
        - Input text is not valid base64
    """
    pass


class TrackTextError(TrackDecodeError):
    """
    Raised when a length-prefixed text field is not valid (modified) UTF-8.
    """
    pass


class TrackEncodeError(TrackCodecError):
    """
    Raised when a track info value cannot be written to the wire format.

    Common causes:
        - Text longer than 65535 bytes once encoded
        - Integers outside the signed 64-bit range
        - Required keys missing from a track info mapping
    """
    pass
