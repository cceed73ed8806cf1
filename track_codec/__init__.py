"""
track-codec: Encode and decode Lavalink / Lavaplayer audio tracks.

Audio servers speaking the Lavalink protocol hand out every track as an
opaque base64 string. This package converts between that string and a
structured TrackInfo value, byte-for-byte compatible with the server's
track format version 2.

Architecture:
    codec/binary.py     Big-endian reader / writer primitives
    codec/framing.py    32-bit flags + size header around each track
    codec/models.py     TrackInfo and the details merge step
    codec/source.py     Resolves base64 text, bytes or a reader into one reader
    codec/track.py      Field order, details hooks, decode / encode
    core/               Configuration, logging, exceptions
    cli.py              Command-line interface

Usage:
    Command Line:
        track-codec decode "QAAAjQIAJVJpY2sgQXN0bGV5..."
        track-codec encode tracks.yaml

    Python API:
        from track_codec import decode, encode, TrackInfo

        info = decode(encoded)
        print(f"{info.title} by {info.author}")

        raw = encode(info)

    Source-specific fields:
        def write_isrc(writer, info):
            writer.write_nullable_text(info.details.get("isrc"))

        def read_isrc(reader, source_name):
            return {"isrc": reader.read_nullable_text()}

        raw = encode(info, write_isrc)
        info = decode(raw, read_isrc)

Dependencies:
    - rich-click: CLI framework and colors
    - pyyaml: Configuration and track info files
    - tqdm: Progress bars
    - colorama: Console colors
"""

__version__ = "0.1.0"
__author__ = "track-codec"
__license__ = "MIT"

# Convenience imports for common usage
from track_codec.codec import (
    DataReader,
    DataWriter,
    TrackInfo,
    decode,
    decode_all,
    encode,
    encode_base64,
)
from track_codec.core import (
    ConfigError,
    TrackCodecError,
    TrackDecodeError,
    TrackEncodeError,
    TrackFramingError,
    TrackTextError,
    TrackTruncatedError,
    get_logger,
)

__all__ = [
    # Version
    "__version__",
    # Codec
    "decode",
    "decode_all",
    "encode",
    "encode_base64",
    "TrackInfo",
    "DataReader",
    "DataWriter",
    # Exceptions
    "TrackCodecError",
    "ConfigError",
    "TrackDecodeError",
    "TrackTruncatedError",
    "TrackFramingError",
    "TrackTextError",
    "TrackEncodeError",
    # Logging
    "get_logger",
]
