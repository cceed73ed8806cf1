"""
Serialized track codec.

This module converts between TrackInfo values and the framed binary
track format (version 2) used by Lavalink / Lavaplayer audio servers.

Components:
    - DataReader / DataWriter: Byte-level primitives
    - read_frame / wrap_frame: Container framing
    - TrackInfo: Decoded track model
    - decode / encode: Public entry points with optional details hooks

Usage:
    from track_codec.codec import decode, encode_base64

    info = decode(encoded)
    assert encode_base64(info) == encoded
"""

from track_codec.codec.binary import DataReader, DataWriter
from track_codec.codec.framing import (
    TRACK_INFO_VERSIONED,
    frame_size,
    read_frame,
    wrap_frame,
)
from track_codec.codec.models import TrackInfo, merge_details
from track_codec.codec.source import TrackSource, open_reader
from track_codec.codec.track import (
    TRACK_INFO_VERSION,
    DetailsDecoder,
    DetailsEncoder,
    decode,
    decode_all,
    encode,
    encode_base64,
)

__all__ = [
    # Primitives
    "DataReader",
    "DataWriter",
    # Framing
    "TRACK_INFO_VERSIONED",
    "frame_size",
    "read_frame",
    "wrap_frame",
    # Models
    "TrackInfo",
    "merge_details",
    # Input
    "TrackSource",
    "open_reader",
    # Codec
    "TRACK_INFO_VERSION",
    "DetailsDecoder",
    "DetailsEncoder",
    "decode",
    "decode_all",
    "encode",
    "encode_base64",
]
